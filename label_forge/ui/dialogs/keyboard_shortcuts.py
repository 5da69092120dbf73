# label_forge/ui/dialogs/keyboard_shortcuts.py
"""Keyboard shortcuts reference dialog."""
from __future__ import annotations

from PySide6 import QtWidgets

SHORTCUTS = [
    # Canvas
    ("Canvas", "Drag element", "Move (stays inside the label)"),
    ("Canvas", "Drag handle", "Resize from an edge or corner"),
    ("Canvas", "Click empty label", "Clear selection"),
    ("Canvas", "Ctrl + Mouse Wheel", "Zoom in / out"),

    # Selected element
    ("Element", "Arrow keys", "Move by 1 px"),
    ("Element", "Shift + Arrow keys", "Move by 10 px"),
    ("Element", "Delete / Backspace", "Delete element"),

    # Design
    ("Design", "Ctrl+E", "Generate printer code"),
    ("Design", "Ctrl+L", "Load design from code"),
]


def build_keyboard_shortcuts_dialog(parent: QtWidgets.QWidget | None = None) -> QtWidgets.QDialog:
    """Build (without showing) the shortcuts reference dialog."""
    dlg = QtWidgets.QDialog(parent)
    dlg.setWindowTitle("Keyboard Shortcuts")

    layout = QtWidgets.QVBoxLayout(dlg)
    layout.addWidget(QtWidgets.QLabel(
        "<b>Keyboard & Mouse Shortcuts</b><br>"
        "<span style='color: #666;'>Arrow keys only act while no text field has focus.</span>"
    ))

    table = QtWidgets.QTableWidget(len(SHORTCUTS), 3, dlg)
    table.setObjectName("shortcutsTable")
    table.setHorizontalHeaderLabels(["Context", "Shortcut", "Action"])
    table.horizontalHeader().setStretchLastSection(True)
    table.verticalHeader().setVisible(False)
    table.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
    table.setSelectionMode(QtWidgets.QAbstractItemView.NoSelection)

    for row, entry in enumerate(SHORTCUTS):
        for col, text in enumerate(entry):
            cell = QtWidgets.QTableWidgetItem(text)
            if col == 1:
                font = cell.font()
                font.setBold(True)
                cell.setFont(font)
            table.setItem(row, col, cell)
    table.resizeColumnsToContents()
    layout.addWidget(table)

    btn_box = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Close)
    btn_box.rejected.connect(dlg.reject)
    layout.addWidget(btn_box)

    dlg.resize(520, 360)
    return dlg


def show_keyboard_shortcuts_dialog(parent: QtWidgets.QWidget) -> None:
    """Display the shortcuts reference modally."""
    build_keyboard_shortcuts_dialog(parent).exec()
