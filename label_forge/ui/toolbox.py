# label_forge/ui/toolbox.py

from __future__ import annotations
from PySide6 import QtCore, QtWidgets


class Toolbox(QtWidgets.QWidget):
    add_text = QtCore.Signal()
    add_barcode = QtCore.Signal()
    add_qr = QtCore.Signal()

    clear_canvas = QtCore.Signal()
    load_design = QtCore.Signal()
    generate_code = QtCore.Signal()
    show_shortcuts = QtCore.Signal()

    grid_toggled = QtCore.Signal(bool)
    rulers_toggled = QtCore.Signal(bool)

    def __init__(self, parent=None, *, show_grid: bool = True, show_rulers: bool = True):
        super().__init__(parent)
        self._build_ui(show_grid, show_rulers)

    def _make_button(self, label: str, signal: QtCore.Signal) -> QtWidgets.QPushButton:
        btn = QtWidgets.QPushButton(label)
        btn.clicked.connect(signal.emit)
        btn.setMinimumHeight(32)
        btn.setSizePolicy(
            QtWidgets.QSizePolicy.Expanding,
            QtWidgets.QSizePolicy.Fixed,
        )
        return btn

    def _build_ui(self, show_grid: bool, show_rulers: bool):
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)
        layout.setSpacing(10)

        # --- Elements ---
        grp_add = QtWidgets.QGroupBox("Toolbox")
        add_layout = QtWidgets.QVBoxLayout(grp_add)
        add_layout.addWidget(self._make_button("Add Text", self.add_text))
        add_layout.addWidget(self._make_button("Add Barcode", self.add_barcode))
        add_layout.addWidget(self._make_button("Add QR Code", self.add_qr))
        layout.addWidget(grp_add)

        # --- Canvas ---
        grp_canvas = QtWidgets.QGroupBox("Canvas")
        canvas_layout = QtWidgets.QVBoxLayout(grp_canvas)

        self.chk_grid = QtWidgets.QCheckBox("Show grid")
        self.chk_grid.setChecked(show_grid)
        self.chk_grid.toggled.connect(self.grid_toggled.emit)
        canvas_layout.addWidget(self.chk_grid)

        self.chk_rulers = QtWidgets.QCheckBox("Show rulers")
        self.chk_rulers.setChecked(show_rulers)
        self.chk_rulers.toggled.connect(self.rulers_toggled.emit)
        canvas_layout.addWidget(self.chk_rulers)

        canvas_layout.addWidget(self._make_button("Clear Canvas", self.clear_canvas))
        layout.addWidget(grp_canvas)

        # --- Actions ---
        grp_actions = QtWidgets.QGroupBox("Actions")
        actions_layout = QtWidgets.QVBoxLayout(grp_actions)
        actions_layout.addWidget(self._make_button("Load Design", self.load_design))
        actions_layout.addWidget(self._make_button("Generate Code", self.generate_code))
        actions_layout.addWidget(self._make_button("Keyboard Shortcuts", self.show_shortcuts))
        layout.addWidget(grp_actions)

        layout.addStretch(1)
