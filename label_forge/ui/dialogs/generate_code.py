# label_forge/ui/dialogs/generate_code.py
"""Read-only view of the generated printer code with copy-to-clipboard."""
from __future__ import annotations

from PySide6 import QtGui, QtWidgets

_CODE_STYLE = (
    "QPlainTextEdit { background: #111827; color: #4ade80; "
    "font-family: 'Courier New', monospace; font-size: 11px; }"
)


class GenerateCodeDialog(QtWidgets.QDialog):
    """Shows ZPL for the current design; EPL is listed but not available yet."""

    def __init__(self, code: str, parent: QtWidgets.QWidget | None = None):
        super().__init__(parent)
        self.setWindowTitle("Generated Printer Code")
        self.resize(640, 460)

        layout = QtWidgets.QVBoxLayout(self)

        form = QtWidgets.QFormLayout()
        self.cb_language = QtWidgets.QComboBox()
        self.cb_language.addItem("ZPL (Zebra)", "zpl")
        self.cb_language.addItem("EPL (Eltron)", "epl")
        # EPL output is not implemented; keep it visible but disabled
        model = self.cb_language.model()
        epl_item = model.item(1) if hasattr(model, "item") else None
        if epl_item is not None:
            epl_item.setEnabled(False)
        form.addRow("Printer language:", self.cb_language)
        layout.addLayout(form)

        self.ed_code = QtWidgets.QPlainTextEdit()
        self.ed_code.setReadOnly(True)
        self.ed_code.setStyleSheet(_CODE_STYLE)
        self.ed_code.setPlaceholderText("Generated code will appear here...")
        self.ed_code.setPlainText(code)
        layout.addWidget(self.ed_code)

        self.btn_copy = QtWidgets.QPushButton("Copy to Clipboard")
        self.btn_copy.clicked.connect(self.copy_to_clipboard)
        layout.addWidget(self.btn_copy)

        buttons = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Close)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def code(self) -> str:
        return self.ed_code.toPlainText()

    def copy_to_clipboard(self) -> None:
        QtGui.QGuiApplication.clipboard().setText(self.code())
        self.btn_copy.setText("Copied!")
