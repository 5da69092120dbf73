# label_forge/ui/dialogs/load_design.py
"""Paste printer code and load it as the current design."""
from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6 import QtWidgets

from ...core.exceptions import LabelError, friendly_message

if TYPE_CHECKING:
    from ...core.document import Document

_CODE_STYLE = (
    "QPlainTextEdit { background: #111827; color: #4ade80; "
    "font-family: 'Courier New', monospace; font-size: 11px; }"
)


class LoadDesignDialog(QtWidgets.QDialog):
    """
    Paste area + Clear / Load.

    Load replaces the design only when the whole code parses; otherwise the
    error is shown and the dialog stays open with the document untouched.
    """

    def __init__(self, document: "Document", parent: QtWidgets.QWidget | None = None):
        super().__init__(parent)
        self.document = document
        self.setWindowTitle("Load Design from Code")
        self.resize(640, 460)

        layout = QtWidgets.QVBoxLayout(self)
        layout.addWidget(QtWidgets.QLabel("<b>Paste ZPL Code</b>"))

        self.ed_code = QtWidgets.QPlainTextEdit()
        self.ed_code.setStyleSheet(_CODE_STYLE)
        self.ed_code.setPlaceholderText("Paste your ZPL code here...")
        self.ed_code.textChanged.connect(self._update_buttons)
        layout.addWidget(self.ed_code)

        row = QtWidgets.QHBoxLayout()
        row.addStretch(1)
        self.btn_clear = QtWidgets.QPushButton("Clear")
        self.btn_clear.clicked.connect(self.ed_code.clear)
        row.addWidget(self.btn_clear)
        self.btn_load = QtWidgets.QPushButton("Load Design")
        self.btn_load.setDefault(True)
        self.btn_load.clicked.connect(self.load)
        row.addWidget(self.btn_load)
        layout.addLayout(row)

        self.last_error: str | None = None
        self._update_buttons()

    def set_code(self, text: str) -> None:
        self.ed_code.setPlainText(text)

    def _update_buttons(self) -> None:
        self.btn_load.setEnabled(bool(self.ed_code.toPlainText().strip()))

    def load(self) -> bool:
        """Decode into the document. Returns True and closes on success."""
        code = self.ed_code.toPlainText()
        if not code.strip():
            return False
        try:
            self.document.load_code(code)
        except LabelError as e:
            self.last_error = friendly_message(e)
            QtWidgets.QMessageBox.warning(
                self,
                "Load Design",
                "Error parsing the provided code. Please check the format and try again.\n\n"
                f"{self.last_error}",
            )
            return False
        self.last_error = None
        self.ed_code.clear()
        self.accept()
        return True
