from __future__ import annotations

from typing import Optional

from PySide6 import QtWidgets

from ..core.document import Document
from ..core.models import (
    BARCODE_TYPES,
    FONT_FAMILIES,
    FONT_WEIGHTS,
    ROTATIONS,
    BarcodeElement,
    Element,
    QrElement,
    TextElement,
)


def _fmt(value) -> str:
    """Show whole numbers without a trailing .0"""
    try:
        f = float(value)
    except (TypeError, ValueError):
        return str(value)
    return str(int(f)) if f.is_integer() else f"{f:g}"


class PropertiesPanel(QtWidgets.QWidget):
    """
    Right-side panel: label settings plus the selected element's fields.

    Every edit goes straight to the Document (which does the numeric
    fallback); refresh() pulls state back after any document change.
    """

    def __init__(self, document: Document, parent=None):
        super().__init__(parent)
        self.document = document
        self._current_id: Optional[int] = None
        self._updating_ui = False
        self._force = False

        self._build_ui()
        self.refresh()

    # ---------- construction ----------
    def _line(self, field: str, live: bool = False) -> QtWidgets.QLineEdit:
        edit = QtWidgets.QLineEdit()
        if live:
            edit.textEdited.connect(lambda text, f=field: self._set(f, text))
        else:
            edit.editingFinished.connect(lambda e=edit, f=field: self._commit(e, f))
        return edit

    def _combo(self, field: str, items) -> QtWidgets.QComboBox:
        combo = QtWidgets.QComboBox()
        for value, label in items:
            combo.addItem(label, value)
        combo.currentIndexChanged.connect(
            lambda _i, c=combo, f=field: self._set(f, c.currentData())
        )
        return combo

    def _build_ui(self):
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)

        # --- Label settings ---
        grp_label = QtWidgets.QGroupBox("Label Settings")
        form = QtWidgets.QFormLayout(grp_label)
        self.ed_label_w = QtWidgets.QLineEdit()
        self.ed_label_w.editingFinished.connect(self._apply_label)
        self.ed_label_h = QtWidgets.QLineEdit()
        self.ed_label_h.editingFinished.connect(self._apply_label)
        self.cb_unit = QtWidgets.QComboBox()
        self.cb_unit.addItem("Inches (in)", "in")
        self.cb_unit.addItem("Millimeters (mm)", "mm")
        self.cb_unit.currentIndexChanged.connect(self._apply_label)
        form.addRow("Width:", self.ed_label_w)
        form.addRow("Height:", self.ed_label_h)
        form.addRow("Unit:", self.cb_unit)
        layout.addWidget(grp_label)

        self.lbl_target = QtWidgets.QLabel("")
        layout.addWidget(self.lbl_target)

        # --- Text ---
        self.grp_text = QtWidgets.QGroupBox("Text")
        form = QtWidgets.QFormLayout(self.grp_text)
        self.ed_content = self._line("content", live=True)
        self.ed_font_size = self._line("font_size")
        self.cb_font_family = self._combo("font_family", [(f, f) for f in FONT_FAMILIES])
        self.cb_font_weight = self._combo(
            "font_weight", [(w, f"{name} ({w})") for w, name in FONT_WEIGHTS.items()]
        )
        self.cb_rotation = self._combo("rotation", [(r, f"{r}°") for r in ROTATIONS])
        form.addRow("Content:", self.ed_content)
        form.addRow("Font size:", self.ed_font_size)
        form.addRow("Font family:", self.cb_font_family)
        form.addRow("Font weight:", self.cb_font_weight)
        form.addRow("Rotation:", self.cb_rotation)
        layout.addWidget(self.grp_text)

        # --- Barcode ---
        self.grp_barcode = QtWidgets.QGroupBox("Barcode")
        form = QtWidgets.QFormLayout(self.grp_barcode)
        self.ed_barcode_data = self._line("data", live=True)
        self.cb_barcode_type = self._combo("barcode_type", [(t, t) for t in BARCODE_TYPES])
        form.addRow("Data:", self.ed_barcode_data)
        form.addRow("Type:", self.cb_barcode_type)
        layout.addWidget(self.grp_barcode)

        # --- QR ---
        self.grp_qr = QtWidgets.QGroupBox("QR Code")
        form = QtWidgets.QFormLayout(self.grp_qr)
        self.ed_qr_data = QtWidgets.QPlainTextEdit()
        self.ed_qr_data.setFixedHeight(64)
        self.ed_qr_data.textChanged.connect(
            lambda: self._set("data", self.ed_qr_data.toPlainText())
        )
        form.addRow("Data:", self.ed_qr_data)
        layout.addWidget(self.grp_qr)

        # --- Position / size ---
        self.grp_geom = QtWidgets.QGroupBox("Position && Size")
        grid = QtWidgets.QGridLayout(self.grp_geom)
        self.ed_x = self._line("x")
        self.ed_y = self._line("y")
        self.ed_w = self._line("width")
        self.ed_h = self._line("height")
        grid.addWidget(QtWidgets.QLabel("X:"), 0, 0)
        grid.addWidget(self.ed_x, 0, 1)
        grid.addWidget(QtWidgets.QLabel("Y:"), 0, 2)
        grid.addWidget(self.ed_y, 0, 3)
        grid.addWidget(QtWidgets.QLabel("W:"), 1, 0)
        grid.addWidget(self.ed_w, 1, 1)
        grid.addWidget(QtWidgets.QLabel("H:"), 1, 2)
        grid.addWidget(self.ed_h, 1, 3)

        self.btn_delete = QtWidgets.QPushButton("Delete Element")
        self.btn_delete.clicked.connect(self._delete_current)
        grid.addWidget(self.btn_delete, 2, 0, 1, 4)
        layout.addWidget(self.grp_geom)

        layout.addStretch(1)

    # ---------- edits -> document ----------
    def _commit(self, edit: QtWidgets.QLineEdit, field: str) -> None:
        edit.setModified(False)
        self._set(field, edit.text())

    def _set(self, field: str, value) -> None:
        if self._updating_ui or self._current_id is None:
            return
        self.document.update_element(self._current_id, {field: value})
        # a rejected value leaves the document as it was; show what stuck
        self.refresh()

    def _apply_label(self) -> None:
        if self._updating_ui:
            return
        self.document.set_label_settings(
            width=self.ed_label_w.text(),
            height=self.ed_label_h.text(),
            unit=self.cb_unit.currentData(),
        )
        self.refresh()

    def _delete_current(self) -> None:
        if self._current_id is not None:
            self.document.delete_element(self._current_id)

    # ---------- document -> widgets ----------
    def _put_text(self, edit: QtWidgets.QLineEdit, text: str) -> None:
        # don't fight the user while they type
        if not self._force and edit.hasFocus() and edit.isModified():
            return
        if edit.text() != text:
            edit.setText(text)

    @staticmethod
    def _put_combo(combo: QtWidgets.QComboBox, value) -> None:
        idx = combo.findData(value)
        if idx >= 0:
            combo.setCurrentIndex(idx)

    def refresh(self) -> None:
        self._updating_ui = True
        try:
            s = self.document.settings
            self._put_text(self.ed_label_w, _fmt(s.width))
            self._put_text(self.ed_label_h, _fmt(s.height))
            self._put_combo(self.cb_unit, s.unit)

            elem = self.document.selected()
            new_id = elem.id if elem is not None else None
            self._force = new_id != self._current_id
            self._current_id = new_id
            self._show_element(elem)
        finally:
            self._force = False
            self._updating_ui = False

    def _show_element(self, elem: Optional[Element]) -> None:
        self.grp_text.setVisible(isinstance(elem, TextElement))
        self.grp_barcode.setVisible(isinstance(elem, BarcodeElement))
        self.grp_qr.setVisible(isinstance(elem, QrElement))
        self.grp_geom.setVisible(elem is not None)

        if elem is None:
            self.lbl_target.setText("Select an element to edit its properties.")
            return
        self.lbl_target.setText(f"{elem.kind.value.upper()} element")

        if isinstance(elem, TextElement):
            self._put_text(self.ed_content, elem.content)
            self._put_text(self.ed_font_size, _fmt(elem.font_size))
            self._put_combo(self.cb_font_family, elem.font_family)
            self._put_combo(self.cb_font_weight, elem.font_weight)
            self._put_combo(self.cb_rotation, elem.rotation)
        elif isinstance(elem, BarcodeElement):
            self._put_text(self.ed_barcode_data, elem.data)
            self._put_combo(self.cb_barcode_type, elem.barcode_type)
        elif isinstance(elem, QrElement):
            if self.ed_qr_data.toPlainText() != elem.data and (self._force or not self.ed_qr_data.hasFocus()):
                self.ed_qr_data.setPlainText(elem.data)

        self._put_text(self.ed_x, _fmt(elem.x))
        self._put_text(self.ed_y, _fmt(elem.y))
        self._put_text(self.ed_w, _fmt(elem.width))
        self._put_text(self.ed_h, _fmt(elem.height))

    def current_element_id(self) -> Optional[int]:
        return self._current_id
