"""
Tests for Document mutations, form-boundary fallbacks, and loading code.
"""

import pytest

from label_forge.core.document import Document
from label_forge.core.exceptions import CodeDecodeError
from label_forge.core.models import (
    BarcodeElement,
    ElementKind,
    LabelSettings,
    QrElement,
    TextElement,
)


@pytest.fixture
def doc():
    return Document()


@pytest.fixture
def events(doc):
    seen = []
    doc.add_listener(seen.append)
    return seen


class TestCreate:
    """create_element appends with kind defaults and selects."""

    def test_text_defaults(self, doc):
        elem = doc.create_element(ElementKind.TEXT)
        assert isinstance(elem, TextElement)
        assert (elem.x, elem.y, elem.width, elem.height) == (20, 20, 100, 20)
        assert elem.content == "New Text"
        assert elem.font_size == 14
        assert elem.font_family == "Arial"
        assert elem.font_weight == "400"
        assert elem.rotation == 0

    def test_barcode_defaults(self, doc):
        elem = doc.create_element("barcode")
        assert isinstance(elem, BarcodeElement)
        assert (elem.width, elem.height) == (120, 40)
        assert elem.data == "12345"
        assert elem.barcode_type == "Code 128"

    def test_qr_defaults(self, doc):
        elem = doc.create_element("qr")
        assert isinstance(elem, QrElement)
        assert (elem.width, elem.height) == (64, 64)
        assert elem.data == "https://vercel.com"

    def test_selects_and_appends(self, doc, events):
        a = doc.create_element("text")
        b = doc.create_element("qr")
        assert doc.selected_id == b.id
        assert [e.id for e in doc.elements] == [a.id, b.id]
        assert len(events) == 2

    def test_ids_unique(self, doc):
        ids = {doc.create_element("text").id for _ in range(50)}
        assert len(ids) == 50

    def test_negative_position_clamped(self, doc):
        elem = doc.create_element("text", x=-5, y=-1)
        assert (elem.x, elem.y) == (0, 0)

    def test_unknown_kind_raises(self, doc):
        with pytest.raises(ValueError):
            doc.create_element("triangle")


class TestUpdate:
    """update_element merges a patch with form fallbacks."""

    def test_merge(self, doc, events):
        elem = doc.create_element("text")
        doc.update_element(elem.id, {"content": "Hello", "font_size": "18"})
        assert elem.content == "Hello"
        assert elem.font_size == 18
        assert len(events) == 2

    def test_unknown_id_ignored(self, doc, events):
        doc.update_element(999, {"x": 5})
        assert events == []

    def test_foreign_fields_ignored(self, doc):
        elem = doc.create_element("barcode")
        doc.update_element(elem.id, {"content": "nope", "id": 1})
        assert not hasattr(elem, "content")
        assert elem.id != 1

    def test_position_falls_back_to_zero(self, doc):
        elem = doc.create_element("text")
        doc.update_element(elem.id, {"x": "", "y": "abc"})
        assert (elem.x, elem.y) == (0, 0)

    def test_size_keeps_previous(self, doc):
        elem = doc.create_element("text")
        doc.update_element(elem.id, {"width": "wide", "height": None})
        assert (elem.width, elem.height) == (100, 20)

    def test_font_size_non_positive_keeps_previous(self, doc):
        elem = doc.create_element("text")
        doc.update_element(elem.id, {"font_size": 0})
        assert elem.font_size == 14

    def test_invalid_rotation_ignored(self, doc):
        elem = doc.create_element("text")
        doc.update_element(elem.id, {"rotation": 45})
        assert elem.rotation == 0
        doc.update_element(elem.id, {"rotation": "90"})
        assert elem.rotation == 90

    def test_invalid_choice_ignored(self, doc):
        elem = doc.create_element("text")
        doc.update_element(elem.id, {"font_family": "Comic Sans", "font_weight": "700"})
        assert elem.font_family == "Arial"
        assert elem.font_weight == "700"


class TestDeleteSelect:
    def test_delete_clears_selection(self, doc):
        elem = doc.create_element("text")
        doc.delete_element(elem.id)
        assert len(doc) == 0
        assert doc.selected() is None

    def test_delete_other_keeps_selection(self, doc):
        a = doc.create_element("text")
        b = doc.create_element("text")
        doc.delete_element(a.id)
        assert doc.selected_id == b.id

    def test_delete_unknown_is_noop(self, doc, events):
        doc.delete_element(42)
        assert events == []

    def test_clear_all(self, doc):
        doc.create_element("text")
        doc.create_element("qr")
        doc.clear_all()
        assert doc.elements == ()
        assert doc.selected_id is None

    def test_select_unknown_clears(self, doc):
        doc.create_element("text")
        doc.select(12345)
        assert doc.selected_id is None

    def test_select_same_does_not_notify(self, doc, events):
        elem = doc.create_element("text")
        doc.select(elem.id)
        assert len(events) == 1

    def test_remove_listener(self, doc, events):
        doc.remove_listener(events.append)
        doc.create_element("text")
        assert events == []


class TestLabelSettings:
    def test_apply(self, doc):
        doc.set_label_settings(width="2", height=1.5, unit="mm")
        assert (doc.settings.width, doc.settings.height, doc.settings.unit) == (2, 1.5, "mm")

    def test_invalid_keeps_previous(self, doc, events):
        doc.set_label_settings(width="-1", height="abc", unit="ft")
        assert (doc.settings.width, doc.settings.height, doc.settings.unit) == (4, 3, "in")
        assert events == []

    def test_canvas_size(self):
        s = LabelSettings(width=4, height=3)
        assert (s.canvas_width, s.canvas_height) == (384, 288)


class TestLoadCode:
    def test_replaces_design(self, doc, events):
        doc.create_element("qr")
        doc.set_label_settings(unit="mm")
        events.clear()

        decoded = doc.load_code("^XA\n^PW406\n^LL203\n^FO1,2^A0N,21,21^FDHi^FS\n^XZ")

        assert [e.content for e in doc.elements] == ["Hi"]
        assert doc.settings.width == 2
        assert doc.settings.height == 1
        assert doc.settings.unit == "in"
        assert doc.selected_id is None
        assert decoded.elements[0] is doc.elements[0]
        assert len(events) == 1

    def test_failure_leaves_document(self, doc, events):
        elem = doc.create_element("text")
        events.clear()
        with pytest.raises(CodeDecodeError):
            doc.load_code("^XA\n^PW\n^XZ")
        assert doc.elements == (elem,)
        assert doc.selected_id == elem.id
        assert events == []

    def test_loaded_ids_do_not_collide(self, doc):
        first = doc.create_element("text")
        doc.load_code("^FO1,1^A0N,21,21^FDa^FS")
        loaded = doc.elements[0]
        new = doc.create_element("text")
        assert len({first.id, loaded.id, new.id}) == 3

    def test_encode_matches_codec(self, doc):
        doc.create_element("text", x=10, y=20)
        assert "^FO10,20^A0N,21,21^FDNew Text^FS" in doc.encode()
