"""
Tests for the ZPL codec: encoding, decoding, and what survives a round trip.
"""

import random
import string

import pytest

from label_forge.core.document import Document
from label_forge.core.exceptions import CodeDecodeError, CodeEncodeError
from label_forge.core.utils import round_half_up
from label_forge.core.models import (
    BarcodeElement,
    Element,
    IdAllocator,
    ImageElement,
    LabelSettings,
    QrElement,
    TextElement,
)
from label_forge.core import zpl


class _Label:
    def __init__(self, elements, settings=None):
        self.settings = settings or LabelSettings()
        self.elements = list(elements)


HI_LABEL = "\n".join([
    "^XA",
    "^PW812",
    "^LL609",
    "^FO10,20^A0N,21,21^FDHi^FS",
    "^XZ",
])


class TestEncodeLabel:
    """Whole-label output."""

    def test_text_label(self):
        """A 4x3 label with one text element encodes to the exact block."""
        label = _Label([TextElement(id=1, x=10, y=20, content="Hi", font_size=14)])
        assert zpl.encode(label) == HI_LABEL

    def test_empty_document(self):
        """No elements still gives the start, size, and end commands."""
        assert zpl.encode(Document()) == "^XA\n^PW812\n^LL609\n^XZ"

    def test_no_trailing_newline(self):
        assert not zpl.encode(Document()).endswith("\n")

    def test_dimensions_round_half_up(self):
        """2.5in * 203 = 507.5 dots -> 508."""
        label = _Label([], LabelSettings(width=2.5, height=1))
        lines = zpl.encode(label).split("\n")
        assert lines[1] == "^PW508"
        assert lines[2] == "^LL203"

    def test_document_order_preserved(self):
        label = _Label([
            QrElement(id=1, x=0, y=0),
            TextElement(id=2, x=1, y=1, content="A"),
            BarcodeElement(id=3, x=2, y=2),
        ])
        body = zpl.encode(label).split("\n")[3:-1]
        assert zpl.classify_line(body[0]) == "qr"
        assert zpl.classify_line(body[1]) == "text"
        assert zpl.classify_line(body[2]) == "barcode"

    def test_image_is_skipped(self):
        label = _Label([ImageElement(id=1), TextElement(id=2, content="x")])
        assert zpl.encode(label).count("^FO") == 1

    def test_unknown_element_type_raises(self):
        class Odd(Element):
            pass

        with pytest.raises(CodeEncodeError):
            zpl.encode_element(Odd(id=1))


class TestEncodeElements:
    """Per-element command lines."""

    def test_text_coordinates_round_half_up(self):
        line = zpl.encode_element(TextElement(id=1, x=20.5, y=7.4, content="A"))
        assert line.startswith("^FO21,7^A0N,")

    def test_font_size_scaled(self):
        """font_size 11 * 1.5 = 16.5 -> 17."""
        line = zpl.encode_element(TextElement(id=1, font_size=11, content="A"))
        assert "^A0N,17,17" in line

    @pytest.mark.parametrize("rotation,code", [(0, "N"), (90, "R"), (180, "I"), (270, "B")])
    def test_rotation_codes(self, rotation, code):
        line = zpl.encode_element(TextElement(id=1, rotation=rotation, content="A"))
        assert f"^A0{code}," in line

    def test_unexpected_rotation_is_normal(self):
        assert zpl.rotation_code(45) == "N"
        assert zpl.rotation_code("nope") == "N"

    def test_barcode(self):
        elem = BarcodeElement(id=1, x=5, y=6, height=40, data="12345")
        assert zpl.encode_element(elem) == "^FO5,6^BY2,3,40^BCN,,Y,N^FD12345^FS"

    def test_barcode_type_always_code128(self):
        elem = BarcodeElement(id=1, barcode_type="EAN-13", data="1")
        assert "^BCN,,Y,N" in zpl.encode_element(elem)

    def test_qr_magnification(self):
        """width 64 / 10 = 6.4 -> 6; width 65 -> 7 (half up)."""
        assert "^BQN,2,6^" in zpl.encode_element(QrElement(id=1, width=64))
        assert "^BQN,2,7^" in zpl.encode_element(QrElement(id=1, width=65))

    def test_qr_data_prefix(self):
        line = zpl.encode_element(QrElement(id=1, x=0, y=0, data="abc"))
        assert line.endswith("^FDQA,abc^FS")

    def test_bold_threshold(self):
        assert zpl.text_is_bold(TextElement(id=1, font_weight="600"))
        assert not zpl.text_is_bold(TextElement(id=1, font_weight="500"))
        assert not zpl.text_is_bold(TextElement(id=1, font_weight="oops"))


class TestDecode:
    """Parsing printer code back into label settings and elements."""

    def test_text_label(self):
        decoded = zpl.decode(HI_LABEL, base_ms=1000)
        assert len(decoded.elements) == 1
        elem = decoded.elements[0]
        assert isinstance(elem, TextElement)
        assert (elem.x, elem.y) == (10, 20)
        assert elem.content == "Hi"
        assert elem.font_size == 14
        assert elem.rotation == 0

    def test_label_size_from_dots(self):
        decoded = zpl.decode(HI_LABEL)
        assert decoded.settings.width == pytest.approx(812 / 203)
        assert decoded.settings.height == pytest.approx(609 / 203)
        assert decoded.settings.unit == "in"

    def test_unrecognised_line_skipped(self):
        text = HI_LABEL.replace("^XZ", "^GB100,100,3^FS\n^XZ")
        decoded = zpl.decode(text)
        assert len(decoded.elements) == 1
        assert decoded.skipped_lines == 1

    def test_missing_dimensions_use_defaults(self):
        decoded = zpl.decode("^XA\n^XZ")
        assert (decoded.settings.width, decoded.settings.height) == (4.0, 3.0)
        assert decoded.elements == []

    def test_small_label_clamped_to_one_unit(self):
        decoded = zpl.decode("^XA\n^PW100\n^LL50\n^XZ")
        assert decoded.settings.width == 1.0
        assert decoded.settings.height == 1.0

    def test_lines_are_trimmed(self):
        decoded = zpl.decode("  ^XA\r\n   ^FO1,2^A0N,21,21^FDx^FS   \r\n^XZ")
        assert decoded.elements[0].content == "x"

    def test_barcode_line(self):
        decoded = zpl.decode("^FO5,6^BY2,3,55^BCN,,Y,N^FD987^FS")
        elem = decoded.elements[0]
        assert isinstance(elem, BarcodeElement)
        assert (elem.x, elem.y, elem.width, elem.height) == (5, 6, 120.0, 55)
        assert elem.data == "987"

    def test_qr_line(self):
        decoded = zpl.decode("^FO7,8^BQN,2,6^FDQA,https://example.com^FS")
        elem = decoded.elements[0]
        assert isinstance(elem, QrElement)
        assert (elem.width, elem.height) == (64.0, 64.0)
        assert elem.data == "https://example.com"

    def test_text_marker_wins(self):
        """A line carrying both ^A0 and ^BC is read as text."""
        assert zpl.classify_line("^FO1,1^A0N,21,21^BC^FDx^FS") == "text"

    def test_line_without_origin_ignored(self):
        assert zpl.classify_line("^A0N,21,21^FDx^FS") is None

    def test_incomplete_element_skipped(self):
        decoded = zpl.decode("^FO1,1^A0N,21,21\n^FO2,2^A0N,21,21^FDok^FS")
        assert [e.content for e in decoded.elements] == ["ok"]
        assert decoded.skipped_lines == 1

    def test_missing_font_size_defaults(self):
        decoded = zpl.decode("^FO1,1^A0N^FDx^FS")
        assert decoded.elements[0].font_size == 14.0

    def test_bad_width_raises(self):
        with pytest.raises(CodeDecodeError) as info:
            zpl.decode("^XA\n^PWwide\n^XZ")
        assert info.value.line_no == 2

    def test_none_raises(self):
        with pytest.raises(CodeDecodeError):
            zpl.decode(None)

    def test_ids_unique_within_decode(self):
        text = "\n".join([
            "^FO1,1^A0N,21,21^FDa^FS",
            "^FO1,1^A0N,21,21^FDb^FS",
            "^FO1,1^BY2,3,40^BCN,,Y,N^FDc^FS",
        ])
        decoded = zpl.decode(text, base_ms=5000)
        ids = [e.id for e in decoded.elements]
        assert len(set(ids)) == 3
        assert ids[:2] == [5000, 5001]

    def test_allocator_advanced_only_on_success(self):
        ids = IdAllocator(last=10)
        with pytest.raises(CodeDecodeError):
            zpl.decode("^FO1,1^A0N,21,21^FDa^FS\n^LL", ids=ids, base_ms=100)
        assert ids.last == 10

        zpl.decode("^FO1,1^A0N,21,21^FDa^FS", ids=ids, base_ms=100)
        assert ids.last == 100


class TestRoundTrip:
    """What survives encode -> decode."""

    def test_lossy_fields_reset(self):
        label = _Label([
            TextElement(
                id=1, x=30, y=40, content="Bold", font_size=14,
                font_family="Courier New", font_weight="700", rotation=90,
            ),
        ])
        elem = zpl.decode(zpl.encode(label)).elements[0]
        assert (elem.x, elem.y, elem.content) == (30, 40, "Bold")
        assert elem.font_family == "Arial"
        assert elem.font_weight == "400"
        assert elem.rotation == 0

    def test_empty_text_is_dropped(self):
        """^FD^FS carries no data, so the line is skipped."""
        label = _Label([TextElement(id=1, content="")])
        assert zpl.decode(zpl.encode(label)).elements == []


class TestRandomRoundTrip:
    """Mixed documents keep every field the encoder writes."""

    def _random_element(self, rng, new_id):
        x = round(rng.uniform(0, 300), 2)
        y = round(rng.uniform(0, 250), 2)
        kind = rng.choice(["text", "barcode", "qr"])
        if kind == "text":
            content = "".join(rng.choice(string.ascii_letters + " ") for _ in range(rng.randint(1, 12)))
            return TextElement(
                id=new_id, x=x, y=y,
                content=content.strip() or "A",
                font_size=rng.choice([6, 9.5, 11, 13, 14, 22.25, 40]),
            )
        if kind == "barcode":
            data = "".join(rng.choice(string.digits) for _ in range(rng.randint(1, 14)))
            return BarcodeElement(id=new_id, x=x, y=y, data=data, height=round(rng.uniform(10, 100), 2))
        return QrElement(id=new_id, x=x, y=y, data=f"https://example.com/{new_id}?q=a:b")

    def test_fields_survive(self):
        rng = random.Random(11)
        for _ in range(200):
            original = [self._random_element(rng, i + 1) for i in range(5)]
            decoded = zpl.decode(zpl.encode(_Label(original)), base_ms=1).elements

            assert [type(e) for e in decoded] == [type(e) for e in original]
            assert len({e.id for e in decoded}) == len(decoded)
            for src, out in zip(original, decoded):
                assert out.x == round_half_up(src.x)
                assert out.y == round_half_up(src.y)
                if isinstance(src, TextElement):
                    assert out.content == src.content
                    assert abs(out.font_size - src.font_size) <= 1 / 3
                elif isinstance(src, BarcodeElement):
                    assert out.data == src.data
                    assert out.height == round_half_up(src.height)
                else:
                    assert out.data == src.data

    def test_fractional_font_size(self):
        """13pt is written as 20 dots and read back as 13.33."""
        label = _Label([TextElement(id=1, font_size=13, content="A")])
        code = zpl.encode(label)
        assert "^A0N,20,20" in code
        assert zpl.decode(code).elements[0].font_size == pytest.approx(20 / 1.5)
