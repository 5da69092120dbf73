"""
Tests for the Qt-free helpers: numeric coercion, grid/ruler layout, errors.
"""

import math

import pytest

from label_forge.core.exceptions import (
    CodeDecodeError,
    LabelError,
    friendly_message,
    map_exception,
)
from label_forge.core.models import IdAllocator, LabelSettings
from label_forge.core.render import canvas_size, grid_lines, ruler_marks
from label_forge.core.utils import clamp, coerce_number, leading_int, round_half_up


class TestRounding:
    @pytest.mark.parametrize("value,expected", [(20.5, 21), (20.4, 20), (0.5, 1), (507.5, 508)])
    def test_half_up(self, value, expected):
        assert round_half_up(value) == expected


class TestClamp:
    def test_inside(self):
        assert clamp(5, 0, 10) == 5

    def test_inverted_range_prefers_low(self):
        assert clamp(5, 0, -20) == 0


class TestCoerceNumber:
    @pytest.mark.parametrize("value,expected", [
        ("12", 12.0),
        (" 3.5", 3.5),
        ("40px", 40.0),
        (7, 7.0),
        ("-2", -2.0),
    ])
    def test_parses(self, value, expected):
        assert coerce_number(value, None) == expected

    @pytest.mark.parametrize("value", ["", "abc", None, True, math.nan, math.inf, [1]])
    def test_fallback(self, value):
        assert coerce_number(value, 9.0) == 9.0

    def test_leading_int(self):
        assert leading_int("812") == 812
        assert leading_int("abc") is None


class TestIdAllocator:
    def test_strictly_increasing(self):
        ids = IdAllocator()
        assert [ids.allocate(100), ids.allocate(100), ids.allocate(50)] == [100, 101, 102]

    def test_fork_and_adopt(self):
        ids = IdAllocator(last=5)
        work = ids.fork()
        work.allocate(40)
        assert ids.last == 5
        ids.adopt(work)
        assert ids.last == 40


class TestCanvas:
    def test_canvas_size(self):
        assert canvas_size(LabelSettings(width=2, height=1)) == (192, 96)

    def test_grid_lines_inclusive(self):
        lines = grid_lines(40, 20)
        vertical = [l for l in lines if l[0] == l[2]]
        horizontal = [l for l in lines if l[1] == l[3]]
        assert [l[0] for l in vertical] == [0, 20, 40]
        assert [l[1] for l in horizontal] == [0, 20]

    def test_grid_bad_spacing(self):
        assert grid_lines(100, 100, spacing=0) == []

    def test_ruler_marks(self):
        h, v = ruler_marks(384, 288)
        assert [m.label for m in h] == [0, 1, 2, 3, 4]
        assert [m.pos for m in v] == [0, 96, 192, 288]

    def test_ruler_marks_fractional_label(self):
        """A 4.2in label gets ticks 0..4; nothing is drawn past the edge."""
        h, _v = ruler_marks(4.2 * 96, 96)
        assert [m.label for m in h] == [0, 1, 2, 3, 4]
        assert h[-1].pos <= 4.2 * 96


class TestErrors:
    def test_line_prefix(self):
        err = CodeDecodeError("bad", line_no=3)
        assert str(err) == "Line 3: bad"
        assert err.line_no == 3

    def test_label_error_passthrough(self):
        err = CodeDecodeError("x")
        assert map_exception(err) is err

    def test_value_error_mapped(self):
        cause = ValueError("invalid literal")
        mapped = map_exception(cause)
        assert isinstance(mapped, CodeDecodeError)
        assert isinstance(mapped, LabelError)
        assert mapped.__cause__ is cause

    def test_unexpected_error_mapped(self):
        assert "boom" in friendly_message(RuntimeError("boom"))
