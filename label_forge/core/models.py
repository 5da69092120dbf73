from __future__ import annotations
from dataclasses import dataclass, fields
import time
from enum import Enum
from typing import ClassVar, Dict, Tuple

from .utils import round_half_up


# ---------- Scales / limits ----------

SCREEN_PX_PER_UNIT = 96     # canvas pixels per label unit
DOTS_PER_UNIT = 203         # printer dots per label unit

MIN_WIDTH = 20.0
MIN_HEIGHT = 10.0

UNITS: Tuple[str, ...] = ("in", "mm")

FONT_FAMILIES: Tuple[str, ...] = ("Arial", "Times New Roman", "Courier New", "Helvetica")

FONT_WEIGHTS: Dict[str, str] = {
    "100": "Thin",
    "200": "Extra Light",
    "300": "Light",
    "400": "Regular",
    "500": "Medium",
    "600": "Semi Bold",
    "700": "Bold",
    "800": "Extra Bold",
    "900": "Black",
}

ROTATIONS: Tuple[int, ...] = (0, 90, 180, 270)

BARCODE_TYPES: Tuple[str, ...] = ("Code 128", "EAN-13", "UPC-A")

DEFAULT_QR_DATA = "https://vercel.com"


class ElementKind(str, Enum):
    TEXT = "text"
    BARCODE = "barcode"
    QR = "qr"
    IMAGE = "image"     # reserved: drawn as an empty frame, never encoded


# ---------- Core element model ----------

@dataclass
class Element:
    id: int
    x: float = 20.0
    y: float = 20.0
    width: float = 100.0
    height: float = 20.0

    kind: ClassVar[ElementKind]

    # ---- used by the document to filter patches ----
    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))


@dataclass
class TextElement(Element):
    width: float = 100.0
    height: float = 20.0

    content: str = "New Text"
    font_size: float = 14.0         # points
    font_family: str = "Arial"
    font_weight: str = "400"
    rotation: int = 0               # 0 | 90 | 180 | 270

    kind: ClassVar[ElementKind] = ElementKind.TEXT


@dataclass
class BarcodeElement(Element):
    width: float = 120.0
    height: float = 40.0

    data: str = "12345"
    barcode_type: str = "Code 128"  # stored only; the encoder always emits Code 128

    kind: ClassVar[ElementKind] = ElementKind.BARCODE


@dataclass
class QrElement(Element):
    width: float = 64.0
    height: float = 64.0

    data: str = DEFAULT_QR_DATA

    kind: ClassVar[ElementKind] = ElementKind.QR


@dataclass
class ImageElement(Element):
    kind: ClassVar[ElementKind] = ElementKind.IMAGE


ELEMENT_CLASSES: Dict[ElementKind, type] = {
    ElementKind.TEXT: TextElement,
    ElementKind.BARCODE: BarcodeElement,
    ElementKind.QR: QrElement,
    ElementKind.IMAGE: ImageElement,
}


def element_class(kind: ElementKind | str) -> type:
    """Return the dataclass for *kind* (accepts the enum or its string value)."""
    return ELEMENT_CLASSES[ElementKind(kind)]


# ---------- Label / page ----------

@dataclass
class LabelSettings:
    width: float = 4.0
    height: float = 3.0
    unit: str = "in"                # "in" | "mm"

    # ---- convenience ----
    @property
    def canvas_width(self) -> float:
        return self.width * SCREEN_PX_PER_UNIT

    @property
    def canvas_height(self) -> float:
        return self.height * SCREEN_PX_PER_UNIT

    @property
    def width_dots(self) -> int:
        return round_half_up(self.width * DOTS_PER_UNIT)

    @property
    def height_dots(self) -> int:
        return round_half_up(self.height * DOTS_PER_UNIT)


# ---------- Id allocation ----------

def now_ms() -> int:
    return int(time.time() * 1000)


class IdAllocator:
    """
    Hands out strictly increasing element ids.

    Callers pass a *hint* (epoch milliseconds, optionally plus an offset);
    the allocator returns the hint unless it has already issued something at
    or above it, in which case it returns the next free id. Two elements
    created in the same millisecond therefore never share an id, and an id
    is never reused after deletion.
    """

    def __init__(self, last: int = 0):
        self._last = int(last)

    @property
    def last(self) -> int:
        return self._last

    def allocate(self, hint: int | None = None) -> int:
        if hint is None:
            hint = now_ms()
        new_id = max(int(hint), self._last + 1)
        self._last = new_id
        return new_id

    def fork(self) -> "IdAllocator":
        """Copy used for all-or-nothing work (decode): commit with adopt()."""
        return IdAllocator(self._last)

    def adopt(self, other: "IdAllocator") -> None:
        self._last = max(self._last, other._last)
