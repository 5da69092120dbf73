# label_forge/core/zpl.py
"""
ZPL codec: label document <-> printer command text.

Encoding is total: any document produces a complete ^XA ... ^XZ block.

Decoding is best-effort and lossy. It reads one command group per line and
only recovers what the encoder writes:

    ^XA
    ^PW812                                  label width in dots
    ^LL609                                  label height in dots
    ^FO10,20^A0N,21,21^FDHi^FS              text
    ^FO10,60^BY2,3,40^BCN,,Y,N^FD12345^FS   barcode (Code 128)
    ^FO10,120^BQN,2,6^FDQA,https://...^FS   QR
    ^XZ

Font family/weight, rotation and barcode type do not survive a round trip.
Lines that are not recognised are skipped; malformed dimension commands and
any unexpected fault abort the whole decode with CodeDecodeError.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Protocol

from .exceptions import CodeDecodeError, CodeEncodeError, map_exception
from .models import (
    DOTS_PER_UNIT,
    BarcodeElement,
    Element,
    IdAllocator,
    ImageElement,
    LabelSettings,
    QrElement,
    TextElement,
    now_ms,
)
from .utils import leading_int, round_half_up

logger = logging.getLogger(__name__)


# ---------- command vocabulary ----------

START = "^XA"
END = "^XZ"
WIDTH = "^PW"
HEIGHT = "^LL"
ORIGIN = "^FO"
FONT = "^A0"
BAR_DEFAULTS = "^BY"
CODE128 = "^BC"
QRCODE = "^BQ"
FIELD_DATA = "^FD"
FIELD_SEP = "^FS"
QR_MODE = "QA,"

FONT_SCALE = 1.5            # ^A0 height/width = font_size * 1.5
BOLD_WEIGHT = 600

ROTATION_CODES: Dict[int, str] = {0: "N", 90: "R", 180: "I", 270: "B"}

DEFAULT_LABEL_WIDTH = 4.0   # inches, when ^PW is absent
DEFAULT_LABEL_HEIGHT = 3.0
MIN_LABEL_SIZE = 1.0

# id offsets keep elements from different kinds on the same line index apart
KIND_ID_OFFSETS = {"text": 0, "barcode": 1000, "qr": 2000}


class LabelLike(Protocol):
    settings: LabelSettings

    @property
    def elements(self) -> Iterable[Element]: ...


# ---------------------------------------------------------------------------
# Encoder
# ---------------------------------------------------------------------------

def rotation_code(rotation) -> str:
    """Map degrees to the ^A orientation letter; anything unexpected is N."""
    try:
        return ROTATION_CODES.get(int(rotation), "N")
    except (TypeError, ValueError):
        return "N"


def text_is_bold(elem: TextElement) -> bool:
    """
    Weight >= 600 counts as bold.

    Computed for callers (preview) but not written to the ^A0 command:
    the scalable font has no bold selector in the emitted format.
    """
    try:
        return int(elem.font_weight or "400") >= BOLD_WEIGHT
    except (TypeError, ValueError):
        return False


def _origin(elem: Element) -> str:
    return f"{ORIGIN}{round_half_up(elem.x)},{round_half_up(elem.y)}"


def _encode_text(elem: TextElement) -> str:
    size = round_half_up(float(elem.font_size) * FONT_SCALE)
    return (
        f"{_origin(elem)}"
        f"{FONT}{rotation_code(elem.rotation)},{size},{size}"
        f"{FIELD_DATA}{elem.content}{FIELD_SEP}"
    )


def _encode_barcode(elem: BarcodeElement) -> str:
    # barcode_type is not mapped yet; always Code 128 with interpretation line
    return (
        f"{_origin(elem)}"
        f"{BAR_DEFAULTS}2,3,{round_half_up(elem.height)}"
        f"{CODE128}N,,Y,N"
        f"{FIELD_DATA}{elem.data}{FIELD_SEP}"
    )


def _encode_qr(elem: QrElement) -> str:
    magnification = round_half_up(float(elem.width) / 10.0)
    return (
        f"{_origin(elem)}"
        f"{QRCODE}N,2,{magnification}"
        f"{FIELD_DATA}{QR_MODE}{elem.data}{FIELD_SEP}"
    )


_ENCODERS: Dict[type, Callable] = {
    TextElement: _encode_text,
    BarcodeElement: _encode_barcode,
    QrElement: _encode_qr,
}


def encode_element(elem: Element) -> Optional[str]:
    """Return the command line for *elem*, or None for kinds with no output."""
    if isinstance(elem, ImageElement):
        return None
    encoder = _ENCODERS.get(type(elem))
    if encoder is None:
        raise CodeEncodeError(f"Cannot encode element of type {type(elem).__name__}")
    return encoder(elem)


def encode(label: LabelLike) -> str:
    """
    Turn a document (anything with ``settings`` and ``elements``) into ZPL.

    Elements are written in document order; coordinates are rounded per
    element and not validated against the label size.
    """
    settings = label.settings
    lines = [
        START,
        f"{WIDTH}{settings.width_dots}",
        f"{HEIGHT}{settings.height_dots}",
    ]
    for elem in label.elements:
        line = encode_element(elem)
        if line is not None:
            lines.append(line)
    lines.append(END)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Decoder
# ---------------------------------------------------------------------------

_ORIGIN_RE = re.compile(r'\^FO(\d+),(\d+)')
_DATA_RE = re.compile(r'\^FD([^^]+)\^FS')
_QR_DATA_RE = re.compile(r'\^FDQA,([^^]+)\^FS')
_FONT_RE = re.compile(r'\^A0[NRIB],(\d+),(\d+)')
_BAR_HEIGHT_RE = re.compile(r'\^BY\d+,\d+,(\d+)')


@dataclass
class DecodedLabel:
    """Result of a successful decode; applied to a Document in one step."""
    settings: LabelSettings
    elements: List[Element] = field(default_factory=list)
    skipped_lines: int = 0


def classify_line(line: str) -> Optional[str]:
    """
    Decide which element kind a line describes, by marker, in priority order.

    Returns "text", "barcode", "qr" or None.
    """
    if ORIGIN not in line:
        return None
    if FONT in line:
        return "text"
    if CODE128 in line:
        return "barcode"
    if QRCODE in line:
        return "qr"
    return None


def _extract_text(line: str, new_id: int) -> Optional[TextElement]:
    fo = _ORIGIN_RE.search(line)
    fd = _DATA_RE.search(line)
    if not (fo and fd):
        return None
    font = _FONT_RE.search(line)
    font_size = int(font.group(1)) / FONT_SCALE if font else 14.0
    return TextElement(
        id=new_id,
        x=int(fo.group(1)),
        y=int(fo.group(2)),
        content=fd.group(1),
        font_size=font_size,
    )


def _extract_barcode(line: str, new_id: int) -> Optional[BarcodeElement]:
    fo = _ORIGIN_RE.search(line)
    fd = _DATA_RE.search(line)
    if not (fo and fd):
        return None
    by = _BAR_HEIGHT_RE.search(line)
    return BarcodeElement(
        id=new_id,
        x=int(fo.group(1)),
        y=int(fo.group(2)),
        data=fd.group(1),
        width=120.0,
        height=int(by.group(1)) if by else 40.0,
    )


def _extract_qr(line: str, new_id: int) -> Optional[QrElement]:
    fo = _ORIGIN_RE.search(line)
    fd = _QR_DATA_RE.search(line)
    if not (fo and fd):
        return None
    return QrElement(
        id=new_id,
        x=int(fo.group(1)),
        y=int(fo.group(2)),
        data=fd.group(1),
        width=64.0,
        height=64.0,
    )


_EXTRACTORS: Dict[str, Callable[[str, int], Optional[Element]]] = {
    "text": _extract_text,
    "barcode": _extract_barcode,
    "qr": _extract_qr,
}


def _read_dots(line: str, marker: str, line_no: int) -> float:
    dots = leading_int(line[len(marker):])
    if dots is None:
        raise CodeDecodeError(f"{marker} needs a dot count", line_no)
    return dots / DOTS_PER_UNIT


def decode(
    text: str,
    ids: Optional[IdAllocator] = None,
    base_ms: Optional[int] = None,
) -> DecodedLabel:
    """
    Parse printer code into label settings and a fresh element list.

    *ids* is used to hand out element ids (a new allocator when omitted); it
    is only advanced when the whole decode succeeds. Raises CodeDecodeError
    on malformed dimension commands or any unexpected fault.
    """
    if text is None:
        raise CodeDecodeError("No printer code given")

    work_ids = ids.fork() if ids is not None else IdAllocator()
    base = now_ms() if base_ms is None else int(base_ms)

    width = DEFAULT_LABEL_WIDTH
    height = DEFAULT_LABEL_HEIGHT
    elements: List[Element] = []
    skipped = 0

    line_no = 0
    try:
        for index, raw in enumerate(text.split("\n")):
            line_no = index + 1
            line = raw.strip()

            if line.startswith(WIDTH):
                width = _read_dots(line, WIDTH, line_no)
            if line.startswith(HEIGHT):
                height = _read_dots(line, HEIGHT, line_no)

            kind = classify_line(line)
            if kind is None:
                if line and line not in (START, END) and not line.startswith((WIDTH, HEIGHT)):
                    logger.debug("Skipping unrecognised line %d: %r", line_no, line)
                    skipped += 1
                continue

            new_id = work_ids.allocate(base + index + KIND_ID_OFFSETS[kind])
            elem = _EXTRACTORS[kind](line, new_id)
            if elem is None:
                logger.debug("Skipping incomplete %s line %d: %r", kind, line_no, line)
                skipped += 1
                continue
            elements.append(elem)
    except CodeDecodeError as exc:
        logger.warning("Printer code rejected: %s", exc)
        raise
    except Exception as exc:
        mapped = map_exception(exc)
        logger.warning("Printer code rejected at line %d: %s", line_no, mapped)
        raise CodeDecodeError(str(mapped), line_no) from exc

    if ids is not None:
        ids.adopt(work_ids)

    settings = LabelSettings(
        width=max(width, MIN_LABEL_SIZE),
        height=max(height, MIN_LABEL_SIZE),
        unit="in",
    )
    logger.debug(
        "Decoded %d element(s), %d skipped line(s), label %.3gx%.3g in",
        len(elements), skipped, settings.width, settings.height,
    )
    return DecodedLabel(settings=settings, elements=elements, skipped_lines=skipped)
