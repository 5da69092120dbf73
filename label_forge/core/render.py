from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple

from .models import SCREEN_PX_PER_UNIT, LabelSettings

GRID_SPACING_PX = 20
RULER_THICKNESS = 20


@dataclass(frozen=True)
class RulerMark:
    pos: float      # px along the ruler
    label: int      # label units from the origin


def canvas_size(settings: LabelSettings) -> Tuple[float, float]:
    return settings.canvas_width, settings.canvas_height


def grid_lines(
    width_px: float,
    height_px: float,
    spacing: float = GRID_SPACING_PX,
) -> List[Tuple[float, float, float, float]]:
    """Vertical then horizontal (x1, y1, x2, y2) segments every *spacing* px."""
    if spacing <= 0:
        return []
    lines = []
    x = 0.0
    while x <= width_px:
        lines.append((x, 0.0, x, height_px))
        x += spacing
    y = 0.0
    while y <= height_px:
        lines.append((0.0, y, width_px, y))
        y += spacing
    return lines


def ruler_marks(
    width_px: float,
    height_px: float,
    px_per_unit: float = SCREEN_PX_PER_UNIT,
) -> Tuple[List[RulerMark], List[RulerMark]]:
    """Horizontal and vertical ruler ticks, one per whole label unit."""
    def marks(length: float) -> List[RulerMark]:
        out = []
        i = 0
        while i * px_per_unit <= length:
            out.append(RulerMark(i * px_per_unit, i))
            i += 1
        return out

    if px_per_unit <= 0:
        return [], []
    return marks(width_px), marks(height_px)
