# label_forge/core/geometry.py
"""
Pointer and keyboard geometry for canvas elements.

Pure Python, no Qt: the canvas item feeds scene coordinates in and reads the
element back out of the Document. Everything here keeps an element inside
its container:

    0 <= x,  0 <= y,  x + width <= container_w,  y + height <= container_h
    width >= MIN_WIDTH, height >= MIN_HEIGHT   (after a resize)

One ElementInteraction exists per canvas item and moves through
IDLE -> DRAGGING|RESIZING -> IDLE. Move/release tracking is acquired through
a PointerCapture when a session starts and always released when it ends.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional, Protocol, Tuple

from .models import MIN_HEIGHT, MIN_WIDTH
from .utils import clamp

if TYPE_CHECKING:
    from .document import Document

logger = logging.getLogger(__name__)

DEFAULT_CONTAINER: Tuple[float, float] = (400.0, 300.0)

NUDGE_STEP = 1.0
NUDGE_STEP_FAST = 10.0

ARROW_KEYS = {
    "ArrowLeft": (-1, 0),
    "ArrowRight": (1, 0),
    "ArrowUp": (0, -1),
    "ArrowDown": (0, 1),
}
DELETE_KEYS = ("Delete", "Backspace")

BoundsProvider = Callable[[], Optional[Tuple[float, float]]]


class Handle(str, Enum):
    N = "n"
    S = "s"
    E = "e"
    W = "w"
    NE = "ne"
    NW = "nw"
    SE = "se"
    SW = "sw"

    @property
    def moves_left(self) -> bool:
        return "w" in self.value

    @property
    def moves_right(self) -> bool:
        return "e" in self.value

    @property
    def moves_top(self) -> bool:
        return "n" in self.value

    @property
    def moves_bottom(self) -> bool:
        return "s" in self.value


class InteractionState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float


class PointerCapture(Protocol):
    """Source of move/release events for the length of one session."""

    def acquire(self) -> None: ...

    def release(self) -> None: ...


# ---------- container bounds ----------

def container_size(bounds: Optional[BoundsProvider] = None) -> Tuple[float, float]:
    """
    Read the live container size, falling back to 400x300.

    Each axis falls back on its own when the provider gives nothing usable.
    """
    size = None
    if bounds is not None:
        size = bounds()
    if not size:
        return DEFAULT_CONTAINER
    w, h = size
    return (
        float(w) if w and w > 0 else DEFAULT_CONTAINER[0],
        float(h) if h and h > 0 else DEFAULT_CONTAINER[1],
    )


def clamp_position(
    x: float,
    y: float,
    width: float,
    height: float,
    container: Tuple[float, float],
) -> Tuple[float, float]:
    cw, ch = container
    return clamp(x, 0.0, cw - width), clamp(y, 0.0, ch - height)


# ---------- drag ----------

def drag_position(
    pointer: Tuple[float, float],
    offset: Tuple[float, float],
    size: Tuple[float, float],
    container: Tuple[float, float],
) -> Tuple[float, float]:
    """New origin for a dragged element: pointer minus grab offset, clamped."""
    return clamp_position(
        pointer[0] - offset[0],
        pointer[1] - offset[1],
        size[0],
        size[1],
        container,
    )


# ---------- resize ----------

def _resize_axis(
    start_pos: float,
    start_size: float,
    delta: float,
    grows_low: bool,
    grows_high: bool,
    minimum: float,
    limit: float,
) -> Tuple[float, float]:
    """
    Resize one axis. Returns (position, size).

    grows_low: the low edge (left/top) follows the pointer, the high edge is fixed.
    grows_high: the high edge (right/bottom) follows, the low edge is fixed.
    """
    if grows_high:
        room = limit - start_pos
        size = max(minimum, start_size + delta)
        size = max(minimum, min(size, room))
        return start_pos, size

    if grows_low:
        far_edge = start_pos + start_size
        size = max(minimum, start_size - delta)
        size = max(minimum, min(size, far_edge))
        # compensate with the clamped size so the far edge stays put
        return start_pos + (start_size - size), size

    return start_pos, start_size


def resize_rect(
    handle: Handle | str,
    start: Rect,
    dx: float,
    dy: float,
    container: Tuple[float, float],
) -> Rect:
    """
    Apply a handle drag of (dx, dy) to the rectangle captured at grab time.

    Edge handles change one dimension only; corners combine both edges.
    Floors are applied before the origin is compensated, size is capped to
    the room left between the fixed edge and the container, and the result
    is finally clamped inside the container.
    """
    handle = Handle(handle)
    cw, ch = container

    x, width = _resize_axis(
        start.x, start.width, dx,
        handle.moves_left, handle.moves_right,
        MIN_WIDTH, cw,
    )
    y, height = _resize_axis(
        start.y, start.height, dy,
        handle.moves_top, handle.moves_bottom,
        MIN_HEIGHT, ch,
    )
    x, y = clamp_position(x, y, width, height, container)
    return Rect(x, y, width, height)


# ---------- keyboard ----------

def nudge_position(
    x: float,
    y: float,
    width: float,
    height: float,
    dx: float,
    dy: float,
    container: Tuple[float, float],
) -> Tuple[float, float]:
    return clamp_position(x + dx, y + dy, width, height, container)


def handle_key(
    document: "Document",
    key: str,
    shift: bool = False,
    container: Optional[Tuple[float, float]] = None,
    text_focus: bool = False,
) -> bool:
    """
    Apply a key press to the selected element.

    Arrow keys move by 1 (10 with *shift*), Delete/Backspace remove the
    element. Returns True when the key was consumed; unknown keys, no
    selection, or a focused text field leave everything untouched.
    """
    if text_focus:
        return False
    elem = document.selected()
    if elem is None:
        return False

    if key in DELETE_KEYS:
        document.delete_element(elem.id)
        return True

    direction = ARROW_KEYS.get(key)
    if direction is None:
        return False

    step = NUDGE_STEP_FAST if shift else NUDGE_STEP
    new_x, new_y = nudge_position(
        elem.x, elem.y, elem.width, elem.height,
        direction[0] * step, direction[1] * step,
        container or DEFAULT_CONTAINER,
    )
    if (new_x, new_y) != (elem.x, elem.y):
        document.update_element(elem.id, {"x": new_x, "y": new_y})
    return True


# ---------- interaction session ----------

class ElementInteraction:
    """
    Drag/resize state machine for one element.

    press_body / press_handle start a session (and select the element),
    move applies pointer positions in delivery order, release or close end
    it. Usable as a context manager so an abrupt exit still releases the
    pointer capture.
    """

    def __init__(
        self,
        document: "Document",
        element_id: int,
        bounds: Optional[BoundsProvider] = None,
        capture: Optional[PointerCapture] = None,
    ):
        self.document = document
        self.element_id = element_id
        self.bounds = bounds
        self.capture = capture

        self.state = InteractionState.IDLE
        self.handle: Optional[Handle] = None
        self._grab_offset: Tuple[float, float] = (0.0, 0.0)
        self._start_pointer: Tuple[float, float] = (0.0, 0.0)
        self._start_rect: Optional[Rect] = None
        self._captured = False

    # ---- context manager ----
    def __enter__(self) -> "ElementInteraction":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def active(self) -> bool:
        return self.state is not InteractionState.IDLE

    def _acquire(self) -> None:
        if self.capture is not None and not self._captured:
            self.capture.acquire()
            self._captured = True

    def _release_capture(self) -> None:
        if self._captured:
            self._captured = False
            if self.capture is not None:
                self.capture.release()

    # ---- transitions ----
    def press_body(self, px: float, py: float) -> bool:
        """IDLE -> DRAGGING. Returns False if the element no longer exists."""
        elem = self.document.get(self.element_id)
        if elem is None:
            return False
        if self.active:
            self.release()
        self._grab_offset = (px - elem.x, py - elem.y)
        self.state = InteractionState.DRAGGING
        self._acquire()
        self.document.select(self.element_id)
        return True

    def press_handle(self, handle: Handle | str, px: float, py: float) -> bool:
        """IDLE -> RESIZING from one of the eight handles."""
        elem = self.document.get(self.element_id)
        if elem is None:
            return False
        if self.active:
            self.release()
        self.handle = Handle(handle)
        self._start_pointer = (px, py)
        self._start_rect = Rect(elem.x, elem.y, elem.width, elem.height)
        self.state = InteractionState.RESIZING
        self._acquire()
        self.document.select(self.element_id)
        return True

    def move(self, px: float, py: float) -> None:
        if not self.active:
            return
        elem = self.document.get(self.element_id)
        if elem is None:
            # element deleted mid-session (e.g. decode replaced the design)
            self.close()
            return
        container = container_size(self.bounds)

        if self.state is InteractionState.DRAGGING:
            x, y = drag_position(
                (px, py), self._grab_offset, (elem.width, elem.height), container
            )
            self.document.update_element(self.element_id, {"x": x, "y": y})
            return

        dx = px - self._start_pointer[0]
        dy = py - self._start_pointer[1]
        r = resize_rect(self.handle, self._start_rect, dx, dy, container)
        self.document.update_element(
            self.element_id,
            {"x": r.x, "y": r.y, "width": r.width, "height": r.height},
        )

    def release(self) -> None:
        """DRAGGING/RESIZING -> IDLE."""
        if self.active:
            logger.debug("Element %d: %s ended", self.element_id, self.state.value)
        self.state = InteractionState.IDLE
        self.handle = None
        self._start_rect = None
        self._release_capture()

    def close(self) -> None:
        """End any session because the element's canvas item went away."""
        self.release()
