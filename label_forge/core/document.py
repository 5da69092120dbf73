"""
Label Forge document model.

The Document is the single mutable aggregate the editor works on: the
ordered element list (later elements draw on top), the physical label
settings and a weak, id-based selection.

Every mutation is synchronous and total. Unknown ids are ignored, invalid
form input falls back instead of raising, and loading printer code either
replaces everything or nothing.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .models import (
    BARCODE_TYPES,
    FONT_FAMILIES,
    FONT_WEIGHTS,
    ROTATIONS,
    UNITS,
    Element,
    ElementKind,
    IdAllocator,
    LabelSettings,
    element_class,
)
from .utils import coerce_number
from . import zpl

logger = logging.getLogger(__name__)

Listener = Callable[["Document"], None]

# form boundary fallbacks: position resets to 0, everything else keeps its value
_ZERO_FALLBACK_FIELDS = ("x", "y")
_NUMERIC_FIELDS = ("x", "y", "width", "height", "font_size")

_CHOICE_FIELDS: Dict[str, Tuple[Any, ...]] = {
    "font_family": FONT_FAMILIES,
    "font_weight": tuple(FONT_WEIGHTS),
    "barcode_type": BARCODE_TYPES,
}


class Document:
    """
    Root container for one label design.

    Read access: ``elements``, ``settings``, ``selected()``, ``get()``.
    Mutations go through the create/update/delete/clear/select methods so
    listeners (the canvas, the properties panel) see every change.
    """

    def __init__(self, settings: Optional[LabelSettings] = None):
        self.settings: LabelSettings = settings or LabelSettings()
        self._elements: List[Element] = []
        self._selected_id: Optional[int] = None
        self.ids = IdAllocator()
        self._listeners: List[Listener] = []

    # ---------- read access ----------
    @property
    def elements(self) -> Tuple[Element, ...]:
        return tuple(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def get(self, element_id: Optional[int]) -> Optional[Element]:
        if element_id is None:
            return None
        for elem in self._elements:
            if elem.id == element_id:
                return elem
        return None

    @property
    def selected_id(self) -> Optional[int]:
        return self._selected_id

    def selected(self) -> Optional[Element]:
        return self.get(self._selected_id)

    # ---------- listeners ----------
    def add_listener(self, callback: Listener) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Listener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self)

    # ---------- element factory ----------
    def new_element(self, kind: ElementKind | str, x: float = 20, y: float = 20) -> Element:
        """Build (but do not add) an element with the defaults for *kind*."""
        cls = element_class(kind)
        return cls(
            id=self.ids.allocate(),
            x=max(0.0, float(coerce_number(x, 0.0))),
            y=max(0.0, float(coerce_number(y, 0.0))),
        )

    def create_element(self, kind: ElementKind | str, x: float = 20, y: float = 20) -> Element:
        """Create an element with kind defaults, append it on top and select it."""
        elem = self.new_element(kind, x, y)
        self._elements.append(elem)
        self._selected_id = elem.id
        logger.debug("Created %s element %d at (%s, %s)", elem.kind.value, elem.id, elem.x, elem.y)
        self._notify()
        return elem

    # ---------- mutation ----------
    def _coerce_patch(self, elem: Element, patch: Mapping[str, Any]) -> Dict[str, Any]:
        allowed = set(elem.field_names()) - {"id"}
        clean: Dict[str, Any] = {}
        for key, value in patch.items():
            if key not in allowed:
                continue
            current = getattr(elem, key)

            if key in _NUMERIC_FIELDS:
                fallback = 0.0 if key in _ZERO_FALLBACK_FIELDS else current
                number = coerce_number(value, fallback)
                if key == "font_size" and number is not None and number <= 0:
                    number = current
                clean[key] = number
            elif key == "rotation":
                number = coerce_number(value, None)
                if number is not None and int(number) in ROTATIONS:
                    clean[key] = int(number)
            elif key in _CHOICE_FIELDS:
                value = str(value)
                if value in _CHOICE_FIELDS[key]:
                    clean[key] = value
            else:
                clean[key] = "" if value is None else str(value)
        return clean

    def update_element(self, element_id: int, patch: Mapping[str, Any]) -> None:
        """
        Merge *patch* into the element with *element_id*.

        No-op for unknown ids. Fields the element kind does not carry are
        ignored; invalid numeric input falls back (x/y to 0, others to the
        previous value).
        """
        elem = self.get(element_id)
        if elem is None:
            return
        clean = self._coerce_patch(elem, patch)
        if not clean:
            return
        for key, value in clean.items():
            setattr(elem, key, value)
        logger.debug("Updated element %d: %s", element_id, clean)
        self._notify()

    def delete_element(self, element_id: int) -> None:
        elem = self.get(element_id)
        if elem is None:
            return
        self._elements.remove(elem)
        if self._selected_id == element_id:
            self._selected_id = None
        logger.debug("Deleted element %d", element_id)
        self._notify()

    def clear_all(self) -> None:
        self._elements.clear()
        self._selected_id = None
        self._notify()

    def select(self, element_id: Optional[int]) -> None:
        new_id = element_id if self.get(element_id) is not None else None
        if new_id == self._selected_id:
            return
        self._selected_id = new_id
        self._notify()

    def set_label_settings(
        self,
        width: Any = None,
        height: Any = None,
        unit: Optional[str] = None,
    ) -> None:
        """
        Form boundary for the label panel.

        Non-numeric or non-positive sizes keep the previous value;
        unknown units are ignored.
        """
        s = self.settings
        new_width = s.width
        new_height = s.height
        new_unit = s.unit

        if width is not None:
            w = coerce_number(width, None)
            if w is not None and w > 0:
                new_width = w
        if height is not None:
            h = coerce_number(height, None)
            if h is not None and h > 0:
                new_height = h
        if unit in UNITS:
            new_unit = unit

        if (new_width, new_height, new_unit) == (s.width, s.height, s.unit):
            return
        self.settings = LabelSettings(width=new_width, height=new_height, unit=new_unit)
        self._notify()

    # ---------- codec ----------
    def encode(self) -> str:
        return zpl.encode(self)

    def load_code(self, text: str) -> zpl.DecodedLabel:
        """
        Replace the whole design with the one described by *text*.

        Raises CodeDecodeError and leaves the document untouched if the code
        cannot be parsed.
        """
        decoded = zpl.decode(text, ids=self.ids)
        self._elements = list(decoded.elements)
        self.settings = decoded.settings
        self._selected_id = None
        logger.info(
            "Loaded design: %d element(s), %d line(s) skipped",
            len(decoded.elements), decoded.skipped_lines,
        )
        self._notify()
        return decoded
