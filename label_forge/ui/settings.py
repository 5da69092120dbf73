from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict

import json
import logging
from PySide6.QtCore import QSettings

from ..core.models import UNITS, LabelSettings

logger = logging.getLogger(__name__)

ORG_NAME = "LabelForge"
APP_NAME = "LabelForge"
_PREFS_KEY = "editor_prefs"


@dataclass
class EditorPrefs:
    """
    View toggles and the label size a fresh design starts with.

    Stored as one JSON blob so new keys can be added without migrations.
    """
    show_grid: bool = True
    show_rulers: bool = True
    label_width: float = 4.0
    label_height: float = 3.0
    label_unit: str = "in"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorPrefs":
        prefs = cls()
        prefs.show_grid = bool(data.get("show_grid", prefs.show_grid))
        prefs.show_rulers = bool(data.get("show_rulers", prefs.show_rulers))
        try:
            w = float(data.get("label_width", prefs.label_width))
            h = float(data.get("label_height", prefs.label_height))
        except (TypeError, ValueError):
            w, h = prefs.label_width, prefs.label_height
        if w > 0:
            prefs.label_width = w
        if h > 0:
            prefs.label_height = h
        unit = data.get("label_unit", prefs.label_unit)
        if unit in UNITS:
            prefs.label_unit = unit
        return prefs

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def label_settings(self) -> LabelSettings:
        return LabelSettings(
            width=self.label_width,
            height=self.label_height,
            unit=self.label_unit,
        )


def _settings() -> QSettings:
    return QSettings(ORG_NAME, APP_NAME)


def load_prefs(settings: QSettings | None = None) -> EditorPrefs:
    """
    Load editor preferences from QSettings.

    Missing or unreadable data falls back to defaults.
    """
    s = settings or _settings()
    raw = s.value(_PREFS_KEY, "", type=str)
    if not raw:
        return EditorPrefs()
    try:
        data = json.loads(raw)
        if isinstance(data, dict):
            return EditorPrefs.from_dict(data)
    except ValueError as e:
        logger.warning("Ignoring unreadable editor preferences: %s", e)
    return EditorPrefs()


def save_prefs(prefs: EditorPrefs, settings: QSettings | None = None) -> None:
    """
    Persist editor preferences to QSettings as JSON.
    """
    s = settings or _settings()
    s.setValue(_PREFS_KEY, json.dumps(prefs.to_dict(), indent=2))
