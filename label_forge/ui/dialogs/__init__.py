# label_forge/ui/dialogs/__init__.py
"""
Dialog builders and standalone dialog classes.

Re-exports only; implementations live in sibling modules.
This module must NOT import main_window to avoid circular imports.
"""
from .generate_code import GenerateCodeDialog
from .load_design import LoadDesignDialog
from .keyboard_shortcuts import show_keyboard_shortcuts_dialog

__all__ = [
    "GenerateCodeDialog",
    "LoadDesignDialog",
    "show_keyboard_shortcuts_dialog",
]
