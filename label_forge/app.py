from __future__ import annotations
import logging
import os
import sys
from typing import Optional

from PySide6.QtWidgets import QApplication

LOG_LEVEL_ENV = "LABEL_FORGE_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(level: Optional[str] = None) -> int:
    """
    Configure root logging for the editor.

    *level* wins over the LABEL_FORGE_LOG_LEVEL environment variable;
    unknown names fall back to INFO. Returns the numeric level applied.
    """
    name = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        numeric = logging.INFO
    logging.basicConfig(level=numeric, format=LOG_FORMAT, force=True)
    return numeric


def main():
    setup_logging()
    app = QApplication(sys.argv)

    from .ui.main_window import MainWindow

    win = MainWindow()
    win.show()
    logging.getLogger(__name__).info("Editor window opened")
    sys.exit(app.exec())


if __name__ == '__main__':
    main()
