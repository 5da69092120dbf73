from __future__ import annotations

import logging
from typing import Dict, Optional

from PySide6 import QtCore, QtGui, QtWidgets

from ..core.document import Document
from ..core.geometry import container_size, handle_key
from ..core.models import ElementKind
from .dialogs import GenerateCodeDialog, LoadDesignDialog, show_keyboard_shortcuts_dialog
from .items import ElementItem
from .properties import PropertiesPanel
from .settings import APP_NAME, ORG_NAME, EditorPrefs, load_prefs, save_prefs
from .toolbox import Toolbox
from .views import LabelView

logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"

_KEY_NAMES = {
    QtCore.Qt.Key_Left: "ArrowLeft",
    QtCore.Qt.Key_Right: "ArrowRight",
    QtCore.Qt.Key_Up: "ArrowUp",
    QtCore.Qt.Key_Down: "ArrowDown",
    QtCore.Qt.Key_Delete: "Delete",
    QtCore.Qt.Key_Backspace: "Backspace",
}

_TEXT_INPUTS = (
    QtWidgets.QLineEdit,
    QtWidgets.QPlainTextEdit,
    QtWidgets.QTextEdit,
    QtWidgets.QAbstractSpinBox,
)


class MainWindow(QtWidgets.QMainWindow):
    """
    Editor shell: toolbox (left), canvas (center), properties (right).

    Owns the Document. Every document change re-syncs canvas items and the
    properties panel; items are kept (not rebuilt) so a drag in progress
    survives its own updates.
    """

    def __init__(self, prefs: Optional[EditorPrefs] = None, settings: Optional[QtCore.QSettings] = None):
        super().__init__()

        self.setWindowTitle(f"{APP_NAME} {APP_VERSION}")
        self.resize(1300, 900)
        self.settings = settings or QtCore.QSettings(ORG_NAME, APP_NAME)
        self.prefs = prefs or load_prefs(self.settings)

        self.document = Document(self.prefs.label_settings())
        self._items: Dict[int, ElementItem] = {}

        self._build_scene_view()
        self._build_docks()
        self._build_actions()

        self.document.add_listener(self._on_document_changed)
        self._sync_scene()
        self.statusBar().showMessage("Ready.")

    # -------------------------
    # UI construction
    # -------------------------
    def _build_scene_view(self):
        self.scene = QtWidgets.QGraphicsScene(self)
        self.view = LabelView(self)
        self.view.setScene(self.scene)
        self.view.setShowGrid(self.prefs.show_grid)
        self.view.setShowRulers(self.prefs.show_rulers)

        # Ensure the view/viewport can take focus
        self.view.setFocusPolicy(QtCore.Qt.StrongFocus)
        self.view.viewport().setFocusPolicy(QtCore.Qt.StrongFocus)

        # Keyboard handling on BOTH view and viewport
        self.view.installEventFilter(self)
        self.view.viewport().installEventFilter(self)

        self.setCentralWidget(self.view)

    def _build_docks(self):
        self.toolbox = Toolbox(
            self,
            show_grid=self.prefs.show_grid,
            show_rulers=self.prefs.show_rulers,
        )
        self.toolbox.add_text.connect(lambda: self.add_element(ElementKind.TEXT))
        self.toolbox.add_barcode.connect(lambda: self.add_element(ElementKind.BARCODE))
        self.toolbox.add_qr.connect(lambda: self.add_element(ElementKind.QR))
        self.toolbox.clear_canvas.connect(self.clear_canvas)
        self.toolbox.load_design.connect(self.load_design)
        self.toolbox.generate_code.connect(self.generate_code)
        self.toolbox.show_shortcuts.connect(lambda: show_keyboard_shortcuts_dialog(self))
        self.toolbox.grid_toggled.connect(self.set_show_grid)
        self.toolbox.rulers_toggled.connect(self.set_show_rulers)

        dock_tools = QtWidgets.QDockWidget("Toolbox", self)
        dock_tools.setObjectName("ToolboxDock")
        dock_tools.setWidget(self.toolbox)
        self.addDockWidget(QtCore.Qt.LeftDockWidgetArea, dock_tools)

        self.props = PropertiesPanel(self.document, self)
        props_scroll = QtWidgets.QScrollArea()
        props_scroll.setWidget(self.props)
        props_scroll.setWidgetResizable(True)
        props_scroll.setFrameShape(QtWidgets.QFrame.NoFrame)
        props_scroll.setHorizontalScrollBarPolicy(QtCore.Qt.ScrollBarAlwaysOff)

        dock_props = QtWidgets.QDockWidget("Properties", self)
        dock_props.setObjectName("PropertiesDock")
        dock_props.setWidget(props_scroll)
        self.addDockWidget(QtCore.Qt.RightDockWidgetArea, dock_props)

    def _build_actions(self):
        tb = QtWidgets.QToolBar("Main")
        tb.setObjectName("MainToolbar")
        self.addToolBar(tb)

        self.act_generate = QtGui.QAction("Generate Code", self)
        self.act_generate.setShortcut(QtGui.QKeySequence("Ctrl+E"))
        self.act_generate.triggered.connect(self.generate_code)
        tb.addAction(self.act_generate)

        self.act_load = QtGui.QAction("Load Design", self)
        self.act_load.setShortcut(QtGui.QKeySequence("Ctrl+L"))
        self.act_load.triggered.connect(self.load_design)
        tb.addAction(self.act_load)

        tb.addSeparator()

        self.act_grid = QtGui.QAction("Grid", self)
        self.act_grid.setCheckable(True)
        self.act_grid.setChecked(self.prefs.show_grid)
        self.act_grid.toggled.connect(self.set_show_grid)
        tb.addAction(self.act_grid)

        self.act_rulers = QtGui.QAction("Rulers", self)
        self.act_rulers.setCheckable(True)
        self.act_rulers.setChecked(self.prefs.show_rulers)
        self.act_rulers.toggled.connect(self.set_show_rulers)
        tb.addAction(self.act_rulers)

    # -------------------------
    # Document -> view
    # -------------------------
    def _container(self):
        return container_size(self.view.container_size)

    def _on_document_changed(self, _doc: Document) -> None:
        self._sync_scene()
        self.props.refresh()

    def _sync_scene(self) -> None:
        s = self.document.settings
        rect = QtCore.QRectF(0, 0, s.canvas_width, s.canvas_height)
        if self.scene.sceneRect() != rect:
            self.scene.setSceneRect(rect)

        live_ids = set()
        for z, elem in enumerate(self.document.elements):
            live_ids.add(elem.id)
            item = self._items.get(elem.id)
            if item is None:
                item = ElementItem(self.document, elem, bounds=self.view.container_size)
                self.scene.addItem(item)
                self._items[elem.id] = item
            item.setZValue(z)
            item.sync_from_element()

        for element_id in list(self._items):
            if element_id not in live_ids:
                item = self._items.pop(element_id)
                self.scene.removeItem(item)

        self.view.viewport().update()

    # -------------------------
    # Commands
    # -------------------------
    def add_element(self, kind: ElementKind) -> None:
        elem = self.document.create_element(kind)
        self.statusBar().showMessage(f"Added {elem.kind.value} element.", 3000)

    def clear_canvas(self) -> None:
        self.document.clear_all()
        self.statusBar().showMessage("Canvas cleared.", 3000)

    def generate_code(self) -> None:
        dlg = GenerateCodeDialog(self.document.encode(), self)
        dlg.exec()

    def load_design(self) -> None:
        dlg = LoadDesignDialog(self.document, self)
        if dlg.exec() == QtWidgets.QDialog.Accepted:
            self.statusBar().showMessage(
                f"Loaded design with {len(self.document)} element(s).", 5000
            )

    def set_show_grid(self, show: bool) -> None:
        self.prefs.show_grid = bool(show)
        self.view.setShowGrid(show)
        self._sync_toggle(self.toolbox.chk_grid, self.act_grid, show)

    def set_show_rulers(self, show: bool) -> None:
        self.prefs.show_rulers = bool(show)
        self.view.setShowRulers(show)
        self._sync_toggle(self.toolbox.chk_rulers, self.act_rulers, show)

    @staticmethod
    def _sync_toggle(checkbox: QtWidgets.QCheckBox, action: QtGui.QAction, show: bool) -> None:
        for w in (checkbox, action):
            if w.isChecked() != bool(show):
                w.blockSignals(True)
                w.setChecked(bool(show))
                w.blockSignals(False)

    # -------------------------
    # Keyboard / empty-canvas clicks via eventFilter
    # -------------------------
    def _text_input_has_focus(self) -> bool:
        return isinstance(QtWidgets.QApplication.focusWidget(), _TEXT_INPUTS)

    def eventFilter(self, obj, event):
        if obj in (self.view, self.view.viewport()):
            if event.type() == QtCore.QEvent.KeyPress:
                key_name = _KEY_NAMES.get(event.key())
                if key_name is not None:
                    shift = bool(event.modifiers() & QtCore.Qt.ShiftModifier)
                    if handle_key(
                        self.document,
                        key_name,
                        shift=shift,
                        container=self._container(),
                        text_focus=self._text_input_has_focus(),
                    ):
                        return True

            elif (
                event.type() == QtCore.QEvent.MouseButtonPress
                and obj is self.view.viewport()
                and self.view.itemAt(event.position().toPoint()) is None
            ):
                self.document.select(None)
                self.view.setFocus()

        return super().eventFilter(obj, event)

    # -------------------------
    # Shutdown
    # -------------------------
    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        s = self.document.settings
        self.prefs.label_width = s.width
        self.prefs.label_height = s.height
        self.prefs.label_unit = s.unit
        try:
            save_prefs(self.prefs, self.settings)
        except Exception as e:
            logger.warning("Could not save editor preferences: %s", e)
        super().closeEvent(event)
