from __future__ import annotations

from typing import Optional, Tuple

from PySide6 import QtCore, QtGui, QtWidgets

from ..core.render import RULER_THICKNESS, grid_lines, ruler_marks


class LabelView(QtWidgets.QGraphicsView):
    """
    Canvas view: white label with optional 20 px grid and unit rulers.

    The scene rect is the label in canvas pixels; container_size() is what
    the geometry engine clamps against.
    """

    def __init__(self, parent=None):
        super().__init__(parent)

        self.setRenderHints(
            QtGui.QPainter.Antialiasing
            | QtGui.QPainter.TextAntialiasing
            | QtGui.QPainter.SmoothPixmapTransform
        )
        self.setViewportUpdateMode(QtWidgets.QGraphicsView.FullViewportUpdate)

        # Zoom behavior
        self.setTransformationAnchor(QtWidgets.QGraphicsView.AnchorUnderMouse)
        self.setResizeAnchor(QtWidgets.QGraphicsView.AnchorViewCenter)

        self._show_grid = True
        self._show_rulers = True

    # ------------ public toggles used by MainWindow ------------
    def setShowGrid(self, show: bool):
        self._show_grid = bool(show)
        self.viewport().update()

    def setShowRulers(self, show: bool):
        self._show_rulers = bool(show)
        self.viewport().update()

    def showGrid(self) -> bool:
        return self._show_grid

    def showRulers(self) -> bool:
        return self._show_rulers

    def container_size(self) -> Optional[Tuple[float, float]]:
        scene = self.scene()
        if scene is None:
            return None
        r = scene.sceneRect()
        return (r.width(), r.height())

    # ------------ background: workspace + label + grid ------------
    def drawBackground(self, painter: QtGui.QPainter, rect: QtCore.QRectF) -> None:
        painter.fillRect(rect, QtGui.QColor("#f3f4f6"))

        if self.scene() is None:
            return

        page_rect = self.sceneRect()
        painter.fillRect(page_rect, QtCore.Qt.white)

        if self._show_grid:
            pen = QtGui.QPen(QtGui.QColor("#e5e7eb"))
            pen.setWidthF(0.5)
            painter.setPen(pen)
            for x1, y1, x2, y2 in grid_lines(page_rect.width(), page_rect.height()):
                painter.drawLine(QtCore.QLineF(x1, y1, x2, y2))

        # subtle gray border around the label
        pen = QtGui.QPen(QtGui.QColor("#d1d5db"))
        pen.setWidth(1)
        painter.setPen(pen)
        painter.setBrush(QtCore.Qt.NoBrush)
        painter.drawRect(page_rect)

    # ------------ foreground: rulers ------------
    def drawForeground(self, painter: QtGui.QPainter, rect: QtCore.QRectF) -> None:
        super().drawForeground(painter, rect)
        if not self._show_rulers or self.scene() is None:
            return
        # rulers in VIEW coordinates so they stick to the edges
        painter.save()
        painter.resetTransform()
        try:
            self._draw_rulers(painter)
        finally:
            painter.restore()

    def _draw_rulers(self, painter: QtGui.QPainter) -> None:
        viewport_rect = self.viewport().rect()
        if viewport_rect.isEmpty():
            return

        bg_color = QtGui.QColor("#f9fafb")
        line_color = QtGui.QColor("#6b7280")

        painter.fillRect(0, 0, viewport_rect.width(), RULER_THICKNESS, bg_color)
        painter.fillRect(0, 0, RULER_THICKNESS, viewport_rect.height(), bg_color)

        font = painter.font()
        font.setPointSize(7)
        painter.setFont(font)
        painter.setPen(QtGui.QPen(line_color))

        page = self.sceneRect()
        h_marks, v_marks = ruler_marks(page.width(), page.height())

        for mark in h_marks:
            x = self.mapFromScene(QtCore.QPointF(mark.pos, 0)).x()
            if x < RULER_THICKNESS:  # don't draw under the vertical ruler
                continue
            painter.drawLine(x, RULER_THICKNESS - 5, x, RULER_THICKNESS)
            painter.drawText(x - 3, RULER_THICKNESS - 8, str(mark.label))

        for mark in v_marks:
            y = self.mapFromScene(QtCore.QPointF(0, mark.pos)).y()
            if y < RULER_THICKNESS:  # don't draw under the top ruler
                continue
            painter.drawLine(RULER_THICKNESS - 5, y, RULER_THICKNESS, y)
            painter.drawText(4, y + 3, str(mark.label))

    # ------------ zoom ------------
    def wheelEvent(self, event: QtGui.QWheelEvent) -> None:
        """
        Ctrl + wheel = zoom around cursor.
        Plain wheel = normal scroll (default behavior).
        """
        if event.modifiers() & QtCore.Qt.ControlModifier:
            angle = event.angleDelta().y()
            if angle == 0:
                return

            zoom_factor = 1.2 if angle > 0 else 1 / 1.2
            self.scale(zoom_factor, zoom_factor)
        else:
            super().wheelEvent(event)
