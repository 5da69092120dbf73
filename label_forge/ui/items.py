from __future__ import annotations
from typing import TYPE_CHECKING, Dict, Optional

from PySide6 import QtCore, QtGui, QtWidgets

from ..core.geometry import BoundsProvider, ElementInteraction, Handle
from ..core.models import (
    BarcodeElement,
    Element,
    QrElement,
    TextElement,
)
from ..core.zpl import text_is_bold

if TYPE_CHECKING:
    from ..core.document import Document


class GrabCapture:
    """
    Pointer capture backed by QGraphicsItem.grabMouse().

    While grabbed, every move/release in the scene is delivered to the item
    even if the pointer leaves it; ungrabMouse() ends that.
    """

    def __init__(self, item: QtWidgets.QGraphicsItem):
        self.item = item

    def acquire(self) -> None:
        if self.item.scene() is not None:
            self.item.grabMouse()

    def release(self) -> None:
        scene = self.item.scene()
        if scene is not None and scene.mouseGrabberItem() is self.item:
            self.item.ungrabMouse()


class ElementItem(QtWidgets.QGraphicsRectItem):
    """
    Canvas placeholder for one document element.

    Geometry always comes from the Document; pointer events go through an
    ElementInteraction, which writes back via Document.update_element.
    """

    HANDLE_SZ = 8

    def __init__(
        self,
        document: "Document",
        elem: Element,
        bounds: Optional[BoundsProvider] = None,
    ):
        super().__init__(0, 0, float(elem.width), float(elem.height))
        self.document = document
        self.element_id = elem.id

        self.setFlags(QtWidgets.QGraphicsItem.ItemIsFocusable)
        self.setAcceptHoverEvents(True)
        self.setPen(QtCore.Qt.NoPen)
        self.setBrush(QtCore.Qt.NoBrush)

        self.interaction = ElementInteraction(
            document,
            elem.id,
            bounds=bounds,
            capture=GrabCapture(self),
        )
        self._selected = False
        self.sync_from_element()

    # ---------- model sync ----------
    @property
    def elem(self) -> Optional[Element]:
        return self.document.get(self.element_id)

    def sync_from_element(self) -> None:
        elem = self.elem
        if elem is None:
            return
        self.prepareGeometryChange()
        self.setRect(0, 0, float(elem.width), float(elem.height))
        self.setPos(float(elem.x), float(elem.y))
        self._selected = self.document.selected_id == self.element_id
        self.update()

    # ---------- geometry helpers ----------
    def _handle_rects(self) -> Dict[Handle, QtCore.QRectF]:
        r = self.rect()
        s = self.HANDLE_SZ
        cx = r.center().x()
        cy = r.center().y()
        centers = {
            Handle.NW: (r.left(), r.top()),
            Handle.N: (cx, r.top()),
            Handle.NE: (r.right(), r.top()),
            Handle.E: (r.right(), cy),
            Handle.SE: (r.right(), r.bottom()),
            Handle.S: (cx, r.bottom()),
            Handle.SW: (r.left(), r.bottom()),
            Handle.W: (r.left(), cy),
        }
        return {
            h: QtCore.QRectF(x - s / 2, y - s / 2, s, s)
            for h, (x, y) in centers.items()
        }

    def _hit_handle(self, pos: QtCore.QPointF) -> Optional[Handle]:
        if not self._selected:
            return None
        for handle, rect in self._handle_rects().items():
            if rect.contains(pos):
                return handle
        return None

    def boundingRect(self) -> QtCore.QRectF:
        # handles poke half outside the element
        pad = self.HANDLE_SZ / 2 + 1
        return self.rect().adjusted(-pad, -pad, pad, pad)

    def shape(self) -> QtGui.QPainterPath:
        path = QtGui.QPainterPath()
        path.addRect(self.boundingRect())
        return path

    # ---------- painting ----------
    def _paint_text(self, painter: QtGui.QPainter, elem: TextElement, r: QtCore.QRectF) -> None:
        font = QtGui.QFont(elem.font_family)
        font.setPixelSize(max(1, int(round(float(elem.font_size)))))
        try:
            font.setWeight(QtGui.QFont.Weight(int(elem.font_weight)))
        except (TypeError, ValueError):
            font.setBold(text_is_bold(elem))
        painter.setFont(font)
        painter.setPen(QtCore.Qt.black)

        painter.save()
        painter.setClipRect(r)
        if elem.rotation:
            painter.translate(r.center())
            painter.rotate(float(elem.rotation))
            painter.translate(-r.center())
        painter.drawText(r, int(QtCore.Qt.AlignLeft | QtCore.Qt.AlignVCenter), elem.content)
        painter.restore()

    def _paint_barcode(self, painter: QtGui.QPainter, elem: BarcodeElement, r: QtCore.QRectF) -> None:
        # placeholder stripes, not a real symbol
        text_h = min(12.0, r.height() / 3)
        bar_rect = QtCore.QRectF(r.left(), r.top(), r.width(), r.height() - text_h)
        x = bar_rect.left() + 2
        i = 0
        while x < bar_rect.right() - 2:
            w = 1 + (i * 7 % 3)
            if i % 2 == 0:
                painter.fillRect(QtCore.QRectF(x, bar_rect.top() + 2, w, bar_rect.height() - 4), QtCore.Qt.black)
            x += w + 1
            i += 1

        font = QtGui.QFont("Courier New")
        font.setPixelSize(max(6, int(text_h) - 2))
        painter.setFont(font)
        painter.setPen(QtCore.Qt.black)
        painter.drawText(
            QtCore.QRectF(r.left(), r.bottom() - text_h, r.width(), text_h),
            int(QtCore.Qt.AlignHCenter | QtCore.Qt.AlignVCenter),
            elem.data,
        )

    def _paint_qr(self, painter: QtGui.QPainter, elem: QrElement, r: QtCore.QRectF) -> None:
        # three finder squares as a placeholder
        side = min(r.width(), r.height())
        finder = side * 0.3
        painter.setPen(QtCore.Qt.NoPen)
        for fx, fy in (
            (r.left(), r.top()),
            (r.left() + side - finder, r.top()),
            (r.left(), r.top() + side - finder),
        ):
            outer = QtCore.QRectF(fx, fy, finder, finder)
            painter.fillRect(outer, QtCore.Qt.black)
            painter.fillRect(outer.adjusted(finder / 7, finder / 7, -finder / 7, -finder / 7), QtCore.Qt.white)
            painter.fillRect(outer.adjusted(finder * 2 / 7, finder * 2 / 7, -finder * 2 / 7, -finder * 2 / 7), QtCore.Qt.black)
        pen = QtGui.QPen(QtGui.QColor("#9ca3af"))
        pen.setStyle(QtCore.Qt.DotLine)
        painter.setPen(pen)
        painter.drawRect(QtCore.QRectF(r.left(), r.top(), side, side))

    def paint(
        self,
        painter: QtGui.QPainter,
        option: QtWidgets.QStyleOptionGraphicsItem,
        widget=None,
    ) -> None:
        elem = self.elem
        if elem is None:
            return
        r = self.rect()

        if isinstance(elem, TextElement):
            self._paint_text(painter, elem, r)
        elif isinstance(elem, BarcodeElement):
            self._paint_barcode(painter, elem, r)
        elif isinstance(elem, QrElement):
            self._paint_qr(painter, elem, r)
        else:
            pen = QtGui.QPen(QtGui.QColor("#9ca3af"))
            pen.setStyle(QtCore.Qt.DashLine)
            painter.setPen(pen)
            painter.drawRect(r)

        # selection outline + handles
        if self._selected:
            pen = QtGui.QPen(QtGui.QColor("#7c3aed"))
            pen.setWidth(1)
            painter.setPen(pen)
            painter.setBrush(QtCore.Qt.NoBrush)
            painter.drawRect(r)
            for rect in self._handle_rects().values():
                painter.fillRect(rect, QtCore.Qt.white)
                painter.drawRect(rect)

    # ---------- interaction ----------
    _CURSORS: Dict[Handle, QtCore.Qt.CursorShape] = {
        Handle.N: QtCore.Qt.SizeVerCursor,
        Handle.S: QtCore.Qt.SizeVerCursor,
        Handle.E: QtCore.Qt.SizeHorCursor,
        Handle.W: QtCore.Qt.SizeHorCursor,
        Handle.NW: QtCore.Qt.SizeFDiagCursor,
        Handle.SE: QtCore.Qt.SizeFDiagCursor,
        Handle.NE: QtCore.Qt.SizeBDiagCursor,
        Handle.SW: QtCore.Qt.SizeBDiagCursor,
    }

    def hoverMoveEvent(self, event: QtWidgets.QGraphicsSceneHoverEvent) -> None:
        handle = self._hit_handle(event.pos())
        if handle is not None:
            self.setCursor(self._CURSORS[handle])
        else:
            self.setCursor(QtCore.Qt.SizeAllCursor)
        super().hoverMoveEvent(event)

    def mousePressEvent(self, event: QtWidgets.QGraphicsSceneMouseEvent) -> None:
        if event.button() != QtCore.Qt.LeftButton:
            return super().mousePressEvent(event)

        pos = event.scenePos()
        handle = self._hit_handle(event.pos())
        if handle is not None:
            self.interaction.press_handle(handle, pos.x(), pos.y())
        else:
            self.interaction.press_body(pos.x(), pos.y())
        self.setFocus()
        event.accept()

    def mouseMoveEvent(self, event: QtWidgets.QGraphicsSceneMouseEvent) -> None:
        if not self.interaction.active:
            return super().mouseMoveEvent(event)
        pos = event.scenePos()
        self.interaction.move(pos.x(), pos.y())
        event.accept()

    def mouseReleaseEvent(self, event: QtWidgets.QGraphicsSceneMouseEvent) -> None:
        if event.button() == QtCore.Qt.LeftButton and self.interaction.active:
            self.interaction.release()
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def itemChange(
        self,
        change: QtWidgets.QGraphicsItem.GraphicsItemChange,
        value,
    ):
        # removed from the scene mid-session: drop the grab
        if change == QtWidgets.QGraphicsItem.ItemSceneChange and value is None:
            self.interaction.close()
        return super().itemChange(change, value)

