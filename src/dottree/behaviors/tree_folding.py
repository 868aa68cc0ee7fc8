from __future__ import annotations
from typing import TYPE_CHECKING, Iterable, Iterator

from Qt import QtGui, QtCore, QtWidgets
from Qt.QtCore import Signal

from . import HasResize, DocumentView
from ..structure_query import (
    FoldingRange,
    build_folding_ranges,
    build_folding_ranges_for_markdown,
)

if TYPE_CHECKING:
    from ..line_editor import TreeEditor


class FoldGutter(QtWidgets.QWidget):
    """Strip left of the text showing a marker on every line that owns a subtree

    Clicking a marker emits `foldClicked` with the line number. The gutter
    only draws, the fold state lives in `folded`.
    """

    foldClicked = Signal(int)

    MARKERS = {False: "▾", True: "▸"}
    PADDING = 3

    def __init__(self, editor: TreeEditor):
        super().__init__(editor)
        self.editor: TreeEditor = editor
        self.fg_color = QtGui.QColor(150, 150, 150)
        self.bg_color = QtGui.QColor(40, 40, 40)
        self.ranges: dict[int, FoldingRange] = {}  # by start line
        self.folded: set[FoldingRange] = set()

        self.editor.updateRequest.connect(self._on_update_request)

    def setColors(self, fg: QtGui.QColor, bg: QtGui.QColor):
        self.fg_color = fg
        self.bg_color = bg
        self.update()

    def gutter_width(self) -> int:
        metrics = self.editor.fontMetrics()
        marker = max(metrics.horizontalAdvance(m) for m in self.MARKERS.values())
        return marker + self.PADDING * 2

    def sizeHint(self):
        return QtCore.QSize(self.gutter_width(), 0)

    def setRanges(self, ranges: Iterable[FoldingRange]):
        self.ranges = {fold.start_line: fold for fold in ranges}
        self.update()

    def _on_update_request(self, rect: QtCore.QRect, dy: int):
        if dy:
            self.scroll(0, dy)
        else:
            self.update(0, rect.y(), self.width(), rect.height())

    def _visible_lines(self, clip: QtCore.QRect) -> Iterator[tuple[int, QtCore.QRectF]]:
        """Yield the number and viewport rect of each shown line inside clip"""
        block = self.editor.firstVisibleBlock()
        offset = self.editor.contentOffset()
        while block.isValid():
            rect = self.editor.blockBoundingGeometry(block).translated(offset)
            if rect.top() > clip.bottom():
                break
            if block.isVisible() and rect.bottom() >= clip.top():
                yield block.blockNumber(), rect
            block = block.next()

    def paintEvent(self, event: QtGui.QPaintEvent):
        painter = QtGui.QPainter(self)
        painter.fillRect(event.rect(), self.bg_color)
        painter.setPen(self.fg_color)
        for line, rect in self._visible_lines(event.rect()):
            fold = self.ranges.get(line)
            if fold is None:
                continue
            painter.drawText(
                QtCore.QRectF(0, rect.top(), self.width(), rect.height()),
                QtCore.Qt.AlignmentFlag.AlignCenter,
                self.MARKERS[fold in self.folded],
            )
        painter.end()

    def mousePressEvent(self, event: QtGui.QMouseEvent):
        if event.button() == QtCore.Qt.MouseButton.LeftButton:
            cursor = self.editor.cursorForPosition(QtCore.QPoint(0, event.pos().y()))
            self.foldClicked.emit(cursor.blockNumber())
        super().mousePressEvent(event)


class TreeFolding(HasResize, DocumentView):
    """Fold gutter for tree nodes that have children

    Folds survive edits as long as the folded node still spans the same lines.
    """

    def __init__(self, editor: TreeEditor):
        super().__init__(editor)
        self.gutter = FoldGutter(self.editor)
        self.gutter.foldClicked.connect(self.toggle_fold)
        self.set_geometry()
        self.syncOptions()

    @property
    def regions(self) -> list[FoldingRange]:
        return sorted(self.gutter.ranges.values())

    @property
    def folded(self) -> set[FoldingRange]:
        return self.gutter.folded

    def foldingRanges(self) -> list[FoldingRange]:
        lines = self.editor.document().lines()
        if self.document_kind == "tree":
            return build_folding_ranges(lines)
        if self.document_kind == "markdown":
            return build_folding_ranges_for_markdown(lines)
        return []

    def refresh(self):
        ranges = self.foldingRanges()
        had_folds = bool(self.gutter.folded)
        self.gutter.folded &= set(ranges)
        self.gutter.setRanges(ranges)
        if had_folds:
            self._apply_visibility()

    def _apply_visibility(self):
        """Hide every line under a folded node and show all the others"""
        hidden: set[int] = set()
        for fold in self.gutter.folded:
            hidden.update(range(fold.start_line + 1, fold.end_line + 1))

        doc = self.editor.document()
        block = doc.begin()
        while block.isValid():
            block.setVisible(block.blockNumber() not in hidden)
            block = block.next()

        doc.markContentsDirty(0, doc.characterCount())
        self.editor.viewport().update()
        self.gutter.update()

    def toggle_fold(self, line: int) -> bool:
        """Toggle the fold of the node on a line

        Returns:
            False if no foldable node starts on the line
        """
        fold = self.gutter.ranges.get(line)
        if fold is None:
            return False
        self.gutter.folded ^= {fold}
        self._apply_visibility()
        return True

    def fold_to_level(self, max_depth: int):
        """Fold every node at or below max_depth and unfold the rest"""
        self.gutter.folded = {
            fold for fold in self.gutter.ranges.values() if fold.depth >= max_depth
        }
        self._apply_visibility()

    def fold_all(self):
        self.fold_to_level(0)

    def unfold_all(self):
        self.gutter.folded = set()
        self._apply_visibility()

    def _colors(self, val):
        self.gutter.setColors(QtGui.QColor(val["gutter_fg"]), QtGui.QColor(val["gutter"]))

    colors = property(None, _colors)

    def resizeEvent(self, e: QtGui.QResizeEvent):
        self.set_geometry()

    def set_geometry(self):
        cr = self.editor.contentsRect()
        width = self.gutter.gutter_width()
        self.editor.setViewportMargins(width, 0, 0, 0)
        self.gutter.setGeometry(QtCore.QRect(cr.left(), cr.top(), width, cr.height()))

    def remove(self):
        super().remove()
        self.unfold_all()
        self.editor.setViewportMargins(0, 0, 0, 0)
        self.gutter.deleteLater()
