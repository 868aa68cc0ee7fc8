from __future__ import annotations
from typing import TYPE_CHECKING, Any

from Qt import QtGui, QtWidgets

from . import DocumentView
from ..structure_query import (
    DecorationBuckets,
    DecorationRange,
    collect_tree_decorations,
    collect_tree_decorations_for_markdown,
)

if TYPE_CHECKING:
    from ..line_editor import TreeEditor


class TreeDecorations(DocumentView):
    """Colors tree prefixes, folder names and file names

    The ranges are painted as extra selections so they sit on top of any
    other highlighting without replacing it.
    """

    def __init__(self, editor: TreeEditor):
        super().__init__(editor)
        self.formats: dict[str, QtGui.QTextCharFormat] = {}
        self.buckets = DecorationBuckets()
        self.syncOptions()

    def _colors(self, val: dict[str, Any]):
        prefix = QtGui.QTextCharFormat()
        prefix.setForeground(QtGui.QColor(val["prefix"]))

        folder = QtGui.QTextCharFormat()
        folder.setForeground(QtGui.QColor(val["folder"]))
        folder.setFontWeight(QtGui.QFont.Weight.Bold)

        file = QtGui.QTextCharFormat()
        file.setForeground(QtGui.QColor(val["file"]))

        self.formats = {"prefix": prefix, "folder": folder, "file": file}
        self.refresh()

    colors = property(None, _colors)

    def collect(self) -> DecorationBuckets:
        lines = self.editor.document().lines()
        if self.document_kind == "tree":
            return collect_tree_decorations(lines)
        if self.document_kind == "markdown":
            return collect_tree_decorations_for_markdown(lines)
        return DecorationBuckets()

    def refresh(self):
        self.buckets = self.collect()
        if not self.formats:
            return

        selections = []
        for name, ranges in zip(("prefix", "folder", "file"), self.buckets):
            fmt = self.formats[name]
            selections.extend(self._create_selection(rng, fmt) for rng in ranges)
        self.editor.setExtraSelections(selections)

    def _create_selection(
        self, rng: DecorationRange, fmt: QtGui.QTextCharFormat
    ) -> QtWidgets.QTextEdit.ExtraSelection:
        doc = self.editor.document()
        cursor = QtGui.QTextCursor(doc)
        cursor.setPosition(doc.point_to_char(rng.line, rng.start))
        cursor.setPosition(
            doc.point_to_char(rng.line, rng.end), QtGui.QTextCursor.MoveMode.KeepAnchor
        )
        selection = QtWidgets.QTextEdit.ExtraSelection()
        selection.cursor = cursor
        selection.format = fmt
        return selection

    def remove(self):
        super().remove()
        self.editor.setExtraSelections([])
