from __future__ import annotations
from typing import Mapping

from Qt.QtWidgets import QPlainTextDocumentLayout
from Qt.QtCore import Signal, Slot
from Qt.QtGui import QTextCursor, QTextDocument

from .utils import column_from_utf16, len16


class TrackedDocument(QTextDocument):
    """A QTextDocument that reports changes by line and applies whole-line edits

    Connect to `lineContentsChange` to get the line a change started on, along
    with the number of characters removed and added. `replaced_all` tells if
    the latest change replaced the whole document, like `setPlainText` does.

    Qt positions count UTF-16 code units while line/column pairs here are
    python string indices, so astral characters are one column wide.
    """

    lineContentsChange = Signal(int, int, int)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.lay = QPlainTextDocumentLayout(self)
        self.setDocumentLayout(self.lay)
        self.replaced_all = False
        self._char_count = self.characterCount()
        self.contentsChange.connect(self._on_contents_change)

    def lines(self) -> list[str]:
        """Get the text of every line, without line breaks"""
        out = []
        block = self.begin()
        while block.isValid():
            out.append(block.text())
            block = block.next()
        return out

    def point_to_char(self, line: int, column: int) -> int:
        """Get the document-global character offset of a line/column pair"""
        block = self.findBlockByNumber(line)
        return block.position() + len16(block.text()[:column])

    def char_to_point(self, position: int) -> tuple[int, int]:
        """Get the line/column pair of a document-global character offset"""
        block = self.findBlock(position)
        column = column_from_utf16(block.text(), position - block.position())
        return block.blockNumber(), column

    def _select_lines(self, cursor: QTextCursor, start: int, end: int):
        """Select the text of lines [start, end], leaving out the final line break"""
        cursor.setPosition(self.findBlockByNumber(start).position())
        last = self.findBlockByNumber(end)
        # length() counts the block separator too
        cursor.setPosition(
            last.position() + last.length() - 1, QTextCursor.MoveMode.KeepAnchor
        )

    def replace_lines(self, replacements: Mapping[int, str]):
        """Replace the text of individual lines as a single undo step"""
        cursor = QTextCursor(self)
        cursor.beginEditBlock()
        try:
            for line in sorted(replacements):
                self._select_lines(cursor, line, line)
                cursor.insertText(replacements[line])
        finally:
            cursor.endEditBlock()

    def replace_line_range(self, start: int, end: int, text: str):
        """Replace lines [start, end] with text as a single undo step

        The line break after `end` is kept, so `text` shouldn't end with one.
        """
        cursor = QTextCursor(self)
        cursor.beginEditBlock()
        try:
            self._select_lines(cursor, start, end)
            cursor.insertText(text)
        finally:
            cursor.endEditBlock()

    @Slot(int, int, int)
    def _on_contents_change(self, position: int, chars_removed: int, chars_added: int):
        """Translate a character based change into the line it starts on"""
        self.replaced_all = position == 0 and chars_removed >= self._char_count - 1
        self._char_count = self.characterCount()
        start_line = self.findBlock(position).blockNumber()
        self.lineContentsChange.emit(max(0, start_line), chars_removed, chars_added)
