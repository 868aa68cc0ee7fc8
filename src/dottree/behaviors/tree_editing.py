from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Callable, Mapping

from Qt.QtCore import QTimer, Qt
from Qt.QtGui import QKeyEvent

from . import HasKeyPress, Behavior
from ..constants import DEFAULT_STYLE
from ..edit_tracking import EditGuard, LineCountCache, should_normalize
from ..structure_editor import (
    BlockReplacement,
    TextSelection,
    indent_or_outdent,
    insert_sibling,
    normalize_around_line,
)
from ..structure_query import template_completion
from ..tree_lines import get_tree_line_columns
from ..utils import hk

if TYPE_CHECKING:
    from ..line_editor import TreeEditor

logger = logging.getLogger(__name__)


class TreeEditing(HasKeyPress, Behavior):
    """Structural editing of tree lines

    Tab and Shift+Tab indent and outdent tree nodes, and Return starts a new
    sibling. On anything that isn't a tree line the keys fall through to the
    editor's normal handling. After an edit that joins lines, the tree block
    around the change is redrawn.
    """

    option_keys = frozenset({"style", "indent_subtree_on_single_cursor"})

    def __init__(self, editor: TreeEditor):
        self.style: str = DEFAULT_STYLE
        self.indent_subtree_on_single_cursor: bool = True
        super().__init__(editor)

        self.guard = EditGuard()
        self.line_counts = LineCountCache()

        self.hotkeys: dict[str, Callable[[], bool]] = {
            hk(Qt.Key.Key_Tab): self.indent,
            hk(Qt.Key.Key_Backtab): self.outdent,
            hk(Qt.Key.Key_Tab, Qt.KeyboardModifier.ShiftModifier): self.outdent,
            hk(Qt.Key.Key_Return): self.insertSibling,
            hk(Qt.Key.Key_Enter, Qt.KeyboardModifier.KeypadModifier): self.insertSibling,
        }

        doc = self.editor.document()
        self.line_counts.observe(doc, doc.blockCount())
        doc.lineContentsChange.connect(self._on_line_contents_change)
        self.syncOptions()

    def keyPressEvent(self, event: QKeyEvent, hotkey: str) -> bool:
        func = self.hotkeys.get(hotkey)
        if func is None:
            return False
        return func()

    def indent(self) -> bool:
        """Indent the tree node under the cursor, or every selected node"""
        if self.expandTemplate():
            return True
        return self._shift(1)

    def outdent(self) -> bool:
        """Outdent the tree node under the cursor, or every selected node"""
        return self._shift(-1)

    def expandTemplate(self) -> bool:
        """Replace a lone `|` before the cursor with a starter tree"""
        selection = self.editor.textSelection()
        if not selection.is_empty:
            return False
        doc = self.editor.document()
        line = doc.findBlockByNumber(selection.active_line).text()
        text = template_completion(line, selection.active_character)
        if text is None:
            return False

        with self.guard.applying():
            doc.replace_line_range(selection.active_line, selection.active_line, text)
        last_line = selection.active_line + text.count("\n")
        last_len = len(doc.findBlockByNumber(last_line).text())
        self.editor.setTextSelection(TextSelection.at(last_line, last_len))
        return True

    def _shift(self, delta: int) -> bool:
        doc = self.editor.document()
        lines = doc.lines()
        selection = self.editor.textSelection()
        replacements = indent_or_outdent(
            lines,
            selection,
            delta,
            self.style,
            self.indent_subtree_on_single_cursor,
        )
        if replacements is None:
            return False

        self._apply_lines(replacements)
        self.editor.setTextSelection(
            TextSelection(
                selection.anchor_line,
                self._moved_column(lines, selection.anchor_line, selection.anchor_character),
                selection.active_line,
                self._moved_column(lines, selection.active_line, selection.active_character),
            )
        )
        return True

    def _moved_column(self, old_lines: list[str], line: int, column: int) -> int:
        """Keep a column at the same place in the payload after its prefix changed"""
        new_text = self.editor.document().findBlockByNumber(line).text()
        old_cols = get_tree_line_columns(old_lines[line])
        new_cols = get_tree_line_columns(new_text)
        if old_cols is None or new_cols is None:
            return min(column, len(new_text))
        offset = column - old_cols.payload_start
        return max(0, min(len(new_text), new_cols.payload_start + offset))

    def insertSibling(self) -> bool:
        """Start a new sibling of the tree node under the cursor"""
        result = insert_sibling(
            self.editor.document().lines(), self.editor.textSelection(), self.style
        )
        if result is None:
            return False

        self._apply_block(result)
        self.editor.setTextSelection(
            TextSelection.at(result.cursor_line, result.cursor_column)
        )
        return True

    def _apply_lines(self, replacements: Mapping[int, str]):
        with self.guard.applying():
            self.editor.document().replace_lines(replacements)

    def _apply_block(self, replacement: BlockReplacement):
        with self.guard.applying():
            self.editor.document().replace_line_range(
                replacement.start, replacement.end, replacement.render()
            )

    def _on_line_contents_change(self, start_line: int, _removed: int, added: int):
        doc = self.editor.document()
        count = doc.blockCount()
        previous = self.line_counts.observe(doc, count)
        if self.guard.active or doc.replaced_all:
            return

        # Qt doesn't report the removed text, so a pure removal that lowered
        # the line count is taken as a deleted line break
        deleted_line_break = added == 0 and previous is not None and count < previous
        if not should_normalize(previous, count, deleted_line_break):
            return
        # The document can't be edited from inside its own change signal
        QTimer.singleShot(0, lambda: self.normalizeAround(start_line))

    def normalizeAround(self, line: int) -> bool:
        """Redraw the tree block at, above or below a line

        Returns:
            True if any line changed
        """
        lines = self.editor.document().lines()
        replacements = normalize_around_line(lines, line, self.style)
        if not replacements:
            return False
        logger.debug("Normalized %d tree lines near line %d", len(replacements), line)
        selection = self.editor.textSelection()
        self._apply_lines(replacements)
        if selection.is_empty:
            column = self._moved_column(
                lines, selection.active_line, selection.active_character
            )
            self.editor.setTextSelection(TextSelection.at(selection.active_line, column))
        return True

    def remove(self):
        self.editor.document().lineContentsChange.disconnect(
            self._on_line_contents_change
        )
        super().remove()
