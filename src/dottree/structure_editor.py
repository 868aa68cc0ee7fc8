"""Block-level structural edits of tree text

Every operation re-parses the block around the cursor, changes an in-memory
copy of its nodes and renders the whole block again. Nothing is kept
between calls. An operation that doesn't apply to the cursor position
returns None so the host can fall back to its default behavior.
"""
from __future__ import annotations
import logging
from typing import Collection, Dict, NamedTuple, Optional, Sequence

from .constants import DEFAULT_STYLE
from .renderer import format_nodes
from .tree_lines import get_tree_line_columns
from .tree_model import (
    TreeBlock,
    TreeNode,
    find_tree_block,
    node_index_by_line,
    parse_block,
    subtree_range,
)

logger = logging.getLogger(__name__)

# Line number to the new text of that line
LineReplacements = Dict[int, str]


class TextSelection(NamedTuple):
    """A host selection as line/character pairs. The active end holds the cursor"""

    anchor_line: int
    anchor_character: int
    active_line: int
    active_character: int

    @classmethod
    def at(cls, line: int, character: int) -> TextSelection:
        """Build an empty selection, ie. a bare cursor"""
        return cls(line, character, line, character)

    @property
    def is_empty(self) -> bool:
        return (self.anchor_line, self.anchor_character) == (
            self.active_line,
            self.active_character,
        )

    @property
    def start_line(self) -> int:
        return min(self.anchor_line, self.active_line)

    @property
    def end_line(self) -> int:
        return max(self.anchor_line, self.active_line)


class BlockReplacement(NamedTuple):
    """Replace the inclusive line range [start, end] with new lines"""

    start: int
    end: int
    lines: list[str]
    cursor_line: int
    cursor_column: int

    def render(self, eol: str = "\n", trailing_line_break: bool = False) -> str:
        """Join the new lines with the document's line ending

        Args:
            eol: The line ending used by the document
            trailing_line_break: Whether the replaced range included the line
                break after its last line
        """
        text = eol.join(self.lines)
        if trailing_line_break:
            text += eol
        return text


def _render_by_line(nodes: Sequence[TreeNode], style: str) -> LineReplacements:
    """Render the nodes and key the output by each node's source line"""
    formatted = format_nodes(nodes, style)
    return {
        node.source_line: text
        for node, text in zip(nodes, formatted)
        if node.source_line is not None
    }


def normalize_block(
    lines: Sequence[str], block: TreeBlock, style: str = DEFAULT_STYLE
) -> LineReplacements:
    """Re-render a block in canonical form

    Returns:
        A mapping of line number to new text, holding only the lines whose
        text actually changes. Empty if the block is already canonical.
    """
    nodes = parse_block(lines, block.start, block.end)
    if not nodes:
        return {}
    rendered = _render_by_line(nodes, style)
    return {
        line_no: text for line_no, text in rendered.items() if lines[line_no] != text
    }


def select_targets(
    nodes: Sequence[TreeNode],
    selection: TextSelection,
    subtree_on_single_cursor: bool = True,
) -> Optional[set[int]]:
    """Get the indices of the nodes an indent or outdent should move

    A selection moves every selected node along with its whole subtree. A bare
    cursor moves the node under it, and its subtree unless
    `subtree_on_single_cursor` is turned off.

    Returns:
        The target indices, or None if a bare cursor isn't on a parsed node
    """
    line_to_idx = node_index_by_line(nodes)
    targets: set[int] = set()

    if not selection.is_empty:
        for line_no in range(selection.start_line, selection.end_line + 1):
            idx = line_to_idx.get(line_no)
            if idx is None:
                continue
            first, last = subtree_range(nodes, idx)
            targets.update(range(first, last + 1))
        return targets

    idx = line_to_idx.get(selection.active_line)
    if idx is None:
        return None
    if subtree_on_single_cursor:
        first, last = subtree_range(nodes, idx)
        targets.update(range(first, last + 1))
    else:
        targets.add(idx)
    return targets


def shift_depths(
    nodes: Sequence[TreeNode], targets: Collection[int], delta: int
) -> list[TreeNode]:
    """Move the target nodes `delta` levels deeper or shallower

    Returns new nodes, the input is left untouched. Outdenting clamps at depth
    0. Indenting is resolved in a single left to right pass, and a target
    that would end up more than one level below the node before it keeps its
    depth. The first node of a block has nothing before it and can always
    be indented.
    """
    shifted = [node.copy() for node in nodes]
    if delta <= 0:
        for idx in targets:
            shifted[idx].depth = max(0, shifted[idx].depth + delta)
        return shifted

    prev_depth: Optional[int] = None
    for idx, node in enumerate(shifted):
        if idx in targets:
            proposed = node.depth + delta
            if prev_depth is not None and proposed > prev_depth + 1:
                logger.debug(
                    "Rejected indent of line %s: depth %d would be below %d",
                    node.source_line,
                    proposed,
                    prev_depth,
                )
            else:
                node.depth = proposed
        prev_depth = node.depth
    return shifted


def indent_or_outdent(
    lines: Sequence[str],
    selection: TextSelection,
    delta: int,
    style: str = DEFAULT_STYLE,
    subtree_on_single_cursor: bool = True,
) -> Optional[LineReplacements]:
    """Indent (positive delta) or outdent (negative delta) tree nodes

    Returns:
        The new text of every parsed line in the block, or None if the cursor
        isn't on a tree line
    """
    block = find_tree_block(lines, selection.active_line)
    if block is None:
        logger.debug("Line %d is not a tree line", selection.active_line)
        return None

    nodes = parse_block(lines, block.start, block.end)
    if not nodes:
        return None

    targets = select_targets(nodes, selection, subtree_on_single_cursor)
    if targets is None:
        logger.debug("Line %d didn't parse as a tree node", selection.active_line)
        return None

    return _render_by_line(shift_depths(nodes, targets, delta), style)


def insert_sibling(
    lines: Sequence[str], selection: TextSelection, style: str = DEFAULT_STYLE
) -> Optional[BlockReplacement]:
    """Insert an empty sibling of the node under the cursor

    With the cursor between the branch marker and the payload the new node
    goes right above the current one. Otherwise it goes after the current
    node's whole subtree. Both get the current node's depth.

    Returns:
        A replacement for the whole block with the cursor placed at the end
        of the new line, or None if this isn't a bare cursor on a tree node
    """
    if not selection.is_empty:
        return None

    line_no = selection.active_line
    block = find_tree_block(lines, line_no)
    if block is None:
        return None

    nodes = parse_block(lines, block.start, block.end)
    idx = node_index_by_line(nodes).get(line_no)
    if idx is None:
        return None

    depth = nodes[idx].depth
    columns = get_tree_line_columns(lines[line_no])
    in_prefix = (
        columns is not None
        and columns.marker_end <= selection.active_character <= columns.payload_start
    )
    if in_prefix:
        insert_at = idx
    else:
        insert_at = subtree_range(nodes, idx)[1] + 1

    nodes.insert(insert_at, TreeNode.synthetic(depth))
    formatted = format_nodes(nodes, style)
    return BlockReplacement(
        start=block.start,
        end=block.end,
        lines=formatted,
        cursor_line=block.start + insert_at,
        cursor_column=len(formatted[insert_at]),
    )


def normalize_around_line(
    lines: Sequence[str], line_no: int, style: str = DEFAULT_STYLE
) -> LineReplacements:
    """Normalize the first tree block found at, above or below a line

    Used after an edit that joined lines, where the changed line may have
    stopped being a tree line while its neighbors still are.
    """
    if not lines:
        return {}
    line_no = min(max(0, line_no), len(lines) - 1)
    for candidate in (line_no, line_no - 1, line_no + 1):
        block = find_tree_block(lines, candidate)
        if block is None:
            continue
        logger.debug("Normalizing tree block %d-%d", block.start, block.end)
        return normalize_block(lines, block, style)
    return {}
