from __future__ import annotations
from typing import Iterator, NamedTuple, Optional, Sequence

from .tree_lines import is_tree_line, parse_line


class TreeNode:
    """One entry of a parsed tree block"""

    def __init__(self, source_line: Optional[int], depth: int, text: str):
        self.source_line = source_line  # None for nodes created by an edit
        self.depth = depth
        self.text = text

    @classmethod
    def synthetic(cls, depth: int, text: str = "") -> TreeNode:
        return cls(None, depth, text)

    @property
    def is_synthetic(self) -> bool:
        return self.source_line is None

    def copy(self) -> TreeNode:
        return TreeNode(self.source_line, self.depth, self.text)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TreeNode):
            return NotImplemented
        return (self.source_line, self.depth, self.text) == (
            other.source_line,
            other.depth,
            other.text,
        )

    def __repr__(self) -> str:
        return f"TreeNode({self.source_line!r}, {self.depth!r}, {self.text!r})"


class TreeBlock(NamedTuple):
    """An inclusive range of document lines that are all tree lines"""

    start: int
    end: int


def find_tree_block(lines: Sequence[str], around: int) -> Optional[TreeBlock]:
    """Expand outward from a line to the maximal run of tree lines containing it

    Returns:
        The block, or None if the line is out of range or not a tree line
    """
    count = len(lines)
    if around < 0 or around >= count:
        return None
    if not is_tree_line(lines[around]):
        return None

    start = around
    while start - 1 >= 0 and is_tree_line(lines[start - 1]):
        start -= 1

    end = around
    while end + 1 < count and is_tree_line(lines[end + 1]):
        end += 1

    return TreeBlock(start, end)


def iter_tree_blocks_in_range(
    lines: Sequence[str], start_line: int, end_line: int
) -> Iterator[TreeBlock]:
    """Yield the maximal runs of tree lines inside an inclusive window

    Blocks never extend past the window, so this is the scan to use for
    fenced regions embedded in a larger document.
    """
    end_line = min(end_line, len(lines) - 1)
    line = max(start_line, 0)
    while line <= end_line:
        if not is_tree_line(lines[line]):
            line += 1
            continue

        block_start = line
        while line <= end_line and is_tree_line(lines[line]):
            line += 1
        yield TreeBlock(block_start, line - 1)


def iter_tree_blocks(lines: Sequence[str]) -> Iterator[TreeBlock]:
    """Yield every tree block in a whole document, top to bottom"""
    return iter_tree_blocks_in_range(lines, 0, len(lines) - 1)


def parse_block(lines: Sequence[str], start: int, end: int) -> list[TreeNode]:
    """Parse the lines of a block into nodes, skipping lines that don't parse"""
    nodes = []
    for line_no in range(start, end + 1):
        parsed = parse_line(lines[line_no])
        if parsed is None:
            continue
        nodes.append(TreeNode(line_no, parsed.depth, parsed.text))
    return nodes


def compute_is_last(nodes: Sequence[TreeNode]) -> list[bool]:
    """Flag each node that has no later sibling

    A sibling is a later node at the same depth that comes before any
    shallower node.
    """
    is_last = []
    for i, node in enumerate(nodes):
        last = True
        for later in nodes[i + 1 :]:
            if later.depth < node.depth:
                break
            if later.depth == node.depth:
                last = False
                break
        is_last.append(last)
    return is_last


def compute_is_leaf(nodes: Sequence[TreeNode]) -> list[bool]:
    """Flag each node that isn't immediately followed by a deeper node"""
    is_leaf = [True] * len(nodes)
    for i in range(len(nodes) - 1):
        if nodes[i + 1].depth > nodes[i].depth:
            is_leaf[i] = False
    return is_leaf


def subtree_range(nodes: Sequence[TreeNode], index: int) -> tuple[int, int]:
    """Get the inclusive node index range of a node and all its descendants"""
    base_depth = nodes[index].depth
    last = index
    while last + 1 < len(nodes) and nodes[last + 1].depth > base_depth:
        last += 1
    return index, last


def node_index_by_line(nodes: Sequence[TreeNode]) -> dict[int, int]:
    """Map each source line number to the index of the node parsed from it"""
    return {
        node.source_line: i
        for i, node in enumerate(nodes)
        if node.source_line is not None
    }
