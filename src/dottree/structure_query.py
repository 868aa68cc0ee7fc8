"""Read-only structure queries for the host: folding and decoration ranges"""
from __future__ import annotations
from typing import Iterable, NamedTuple, Optional, Sequence

from .fence_locator import find_tree_fences
from .tree_lines import get_tree_line_columns
from .tree_model import (
    TreeBlock,
    compute_is_leaf,
    iter_tree_blocks,
    iter_tree_blocks_in_range,
    parse_block,
    subtree_range,
)


class FoldingRange(NamedTuple):
    start_line: int
    end_line: int
    depth: int  # depth of the node that owns the subtree


class DecorationRange(NamedTuple):
    """A span of columns [start, end) on a single line"""

    line: int
    start: int
    end: int


class DecorationBuckets:
    """Decoration ranges grouped by how they should be painted"""

    def __init__(self):
        self.prefixes: list[DecorationRange] = []
        self.folders: list[DecorationRange] = []
        self.files: list[DecorationRange] = []

    def __iter__(self):
        return iter((self.prefixes, self.folders, self.files))

    def __bool__(self) -> bool:
        return bool(self.prefixes or self.folders or self.files)


def folding_ranges_for_block(
    lines: Sequence[str], block: TreeBlock
) -> list[FoldingRange]:
    """Get one folding range per node whose subtree spans more than one line"""
    nodes = parse_block(lines, block.start, block.end)
    ranges = []
    for i, node in enumerate(nodes):
        last = subtree_range(nodes, i)[1]
        if last <= i:
            continue
        start = node.source_line
        end = nodes[last].source_line
        if start is not None and end is not None and end > start:
            ranges.append(FoldingRange(start, end, node.depth))
    return ranges


def _folding_ranges(lines: Sequence[str], blocks: Iterable[TreeBlock]) -> list[FoldingRange]:
    ranges = []
    for block in blocks:
        ranges.extend(folding_ranges_for_block(lines, block))
    return ranges


def build_folding_ranges(lines: Sequence[str]) -> list[FoldingRange]:
    """Get the folding ranges of every tree block in a tree document"""
    return _folding_ranges(lines, iter_tree_blocks(lines))


def build_folding_ranges_for_markdown(lines: Sequence[str]) -> list[FoldingRange]:
    """Get the folding ranges of the tree blocks inside ```tree fences"""
    return _folding_ranges(lines, _iter_fenced_blocks(lines))


def add_decorations_for_block(
    lines: Sequence[str], block: TreeBlock, buckets: DecorationBuckets
):
    """Add the decoration ranges of one block to the buckets

    The prefix runs from the start of the line to the payload. The name runs
    from the payload to a trailing `#` comment, if any, and is a folder if it
    has children or ends with a slash.
    """
    nodes = parse_block(lines, block.start, block.end)
    is_leaf = compute_is_leaf(nodes)

    for node, leaf in zip(nodes, is_leaf):
        line_no = node.source_line
        if line_no is None:
            continue
        text = lines[line_no]
        columns = get_tree_line_columns(text)
        if columns is None:
            continue
        payload_start = columns.payload_start

        prefix_end = min(payload_start, len(text))
        if prefix_end > 0:
            buckets.prefixes.append(DecorationRange(line_no, 0, prefix_end))

        name_end = len(text.rstrip())
        comment_start = text.find("#", payload_start)
        if payload_start <= comment_start < name_end:
            name_end = comment_start
        while name_end > payload_start and text[name_end - 1] == " ":
            name_end -= 1

        name = text[payload_start:name_end].rstrip()
        if not name:
            continue

        span = DecorationRange(line_no, payload_start, min(name_end, len(text)))
        if not leaf or name.endswith("/"):
            buckets.folders.append(span)
        else:
            buckets.files.append(span)


def collect_tree_decorations(lines: Sequence[str]) -> DecorationBuckets:
    """Decorate every tree block of a tree document"""
    buckets = DecorationBuckets()
    for block in iter_tree_blocks(lines):
        add_decorations_for_block(lines, block, buckets)
    return buckets


def collect_tree_decorations_for_markdown(lines: Sequence[str]) -> DecorationBuckets:
    """Decorate only the tree blocks found strictly inside ```tree fences"""
    buckets = DecorationBuckets()
    for block in _iter_fenced_blocks(lines):
        add_decorations_for_block(lines, block, buckets)
    return buckets


def _iter_fenced_blocks(lines: Sequence[str]):
    for fence in find_tree_fences(lines):
        yield from iter_tree_blocks_in_range(lines, fence.start, fence.end)


def template_completion(line: str, character: int) -> Optional[str]:
    """Get the starter tree a lone `|` expands to

    Returns:
        The replacement text for the whole line, or None if the line isn't
        just a `|` with the cursor right after it
    """
    if line.strip() != "|":
        return None
    if not line[:character].endswith("|"):
        return None
    indent = line[: len(line) - len(line.lstrip())]
    return f"{indent}./\n{indent}└─ README.md"
