from __future__ import annotations
from typing import Sequence

from .constants import DEFAULT_STYLE, get_glyphs
from .tree_model import TreeNode, compute_is_last


def build_line(
    depth: int,
    text: str,
    is_last: bool,
    ancestor_last: Sequence[bool],
    style: str = DEFAULT_STYLE,
) -> str:
    """Draw a single tree line

    Args:
        depth: Nesting depth of the node
        text: The payload to put after the branch marker
        is_last: Whether the node is the last of its siblings
        ancestor_last: For each ancestor depth, whether that ancestor was the
            last of its siblings. Missing entries are drawn as continuing.
        style: Name of the glyph style
    """
    glyphs = get_glyphs(style)
    pieces = []
    for level in range(depth):
        last_here = ancestor_last[level] if level < len(ancestor_last) else False
        pieces.append(glyphs.blank if last_here else glyphs.vertical)
    pieces.append(glyphs.corner if is_last else glyphs.tee)
    pieces.append(text)
    return "".join(pieces)


def format_nodes(nodes: Sequence[TreeNode], style: str = DEFAULT_STYLE) -> list[str]:
    """Regenerate the full text of every node, one line per node

    The existing prefixes are ignored entirely, so the output is always in
    the canonical form of the given style.
    """
    is_last = compute_is_last(nodes)
    # The is-last flag of whichever node most recently owned each depth
    last_at_depth: dict[int, bool] = {}
    lines = []
    for node, last in zip(nodes, is_last):
        depth = node.depth
        for stale in [d for d in last_at_depth if d >= depth]:
            del last_at_depth[stale]
        ancestor_last = [last_at_depth.get(level, False) for level in range(depth)]
        lines.append(build_line(depth, node.text, last, ancestor_last, style))
        last_at_depth[depth] = last
    return lines
