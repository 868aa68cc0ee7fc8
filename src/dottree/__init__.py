from .constants import ASCII, UNICODE, get_glyphs
from .tree_lines import get_tree_line_columns, is_tree_line, parse_line
from .tree_model import (
    TreeBlock,
    TreeNode,
    compute_is_last,
    compute_is_leaf,
    find_tree_block,
    iter_tree_blocks,
    iter_tree_blocks_in_range,
    parse_block,
    subtree_range,
)
from .renderer import format_nodes
from .structure_editor import (
    BlockReplacement,
    LineReplacements,
    TextSelection,
    indent_or_outdent,
    insert_sibling,
    normalize_block,
)

__all__ = [
    "ASCII",
    "UNICODE",
    "BlockReplacement",
    "LineReplacements",
    "TextSelection",
    "TreeBlock",
    "TreeNode",
    "compute_is_last",
    "compute_is_leaf",
    "find_tree_block",
    "format_nodes",
    "get_glyphs",
    "get_tree_line_columns",
    "indent_or_outdent",
    "insert_sibling",
    "is_tree_line",
    "iter_tree_blocks",
    "iter_tree_blocks_in_range",
    "normalize_block",
    "parse_block",
    "parse_line",
    "subtree_range",
]
