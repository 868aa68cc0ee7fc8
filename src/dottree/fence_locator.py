from __future__ import annotations
from typing import Optional, Sequence

import tree_sitter_markdown as tsmarkdown
from tree_sitter import Language, Node, Parser, Tree

from .tree_model import TreeBlock


class FenceLocator:
    """Finds the fenced code blocks of a markdown document that hold tree text

    The document is parsed with the tree-sitter markdown block grammar, so
    fences follow the CommonMark rules: a fence is closed by a fence of the
    same character that is at least as long, and an unclosed fence runs to
    the end of the document.
    """

    TREE_LANGUAGE = "tree"

    def __init__(self, language: Optional[Language] = None):
        if language is None:
            language = Language(tsmarkdown.language())
        self.parser = Parser(language)
        self.tree: Optional[Tree] = None

    def parse(self, lines: Sequence[str]) -> Tree:
        # A closing fence on the last line is only seen as one when the line ends
        text = "".join(line + "\n" for line in lines)
        self.tree = self.parser.parse(text.encode("utf8"))
        return self.tree

    def find_tree_fences(self, lines: Sequence[str]) -> list[TreeBlock]:
        """Get the content line range of every ```tree fence

        The ranges never include the fence lines themselves. Empty fences are
        left out.
        """
        tree = self.parse(lines)
        fences: list[TreeBlock] = []
        self._find_fenced_blocks(tree.root_node, len(lines), fences)
        return fences

    def _find_fenced_blocks(self, node: Node, line_count: int, fences: list[TreeBlock]):
        """Recursively collect tree fences, since blocks nest inside sections and lists"""
        if node.type == "fenced_code_block":
            if self.fence_language(node) == self.TREE_LANGUAGE:
                start = node.start_point.row + 1
                delimiters = [
                    child
                    for child in node.children
                    if child.type == "fenced_code_block_delimiter"
                ]
                closing_row = delimiters[-1].start_point.row if delimiters else -1
                if len(delimiters) > 1 and closing_row > node.start_point.row:
                    end = closing_row - 1
                else:
                    end = line_count - 1
                if end >= start:
                    fences.append(TreeBlock(start, end))
            return

        for child in node.children:
            self._find_fenced_blocks(child, line_count, fences)

    @staticmethod
    def fence_language(node: Node) -> str:
        """Get the lowercased language tag of a fenced code block"""
        for child in node.children:
            if child.type != "info_string":
                continue
            for part in child.children:
                if part.type == "language" and part.text is not None:
                    return part.text.decode("utf8").lower()
        return ""


_default_locator: Optional[FenceLocator] = None


def find_tree_fences(lines: Sequence[str]) -> list[TreeBlock]:
    """Find tree fences with a shared, lazily created locator"""
    global _default_locator
    if _default_locator is None:
        _default_locator = FenceLocator()
    return _default_locator.find_tree_fences(lines)
