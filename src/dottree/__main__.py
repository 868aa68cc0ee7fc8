"""Open a tree or markdown file in a tree-aware editor window"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from Qt.QtWidgets import QApplication, QMainWindow

from .behaviors.tree_decorations import TreeDecorations
from .behaviors.tree_editing import TreeEditing
from .behaviors.tree_folding import TreeFolding
from .constants import GLYPHS
from .editor_options import EditorOptions, document_kind_for_path
from .line_editor import TreeEditor


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dottree", description=__doc__)
    parser.add_argument("path", nargs="?", type=Path, help="file to open")
    parser.add_argument(
        "--style", choices=sorted(GLYPHS), default="unicode", help="tree glyph style"
    )
    parser.add_argument(
        "--single-node-indent",
        action="store_true",
        help="indent only the node under a bare cursor, not its subtree",
    )
    parser.add_argument("--debug", action="store_true", help="log debug messages")
    return parser


def build_editor(options: EditorOptions, parent=None) -> TreeEditor:
    editor = TreeEditor(options, parent=parent)
    editor.addBehavior(TreeEditing)
    editor.addBehavior(TreeDecorations)
    editor.addBehavior(TreeFolding)
    return editor


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    text = ""
    kind = "tree"
    if args.path is not None:
        kind = document_kind_for_path(args.path)
        if args.path.exists():
            text = args.path.read_text(encoding="utf8")

    options = EditorOptions(
        {
            "style": args.style,
            "indent_subtree_on_single_cursor": not args.single_node_indent,
            "document_kind": kind,
        }
    )

    app = QApplication(sys.argv[:1])
    win = QMainWindow()
    if args.path is not None:
        win.setWindowTitle(str(args.path))

    editor = build_editor(options, parent=win)
    editor.setPlainText(text)

    win.setCentralWidget(editor)
    win.resize(800, 600)
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
