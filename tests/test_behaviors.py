import pytest

QtCore = pytest.importorskip("Qt.QtCore")

from Qt.QtCore import QEvent, Qt  # noqa: E402
from Qt.QtGui import QKeyEvent, QTextCursor  # noqa: E402
from Qt.QtWidgets import QApplication  # noqa: E402

from dottree.__main__ import build_editor, build_parser  # noqa: E402
from dottree.behaviors.tree_decorations import TreeDecorations  # noqa: E402
from dottree.behaviors.tree_editing import TreeEditing  # noqa: E402
from dottree.behaviors.tree_folding import TreeFolding  # noqa: E402
from dottree.editor_options import (  # noqa: E402
    DEFAULT_COLORS,
    EditorOptions,
    document_kind_for_path,
)
from dottree.structure_editor import TextSelection  # noqa: E402
from dottree.structure_query import FoldingRange  # noqa: E402


@pytest.fixture
def options():
    return EditorOptions()


@pytest.fixture
def editor(qapp, options):
    editor = build_editor(options)
    yield editor
    editor.deleteLater()


def set_text(editor, text, line=0, character=0):
    editor.setPlainText(text)
    editor.setTextSelection(TextSelection.at(line, character))


def press(editor, key, mods=Qt.KeyboardModifier.NoModifier):
    editor.keyPressEvent(QKeyEvent(QEvent.Type.KeyPress, key, mods))


class TestTreeEditing:
    def test_indent_keeps_cursor_in_payload(self, editor):
        set_text(editor, "├─ a\n├─ b\n│  └─ c\n└─ d", 1, 4)
        assert editor.getBehavior(TreeEditing).indent()
        assert editor.toPlainText() == "├─ a\n│  └─ b\n│     └─ c\n└─ d"
        assert editor.textSelection() == TextSelection.at(1, 7)

    def test_tab_key(self, editor):
        set_text(editor, "├─ a\n└─ b", 1, 3)
        press(editor, Qt.Key.Key_Tab)
        assert editor.toPlainText() == "└─ a\n   └─ b"

    def test_backtab_key(self, editor):
        set_text(editor, "└─ a\n   └─ b", 1, 6)
        press(editor, Qt.Key.Key_Backtab, Qt.KeyboardModifier.ShiftModifier)
        assert editor.toPlainText() == "├─ a\n└─ b"

    def test_undo_is_one_step(self, editor):
        set_text(editor, "├─ a\n├─ b\n└─ c", 1, 3)
        editor.getBehavior(TreeEditing).indent()
        editor.undo()
        assert editor.toPlainText() == "├─ a\n├─ b\n└─ c"

    def test_style_option(self, editor, options):
        options["style"] = "ascii"
        set_text(editor, "├─ a\n└─ b", 1, 3)
        assert editor.getBehavior(TreeEditing).indent()
        assert editor.toPlainText() == "`-- a\n   `-- b"

    def test_plain_text_passes_through(self, editor):
        set_text(editor, "hello", 0, 0)
        behavior = editor.getBehavior(TreeEditing)
        assert not behavior.indent()
        assert not behavior.outdent()
        assert not behavior.insertSibling()
        assert editor.toPlainText() == "hello"

    def test_insert_sibling(self, editor):
        set_text(editor, "├─ A\n│  └─ B\n└─ C", 0, 4)
        press(editor, Qt.Key.Key_Return)
        assert editor.toPlainText() == "├─ A\n│  └─ B\n├─ \n└─ C"
        assert editor.textSelection() == TextSelection.at(2, 3)

    def test_template(self, editor):
        set_text(editor, "|", 0, 1)
        assert editor.getBehavior(TreeEditing).indent()
        assert editor.toPlainText() == "./\n└─ README.md"
        assert editor.textSelection() == TextSelection.at(1, 12)

    def test_normalize_after_line_removed(self, editor):
        set_text(editor, "├─ a\n├─ b\n└─ c")
        cursor = editor.textCursor()
        cursor.setPosition(len("├─ a\n├─ b"))
        cursor.movePosition(QTextCursor.MoveOperation.End, QTextCursor.MoveMode.KeepAnchor)
        cursor.removeSelectedText()
        QApplication.processEvents()
        assert editor.toPlainText() == "├─ a\n└─ b"

    def test_indent_with_astral_payload(self, editor):
        set_text(editor, "├─ a\n└─ 🚀🚀b", 1, 6)
        assert editor.getBehavior(TreeEditing).indent()
        assert editor.toPlainText() == "└─ a\n   └─ 🚀🚀b"
        assert editor.textSelection() == TextSelection.at(1, 9)

    def test_insert_sibling_with_astral_payload(self, editor):
        set_text(editor, "├─ 🚀\n└─ b", 0, 4)
        assert editor.getBehavior(TreeEditing).insertSibling()
        assert editor.toPlainText() == "├─ 🚀\n├─ \n└─ b"
        assert editor.textSelection() == TextSelection.at(1, 3)

    def test_loading_shorter_text_is_left_alone(self, editor):
        set_text(editor, "├─ a\n├─ b\n└─ c\nmore")
        set_text(editor, "├─ a\n├─ b")
        QApplication.processEvents()
        assert editor.toPlainText() == "├─ a\n├─ b"

    def test_normalize_around(self, editor):
        behavior = editor.getBehavior(TreeEditing)
        set_text(editor, "text\n+-- a\n`-- b")
        assert behavior.normalizeAround(0)
        assert editor.toPlainText() == "text\n├─ a\n└─ b"
        assert not behavior.normalizeAround(0)


class TestTreeDecorations:
    def test_extra_selections(self, editor):
        set_text(editor, "├─ src/\n│  └─ main.py")
        assert len(editor.extraSelections()) == 4

    def test_astral_name_is_fully_covered(self, editor):
        set_text(editor, "└─ 🚀launch.py")
        selections = editor.extraSelections()
        assert [sel.cursor.selectedText() for sel in selections] == [
            "└─ ",
            "🚀launch.py",
        ]

    def test_plain_document(self, editor, options):
        options["document_kind"] = "plain"
        set_text(editor, "├─ src/\n│  └─ main.py")
        assert not editor.getBehavior(TreeDecorations).buckets
        assert editor.extraSelections() == []

    def test_remove(self, editor):
        set_text(editor, "└─ a")
        editor.removeBehavior(TreeDecorations)
        assert editor.extraSelections() == []


class TestTreeFolding:
    TEXT = "├─ a\n│  └─ b\n└─ c"

    def test_regions(self, editor):
        set_text(editor, self.TEXT)
        folding = editor.getBehavior(TreeFolding)
        assert [(fold.start_line, fold.end_line) for fold in folding.regions] == [(0, 1)]

    def test_fold_and_unfold(self, editor):
        set_text(editor, self.TEXT)
        folding = editor.getBehavior(TreeFolding)
        doc = editor.document()

        folding.fold_all()
        assert not doc.findBlockByNumber(1).isVisible()
        assert doc.findBlockByNumber(2).isVisible()

        folding.unfold_all()
        assert doc.findBlockByNumber(1).isVisible()

    def test_toggle(self, editor):
        set_text(editor, self.TEXT)
        folding = editor.getBehavior(TreeFolding)
        assert folding.toggle_fold(0)
        assert not editor.document().findBlockByNumber(1).isVisible()
        assert not folding.toggle_fold(2)

    def test_fold_survives_edit_elsewhere(self, editor):
        set_text(editor, self.TEXT)
        folding = editor.getBehavior(TreeFolding)
        folding.toggle_fold(0)
        cursor = editor.textCursor()
        cursor.movePosition(QTextCursor.MoveOperation.End)
        cursor.insertText("x")
        assert folding.folded == {FoldingRange(0, 1, 0)}
        assert not editor.document().findBlockByNumber(1).isVisible()

    def test_fold_to_level(self, editor):
        set_text(editor, "└─ a\n   └─ b\n      └─ c")
        folding = editor.getBehavior(TreeFolding)
        folding.fold_to_level(1)
        assert folding.folded == {FoldingRange(1, 2, 1)}
        doc = editor.document()
        assert doc.findBlockByNumber(1).isVisible()
        assert not doc.findBlockByNumber(2).isVisible()

    def test_document_kind(self, editor, options):
        set_text(editor, self.TEXT + "\n\n```tree\n" + self.TEXT + "\n```")
        folding = editor.getBehavior(TreeFolding)
        assert [(fold.start_line, fold.end_line) for fold in folding.regions] == [(0, 1), (5, 6)]

        options["document_kind"] = "markdown"
        assert [(fold.start_line, fold.end_line) for fold in folding.regions] == [(5, 6)]

        options["document_kind"] = "plain"
        assert folding.regions == []


class TestEditorOptions:
    def test_unknown_style(self):
        with pytest.raises(ValueError):
            EditorOptions({"style": "fancy"})

    def test_unknown_document_kind(self, qapp):
        options = EditorOptions()
        with pytest.raises(ValueError):
            options["document_kind"] = "pdf"
        assert options["document_kind"] == "tree"

    def test_update_emits_keys(self, qapp):
        options = EditorOptions()
        seen = []
        options.optionsUpdated.connect(seen.append)
        options.update({"style": "ascii"})
        assert seen == [["style"]]

        options.update({"style": "ascii", "document_kind": "markdown"})
        assert seen[-1] == ["document_kind"]

    def test_partial_colors(self, qapp):
        options = EditorOptions({"colors": {"folder": "#00ff00"}})
        assert options["colors"]["folder"] == "#00ff00"
        assert options["colors"]["file"] == DEFAULT_COLORS["file"]

    # fmt: off
    @pytest.mark.parametrize("path, kind", [
        pytest.param("layout.tree", "tree", id="tree"),
        pytest.param("README.md", "markdown", id="md"),
        pytest.param("notes.MARKDOWN", "markdown", id="upper_markdown"),
        pytest.param("notes.txt", "plain", id="txt"),
        pytest.param("Makefile", "plain", id="no_suffix"),
    ])
    # fmt: on
    def test_document_kind_for_path(self, path, kind):
        assert document_kind_for_path(path) == kind


def test_parser():
    args = build_parser().parse_args(["docs/layout.tree", "--style", "ascii"])
    assert args.style == "ascii"
    assert not args.single_node_indent


class TestTrackedDocument:
    @pytest.fixture
    def doc(self, editor):
        editor.setPlainText("ab\n🚀x🚀y\nz")
        return editor.document()

    def test_columns_count_code_points(self, doc):
        # 🚀 takes two utf16 units
        assert doc.point_to_char(1, 1) == 3 + 2
        assert doc.point_to_char(1, 3) == 3 + 5
        assert doc.char_to_point(3 + 5) == (1, 3)
        assert doc.char_to_point(3 + 6) == (1, 4)

    def test_replace_lines(self, doc):
        doc.replace_lines({1: "🚀"})
        assert doc.lines() == ["ab", "🚀", "z"]

    def test_replace_line_range(self, doc):
        doc.replace_line_range(0, 1, "q")
        assert doc.lines() == ["q", "z"]

    def test_replaced_all(self, doc):
        assert doc.replaced_all
        cursor = QTextCursor(doc)
        cursor.insertText("c")
        assert not doc.replaced_all
