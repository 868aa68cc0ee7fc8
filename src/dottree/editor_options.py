from __future__ import annotations
from pathlib import Path
from typing import Any, Optional, Union

from Qt.QtCore import QObject, Signal

from .constants import DEFAULT_STYLE, get_glyphs

# fmt: off
DEFAULT_COLORS = {
    "bg":        "#1e1e1e",
    "fg":        "#d4d4d4",
    "prefix":    "#6a6a6a",
    "folder":    "#F2994A",
    "file":      "#ffffff",
    "gutter":    "#282828",
    "gutter_fg": "#969696",
}

DEFAULT_OPTIONS = {
    "style": DEFAULT_STYLE,
    "indent_subtree_on_single_cursor": True,
    "document_kind": "tree",
    "colors": DEFAULT_COLORS,
}
# fmt: on

DOCUMENT_KINDS = ("tree", "markdown", "plain")
TREE_SUFFIXES = {".tree"}
MARKDOWN_SUFFIXES = {".md", ".markdown"}


def document_kind_for_path(path: Union[str, Path]) -> str:
    """Guess how a file's tree text should be found from its name"""
    suffix = Path(path).suffix.lower()
    if suffix in TREE_SUFFIXES:
        return "tree"
    if suffix in MARKDOWN_SUFFIXES:
        return "markdown"
    return "plain"


class EditorOptions(QObject):
    """Option values shared by an editor and its behaviors

    Setting a key, or several at once with `update`, validates the new values
    and emits `optionsUpdated` with the keys whose values actually changed.
    A partial `colors` mapping is filled in from `DEFAULT_COLORS`.
    """

    optionsUpdated = Signal(list)  # list of str

    def __init__(self, opts: Optional[dict[str, Any]] = None):
        super().__init__()
        self._values: dict[str, Any] = dict(DEFAULT_OPTIONS)
        if opts:
            self._values.update(self._checked(opts))

    def __getitem__(self, key: str):
        return self._values[key]

    def __setitem__(self, key: str, value):
        self.update({key: value})

    def keys(self):
        return self._values.keys()

    def update(self, opts: dict[str, Any]):
        checked = self._checked(opts)
        changed = [key for key, val in checked.items() if self._values.get(key) != val]
        for key in changed:
            self._values[key] = checked[key]
        if changed:
            self.optionsUpdated.emit(changed)

    @staticmethod
    def _checked(opts: dict[str, Any]) -> dict[str, Any]:
        """Validate option values, raising a ValueError for ones the behaviors can't use"""
        checked = dict(opts)
        if "style" in checked:
            get_glyphs(checked["style"])
        kind = checked.get("document_kind")
        if kind is not None and kind not in DOCUMENT_KINDS:
            raise ValueError(
                f"Unknown document kind {kind!r}, expected one of {DOCUMENT_KINDS}"
            )
        if "colors" in checked:
            checked["colors"] = {**DEFAULT_COLORS, **checked["colors"]}
        return checked
