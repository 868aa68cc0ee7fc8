from __future__ import annotations
from typing import Collection, FrozenSet, TYPE_CHECKING
from Qt.QtGui import QKeyEvent, QResizeEvent

if TYPE_CHECKING:
    from ..line_editor import TreeEditor
    from ..editor_options import EditorOptions


class Behavior:
    """A piece of editor functionality that can be attached to a TreeEditor

    Every key in `option_keys` is copied onto the behavior as an attribute of
    the same name when the option changes. Call `syncOptions` once the
    behavior is set up to pull the current values.
    """

    option_keys: FrozenSet[str] = frozenset()

    def __init__(self, editor: TreeEditor):
        self.editor: TreeEditor = editor
        self.options: EditorOptions = editor.options
        self.options.optionsUpdated.connect(self.updateOptions)

    def syncOptions(self):
        self.updateOptions(self.option_keys)

    def updateOptions(self, keys: Collection[str]):
        for key in self.option_keys.intersection(keys):
            setattr(self, key, self.options[key])

    def remove(self):
        self.options.optionsUpdated.disconnect(self.updateOptions)


class HasKeyPress:
    def keyPressEvent(self, event: QKeyEvent, hotkey: str) -> bool:
        """Return True when the key was handled and the editor should ignore it"""
        raise NotImplementedError("You must implement the keyPressEvent")


class HasResize:
    def resizeEvent(self, event: QResizeEvent):
        raise NotImplementedError("You must implement the resizeEvent")


class DocumentView(Behavior):
    """A behavior drawn from the tree structure of the whole document

    `refresh` runs after every text change and whenever `document_kind`
    changes, which picks where tree blocks are looked for.
    """

    option_keys = frozenset({"colors", "document_kind"})

    def __init__(self, editor: TreeEditor):
        super().__init__(editor)
        self._document_kind = "tree"
        self.editor.textChanged.connect(self.refresh)

    @property
    def document_kind(self) -> str:
        return self._document_kind

    @document_kind.setter
    def document_kind(self, val: str):
        self._document_kind = val
        self.refresh()

    def refresh(self):
        raise NotImplementedError("You must implement refresh")

    def remove(self):
        self.editor.textChanged.disconnect(self.refresh)
        super().remove()
