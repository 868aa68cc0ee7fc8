from __future__ import annotations
import logging
from typing import Collection, Optional, Type, TypeVar

from Qt.QtWidgets import QPlainTextEdit
from Qt.QtGui import QColor, QKeyEvent, QPalette, QResizeEvent, QTextCursor

from .behaviors import Behavior, HasKeyPress, HasResize
from .editor_options import EditorOptions
from .line_tracker import TrackedDocument
from .structure_editor import TextSelection
from .utils import hk

logger = logging.getLogger(__name__)

T_Behavior = TypeVar("T_Behavior", bound=Behavior)


class TreeEditor(QPlainTextEdit):
    """A plain text editor that tree behaviors can be attached to

    At most one behavior of each class is attached. Key presses go to the
    key handling behaviors in the order they were added, and the first one
    that handles a key stops the rest, including the default handling.
    """

    def __init__(self, options: Optional[EditorOptions] = None, parent=None):
        super().__init__(parent=parent)
        self._doc = TrackedDocument()
        self.setDocument(self._doc)

        self.options = options if options is not None else EditorOptions()
        self._behaviors: dict[type, Behavior] = {}

        self.options.optionsUpdated.connect(self.updateOptions)
        self.updateOptions(self.options.keys())

    def updateOptions(self, keys: Collection[str]):
        if "font" in keys:
            self.setFont(self.options["font"])
        if "colors" in keys:
            self.setColors(self.options["colors"])

    def setColors(self, colors: dict[str, str]):
        palette = self.palette()
        for role, key in (
            (QPalette.ColorRole.Base, "bg"),
            (QPalette.ColorRole.Window, "bg"),
            (QPalette.ColorRole.Text, "fg"),
        ):
            palette.setColor(role, QColor(colors[key]))
        self.setPalette(palette)

    def addBehavior(
        self, behaviorCls: Type[T_Behavior]
    ) -> tuple[Optional[T_Behavior], T_Behavior]:
        """Attach a new behavior of the given class, replacing any existing one

        Returns:
            The replaced behavior or None, and the new behavior
        """
        old = self.removeBehavior(behaviorCls)
        if old is not None:
            logger.debug("Replacing %s", behaviorCls.__name__)
        behavior = behaviorCls(self)
        self._behaviors[behaviorCls] = behavior
        return old, behavior

    def removeBehavior(self, behaviorCls: Type[T_Behavior]) -> Optional[T_Behavior]:
        behavior = self._behaviors.pop(behaviorCls, None)
        if behavior is not None:
            behavior.remove()
        return behavior  # type: ignore

    def getBehavior(self, behaviorCls: Type[T_Behavior]) -> Optional[T_Behavior]:
        return self._behaviors.get(behaviorCls)  # type: ignore

    def document(self) -> TrackedDocument:
        doc = super().document()
        if not isinstance(doc, TrackedDocument):
            raise TypeError(
                f"TreeEditor needs a TrackedDocument, not {type(doc).__name__}"
            )
        return doc

    def textSelection(self) -> TextSelection:
        """Get the current selection as line/character pairs"""
        cursor = self.textCursor()
        anchor_line, anchor_char = self._doc.char_to_point(cursor.anchor())
        active_line, active_char = self._doc.char_to_point(cursor.position())
        return TextSelection(anchor_line, anchor_char, active_line, active_char)

    def setTextSelection(self, selection: TextSelection):
        """Select from the anchor to the active end of a line/character selection"""
        cursor = self.textCursor()
        cursor.setPosition(
            self._doc.point_to_char(selection.anchor_line, selection.anchor_character)
        )
        cursor.setPosition(
            self._doc.point_to_char(selection.active_line, selection.active_character),
            QTextCursor.MoveMode.KeepAnchor,
        )
        self.setTextCursor(cursor)

    def keyPressEvent(self, e: QKeyEvent):
        hotkey = hk(e.key(), e.modifiers())
        for behavior in self._behaviors.values():
            if isinstance(behavior, HasKeyPress) and behavior.keyPressEvent(e, hotkey):
                return
        super().keyPressEvent(e)

    def resizeEvent(self, e: QResizeEvent):
        super().resizeEvent(e)
        for behavior in self._behaviors.values():
            if isinstance(behavior, HasResize):
                behavior.resizeEvent(e)
