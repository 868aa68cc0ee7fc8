from __future__ import annotations
from typing import Optional, Union

from Qt import QtCompat
from Qt.QtCore import Qt
from Qt.QtGui import QKeySequence

from .constants import ENC


def hk(
    key: Union[Qt.Key, int],
    mods: Optional[Union[Qt.KeyboardModifier, int]] = None,
) -> str:
    """Build a hashable hotkey string"""
    # Backtab is what Qt reports for Shift+Tab
    if key == Qt.Key.Key_Backtab:
        return "Shift+Tab"

    seqval = int(key)
    if mods is not None:
        seqval |= QtCompat.enumValue(mods)

    return QKeySequence(seqval).toString(QKeySequence.SequenceFormat.PortableText)


def len16(val: str) -> int:
    """Get the number of utf16 code units where surrogate pairs count as 2"""
    return len(val.encode(ENC)) // 2


def column_from_utf16(text: str, offset16: int) -> int:
    """Convert a utf16 offset into a line to a python string index

    An offset that falls inside a surrogate pair maps to the start of that
    character.
    """
    units = 0
    for column, char in enumerate(text):
        units += 2 if ord(char) > 0xFFFF else 1
        if units > offset16:
            return column
    return len(text)
