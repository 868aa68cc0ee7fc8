from __future__ import annotations
from typing import NamedTuple


class TreeGlyphs(NamedTuple):
    """The pieces used to draw one tree line in a given style"""

    vertical: str  # ancestor level that still has a later sibling
    blank: str  # ancestor level that was the last of its siblings
    tee: str  # branch for a node with a later sibling
    corner: str  # branch for the last sibling


UNICODE = "unicode"
ASCII = "ascii"
DEFAULT_STYLE = UNICODE

# fmt: off
GLYPHS = {
    UNICODE: TreeGlyphs(vertical="│  ", blank="   ", tee="├─ ", corner="└─ "),
    ASCII:   TreeGlyphs(vertical="|  ", blank="   ", tee="+-- ", corner="`-- "),
}
# fmt: on

# Width of one ancestor unit in the prefix
UNIT_WIDTH = 3

# Qt positions count UTF-16 code units
ENC = "utf-16-le"


def get_glyphs(style: str) -> TreeGlyphs:
    """Get the glyph set for a style name

    Raises:
        ValueError: If the style is not one of the known styles
    """
    try:
        return GLYPHS[style]
    except KeyError:
        raise ValueError(
            f"Unknown tree style {style!r}, expected one of {sorted(GLYPHS)}"
        ) from None
