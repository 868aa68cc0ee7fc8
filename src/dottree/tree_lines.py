"""Recognizing and parsing single lines of tree text

Classification is intentionally permissive and parsing is strict. A line
can be accepted by `is_tree_line` and still be rejected by `parse_line`,
so callers that need a depth must always go through the parser.
"""
from __future__ import annotations
import re
from typing import NamedTuple, Optional

from .constants import UNIT_WIDTH

# Coarse checks used to decide if a line belongs to a tree block
_UNICODE_GLYPH_RE = re.compile(r"[├└│]")
_ASCII_LINE_RE = re.compile(r"^(\|  )*(\+--|`--)(\s|$)")
_ASCII_SPACED_LINE_RE = re.compile(r"^(\s{3})*(\+--|`--)(\s|$)")

# Strict grammars. Each ancestor unit is three columns wide
_UNICODE_PARSE_RE = re.compile(r"^((?:│  |   )*)([├└])─{1,2}(?:\s(.*))?$")
_ASCII_PARSE_RE = re.compile(r"^((?:\|  |   )*)(\+--|`--)(?:\s(.*))?$")

_UNICODE_COLUMNS_RE = re.compile(r"^((?:│  |   )*)([├└]─{1,2})(.*)$")
_ASCII_COLUMNS_RE = re.compile(r"^((?:\|  |   )*)(\+--|`--)(.*)$")


class ParsedLine(NamedTuple):
    depth: int
    text: str


class TreeLineColumns(NamedTuple):
    """Column offsets inside a single tree line"""

    marker_end: int  # first column after the branch marker
    payload_start: int  # first column of the payload, after any spaces


def is_tree_line(line: str) -> bool:
    """Check if a line looks like part of a unicode or ascii tree"""
    s = line.rstrip()
    if not s:
        return False
    return bool(
        _UNICODE_GLYPH_RE.search(s)
        or _ASCII_LINE_RE.match(s)
        or _ASCII_SPACED_LINE_RE.match(s)
    )


def parse_line(line: str) -> Optional[ParsedLine]:
    """Parse a tree line into its depth and payload text

    Returns:
        The parsed line, or None if the line doesn't follow either grammar
    """
    trimmed = line.replace("\t", "  ").rstrip()
    if not trimmed:
        return None

    for pattern in (_UNICODE_PARSE_RE, _ASCII_PARSE_RE):
        match = pattern.match(trimmed)
        if match is None:
            continue
        prefix = match.group(1) or ""
        text = (match.group(3) or "").rstrip()
        return ParsedLine(len(prefix) // UNIT_WIDTH, text)
    return None


def get_tree_line_columns(line: str) -> Optional[TreeLineColumns]:
    """Find where the branch marker ends and where the payload begins

    Unlike `parse_line` this works on the raw line text so the offsets can
    be used directly as cursor columns.
    """
    trimmed = line.rstrip()
    if not trimmed:
        return None

    for pattern in (_UNICODE_COLUMNS_RE, _ASCII_COLUMNS_RE):
        match = pattern.match(trimmed)
        if match is None:
            continue
        marker_end = match.end(2)
        payload_start = marker_end
        while payload_start < len(line) and line[payload_start] == " ":
            payload_start += 1
        return TreeLineColumns(marker_end, payload_start)
    return None
