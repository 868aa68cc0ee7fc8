from __future__ import annotations
from contextlib import contextmanager
from typing import Hashable, Iterator, Optional


class EditGuard:
    """Marks that an edit of ours is being applied to the document

    The document reports our own replacements as changes too. Checking
    `active` in the change handler keeps those from triggering another
    normalization pass.
    """

    def __init__(self):
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    @contextmanager
    def applying(self) -> Iterator[None]:
        self._active = True
        try:
            yield
        finally:
            self._active = False


class LineCountCache:
    """The last line count seen for each document"""

    def __init__(self):
        self._counts: dict[Hashable, int] = {}

    def get(self, key: Hashable) -> Optional[int]:
        return self._counts.get(key)

    def observe(self, key: Hashable, line_count: int) -> Optional[int]:
        """Record a document's current line count

        Returns:
            The previously recorded count, or None if this is the first time
            the document was seen
        """
        previous = self._counts.get(key)
        self._counts[key] = line_count
        return previous

    def __len__(self) -> int:
        return len(self._counts)


def should_normalize(
    previous_count: Optional[int], current_count: int, deleted_line_break: bool
) -> bool:
    """Decide if a change should trigger re-normalizing the nearby tree block

    Only joins are caught: a deleted line break or a drop in the line count.
    Changes that add lines, like pasting several malformed tree lines, are
    left alone.
    """
    if deleted_line_break:
        return True
    return previous_count is not None and current_count < previous_count
