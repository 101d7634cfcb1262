# wee/core/Selection.py
"""wee.core.Selection
=====================

Selection state: two endpoints stored as given (the fixed *anchor* and the
moving *cursor*), an active flag and the editing mode. Consumers always work
with the normalised range from `Selection.normalized`, ordered by
``(row, col)``.
"""

from enum import Enum
from typing import Optional

from wee.core.RowStore import Position


class EditMode(Enum):
    NORMAL = "normal"
    SELECTING = "selecting"


class Selection:
    """Anchor/cursor pair plus active flag and mode."""

    __slots__ = ("anchor", "cursor", "active", "mode")

    def __init__(
        self,
        anchor: Position = (0, 0),
        cursor: Position = (0, 0),
        active: bool = False,
        mode: EditMode = EditMode.NORMAL,
    ) -> None:
        self.anchor = anchor
        self.cursor = cursor
        self.active = active
        self.mode = mode

    def __repr__(self) -> str:
        return (
            f"Selection(anchor={self.anchor}, cursor={self.cursor}, "
            f"active={self.active}, mode={self.mode.name})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Selection):
            return NotImplemented
        return (self.anchor, self.cursor, self.active, self.mode) == (
            other.anchor,
            other.cursor,
            other.active,
            other.mode,
        )

    def copy(self) -> "Selection":
        return Selection(self.anchor, self.cursor, self.active, self.mode)

    def start(self, anchor: Position, cursor: Optional[Position] = None) -> None:
        self.anchor = anchor
        self.cursor = cursor if cursor is not None else anchor
        self.active = True

    def clear(self) -> None:
        """Deactivates the selection and returns to NORMAL mode."""
        self.active = False
        self.mode = EditMode.NORMAL

    def normalized(self) -> Optional[tuple[Position, Position]]:
        """Returns ``(start, end)`` ordered by position, or None when inactive."""
        if not self.active:
            return None
        if self.anchor <= self.cursor:
            return self.anchor, self.cursor
        return self.cursor, self.anchor

    @property
    def is_empty(self) -> bool:
        return not self.active or self.anchor == self.cursor

    def set_normalized(self, start: Position, end: Position) -> None:
        """Replaces both endpoints while keeping which one is the anchor."""
        if self.anchor <= self.cursor:
            self.anchor, self.cursor = start, end
        else:
            self.anchor, self.cursor = end, start
