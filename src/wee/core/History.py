# wee/core/History.py
"""History Module for the wee Editor
===================================
This module provides the `History` class, which manages undo and redo for the wee editor using
whole-document snapshots. A snapshot holds independent copies of every row together with the cursor,
the scroll offsets and the selection, so restoring one brings the editor back to exactly the state it
had before an action ran.

Key Features:
-------------
- Snapshots are taken *before* a mutating action and kept in an index-addressed list; the neighbours of
  snapshot ``i`` are ``i - 1`` and ``i + 1``.
- Rapid consecutive actions collapse into one snapshot (debounce), and typing opens a new snapshot only
  after the user has been idle for a while.
- Capturing after an undo discards the redo branch.
- The number of pre-action snapshots is bounded; the oldest is evicted first.
- Restoring replaces the live rows with fresh copies and recomputes highlighting.

Intended Usage:
---------------
Owned by the editor state object (`wee.core.Wee`). The editor calls `capture()` or `capture_typing()` right
before it mutates the document and exposes `undo()` / `redo()` as key actions.

Classes:
--------
- Snapshot: Immutable record of editor state.
- History: The snapshot chain with undo/redo.
"""
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from wee.core.RowStore import Row
from wee.core.Selection import Selection

if TYPE_CHECKING:
    from wee.core.Wee import Wee


@dataclass(frozen=True, slots=True)
class Snapshot:
    rows: tuple[Row, ...]
    cursor: tuple[int, int]
    scroll: tuple[int, int]
    selection: Selection
    timestamp: float
    description: str


## ==================== History Class (Undo/Redo) ====================
class History:
    """Class History
    ===================
    Snapshot-based undo/redo for the editor.

    The live editor state is either *in sync* with ``_snapshots[_current]``
    (right after an undo or redo) or *ahead* of the chain, in which case
    ``_current == len(_snapshots)``. The first undo from an ahead state stores
    the live state as a redo point so that redo can return to it.

    Attributes:
        editor (Wee): The editor instance this history manager is associated with.
        capacity (int): Maximum number of pre-action snapshots kept.
        debounce_interval (float): Minimum age, in seconds, of the previous snapshot
            before another one is captured.
        typing_idle_threshold (float): Idle time, in seconds, after which typing
            starts a new snapshot.
        _snapshots (list[Snapshot]): The chain, oldest first.
        _current (int): Current position in the chain.

    Methods:
        capture(description) -> bool:
            Snapshots the state before an action, honouring debounce and pruning the redo branch.
        capture_typing() -> bool:
            Like `capture("Typing")`, but only when a new typing session starts.
        clear():
            Drops every snapshot.
        undo() -> bool:
            Restores the previous snapshot, or reports "Nothing to undo".
        redo() -> bool:
            Restores the next snapshot, or reports "Nothing to redo".
    """

    def __init__(
        self,
        editor: "Wee",
        capacity: int = 50,
        debounce_interval: float = 1.0,
        typing_idle_threshold: float = 2.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.editor = editor
        self.capacity = max(1, int(capacity))
        self.debounce_interval = debounce_interval
        self.typing_idle_threshold = typing_idle_threshold
        self._clock = clock
        self._snapshots: list[Snapshot] = []
        self._current = 0
        self._last_snapshot_time: Optional[float] = None
        self._last_typing_time: Optional[float] = None

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def current_index(self) -> int:
        return self._current

    @property
    def is_ahead(self) -> bool:
        """True when the live state has not been stored in the chain."""
        return self._current == len(self._snapshots)

    def can_undo(self) -> bool:
        return self._current > 0

    def can_redo(self) -> bool:
        return self._current < len(self._snapshots) - 1

    def descriptions(self) -> list[str]:
        return [snap.description for snap in self._snapshots]

    def _take(self, description: str) -> Snapshot:
        ed = self.editor
        return Snapshot(
            rows=tuple(row.clone() for row in ed.rows),
            cursor=(ed.cursor_y, ed.cursor_x),
            scroll=(ed.scroll_top, ed.scroll_left),
            selection=ed.selection.copy(),
            timestamp=time.time(),
            description=description,
        )

    def capture(self, description: str) -> bool:
        """Stores the current editor state before an action.

        Skipped while the live state is ahead of the chain and the previous
        snapshot is younger than ``debounce_interval``.

        Returns:
            True if a snapshot was stored.
        """
        now = self._clock()
        if (
            self._snapshots
            and self.is_ahead
            and self._last_snapshot_time is not None
            and now - self._last_snapshot_time < self.debounce_interval
        ):
            logging.debug(f"History: '{description}' folded into the previous snapshot")
            return False

        snapshot = self._take(description)

        if not self.is_ahead:
            pruned = len(self._snapshots) - self._current
            del self._snapshots[self._current :]
            logging.debug(f"History: pruned {pruned} snapshot(s) from the redo branch")

        self._snapshots.append(snapshot)
        while len(self._snapshots) > self.capacity:
            evicted = self._snapshots.pop(0)
            logging.debug(f"History: evicted oldest snapshot '{evicted.description}'")
        self._current = len(self._snapshots)
        self._last_snapshot_time = now
        logging.debug(f"History: captured '{description}'. History size: {len(self._snapshots)}")
        return True

    def capture_typing(self) -> bool:
        """Captures a "Typing" snapshot when the previous keystroke is older than the idle threshold."""
        now = self._clock()
        new_session = (
            self._last_typing_time is None
            or now - self._last_typing_time > self.typing_idle_threshold
        )
        self._last_typing_time = now
        if new_session:
            return self.capture("Typing")
        return False

    def clear(self) -> None:
        self._snapshots.clear()
        self._current = 0
        self._last_snapshot_time = None
        self._last_typing_time = None
        logging.debug("History: snapshots cleared.")

    def _restore(self, snapshot: Snapshot) -> None:
        ed = self.editor
        ed.rows.replace_rows([row.clone() for row in snapshot.rows])
        ed.rows.dirty = True
        ed.cursor_y, ed.cursor_x = snapshot.cursor
        ed.scroll_top, ed.scroll_left = snapshot.scroll
        ed.selection = snapshot.selection.copy()

    def undo(self) -> bool:
        """Moves to the previous snapshot and restores it.

        Returns:
            bool: True if the editor state changed, False when there is nothing to undo.
        """
        if not self.can_undo():
            self.editor._set_status_message("Nothing to undo")
            return False

        if self.is_ahead:
            # the live state becomes the redo point; it does not count against capacity
            self._snapshots.append(self._take("Redo point"))

        self._current -= 1
        snapshot = self._snapshots[self._current]
        self._restore(snapshot)
        self._last_typing_time = None
        self.editor._set_status_message(f"Undo: {snapshot.description}")
        logging.debug(f"History: undo to #{self._current} '{snapshot.description}'")
        return True

    def redo(self) -> bool:
        """Moves to the next snapshot and restores it.

        Returns:
            bool: True if the editor state changed, False when there is nothing to redo.
        """
        if not self.can_redo():
            self.editor._set_status_message("Nothing to redo")
            return False

        # the label of the step being redone is on the snapshot it was taken before
        description = self._snapshots[self._current].description
        self._current += 1
        self._restore(self._snapshots[self._current])
        self._last_typing_time = None
        self.editor._set_status_message(f"Redo: {description}")
        logging.debug(f"History: redo to #{self._current} '{description}'")
        return True
