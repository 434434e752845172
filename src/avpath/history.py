"""Bounded, linear undo/redo history of serialized path snapshots."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from avpath.config import DEFAULT_CONFIG

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvHistoryEntry:
    """An immutable snapshot of a path.

    Attributes:
        serialized_path: the path data at this point of the history
        label: description of the action that produced the snapshot
        timestamp: creation time (UTC)
        metadata: optional additional data about the action
    """

    serialized_path: str
    label: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: Optional[Dict[str, Any]] = None

    def to_dict(self) -> dict:
        """Convert the entry to a dictionary."""
        return {
            "serialized_path": self.serialized_path,
            "label": self.label,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


class AvCommandHistory:
    """Linear undo/redo stack of path snapshots.

    The history is a list with a pointer to the current entry. Pushing while
    not at the newest entry discards the redo branch; pushing beyond _max_size_
    evicts the oldest entry.

    The history does not filter unchanged snapshots: callers should not push a
    snapshot equal to the current one.
    """

    def __init__(self, max_size: int = DEFAULT_CONFIG.max_undo_history):
        if max_size < 1:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self._max_size = max_size
        self._entries: List[AvHistoryEntry] = []
        self._index = -1

    @property
    def max_size(self) -> int:
        """Maximum number of kept entries."""
        return self._max_size

    @property
    def index(self) -> int:
        """Position of the current entry, -1 if the history is empty."""
        return self._index

    @property
    def current(self) -> Optional[AvHistoryEntry]:
        """The current entry, None if the history is empty."""
        if not self._entries:
            return None
        return self._entries[self._index]

    @property
    def entries(self) -> List[AvHistoryEntry]:
        """A copy of all entries, oldest first."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, snapshot: str, label: str, metadata: Optional[Dict[str, Any]] = None) -> AvHistoryEntry:
        """Add a new snapshot after the current entry and make it current.

        Args:
            snapshot: serialized path data
            label: description of the action
            metadata: optional additional data

        Returns:
            AvHistoryEntry: the new entry
        """
        # Truncate the redo branch if we are not at the end
        if self._index < len(self._entries) - 1:
            del self._entries[self._index + 1 :]

        entry = AvHistoryEntry(serialized_path=snapshot, label=label, metadata=metadata)
        self._entries.append(entry)
        self._index = len(self._entries) - 1

        if len(self._entries) > self._max_size:
            del self._entries[0]
            self._index -= 1

        logger.debug("History: added '%s', index %d of %d", label, self._index, len(self._entries))
        return entry

    def undo(self) -> Optional[AvHistoryEntry]:
        """Step back one entry, or do nothing if already at the oldest entry.

        Returns:
            Optional[AvHistoryEntry]: the entry moved back to, i.e. the state to restore,
            not the entry that was undone; None if there was nothing to undo
        """
        if not self.can_undo():
            logger.warning("History: cannot undo, already at earliest state")
            return None
        undone = self._entries[self._index]
        self._index -= 1
        logger.info("History: undoing '%s', index %d", undone.label, self._index)
        return self._entries[self._index]

    def redo(self) -> Optional[AvHistoryEntry]:
        """Step forward one entry and return it, or None if already at the newest entry."""
        if not self.can_redo():
            logger.warning("History: cannot redo, already at latest state")
            return None
        self._index += 1
        entry = self._entries[self._index]
        logger.info("History: redoing '%s', index %d", entry.label, self._index)
        return entry

    def can_undo(self) -> bool:
        """True if there is an older entry to step back to."""
        return self._index > 0

    def can_redo(self) -> bool:
        """True if there is a newer entry to step forward to."""
        return self._index < len(self._entries) - 1

    def clear(self) -> None:
        """Remove all entries."""
        self._entries.clear()
        self._index = -1
        logger.info("History: cleared")
