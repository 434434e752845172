"""Editable path document: canonical path text with undo/redo history."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from avpath import editing
from avpath.builder import AvPathBuilder
from avpath.config import DEFAULT_CONFIG, AvPathEngineConfig
from avpath.errors import ParseDiagnostic
from avpath.history import AvCommandHistory, AvHistoryEntry
from avpath.model import AvPathSegment
from avpath.parser import AvPathParser

logger = logging.getLogger(__name__)


class AvPathDocument:
    """A path being edited.

    The document owns the current path text and a history of its snapshots.
    Every change goes through set_text(), which records a new history entry
    only if the text actually changed. Segment ids stay stable across edits
    as far as the geometry is unchanged.
    """

    def __init__(self, text: str = "", config: AvPathEngineConfig = DEFAULT_CONFIG):
        self._config = config
        self._parser = AvPathParser(config)
        self._builder = AvPathBuilder(config)
        self._history = AvCommandHistory(config.max_undo_history)
        self._text = text
        self._segments: List[AvPathSegment] = []
        self._diagnostics: List[ParseDiagnostic] = []
        self._reparse()
        self._history.push(text, "Initial path")

    @property
    def config(self) -> AvPathEngineConfig:
        """The configuration of this document (grid interval, ceilings, history depth)."""
        return self._config

    @property
    def text(self) -> str:
        """The current path text."""
        return self._text

    @property
    def segments(self) -> List[AvPathSegment]:
        """The parsed segments of the current text."""
        return list(self._segments)

    @property
    def diagnostics(self) -> List[ParseDiagnostic]:
        """Diagnostics of the last parse of the current text."""
        return list(self._diagnostics)

    @property
    def history(self) -> AvCommandHistory:
        """The undo/redo history of this document."""
        return self._history

    def set_text(self, text: str, label: str, metadata: Optional[Dict[str, Any]] = None) -> bool:
        """Replace the path text and record it in the history.

        Returns:
            bool: False if _text_ equals the current text (nothing recorded)
        """
        if text == self._text:
            return False
        self._text = text
        self._reparse()
        self._history.push(text, label, metadata)
        logger.info("Path changed: %s", label)
        return True

    def apply(
        self, func: Callable[..., Sequence[AvPathSegment]], label: str, *args: Any, **kwargs: Any
    ) -> bool:
        """Apply a segment function, e.g. transform.translate, and store its result.

        _func_ is called as func(segments, *args, **kwargs) and must return the new segments,
        which are written back in canonical form.
        """
        new_segments = func(self.segments, *args, **kwargs)
        return self.set_text(self._builder.build(new_segments), label)

    def move_point(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        segment_index: int,
        point_index: int,
        x: float,
        y: float,
        snap: bool = False,
        label: str = "Move point",
    ) -> bool:
        """Drag one point to (x, y); with _snap_ the position is snapped to the configured grid."""
        grid = self._config.grid_snap_interval if snap else None
        return self.apply(editing.move_point, label, segment_index, point_index, x, y, grid=grid)

    def undo(self) -> Optional[AvHistoryEntry]:
        """Restore the previous snapshot; None if there is nothing to undo."""
        return self._restore(self._history.undo())

    def redo(self) -> Optional[AvHistoryEntry]:
        """Restore the next snapshot; None if there is nothing to redo."""
        return self._restore(self._history.redo())

    def _restore(self, entry: Optional[AvHistoryEntry]) -> Optional[AvHistoryEntry]:
        if entry is not None:
            self._text = entry.serialized_path
            self._reparse()
        return entry

    def _reparse(self) -> None:
        result = self._parser.parse(self._text, previous=self._segments)
        self._segments = result.segments
        self._diagnostics = result.diagnostics
