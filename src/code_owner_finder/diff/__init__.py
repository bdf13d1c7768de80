"""Diff layer: revision history model, line diffs and diff replay."""

from .history import DiffHistoryCalculator
from .lines import calculate_changes, calculate_difference, split_lines
from .models import (
    DISTANT_PAST,
    DiffChange,
    DiffHistory,
    DiffLine,
    DiffRevision,
    Difference,
    LoadedRevision,
)
from .replay import (
    DiffReplayer,
    DiffReplayHandler,
    LineStatus,
    ReplayEvent,
    iter_replay,
    new_line_count,
    replay_events,
)

__all__ = [
    "DISTANT_PAST",
    "DiffChange",
    "DiffHistory",
    "DiffHistoryCalculator",
    "DiffLine",
    "DiffReplayHandler",
    "DiffReplayer",
    "DiffRevision",
    "Difference",
    "LineStatus",
    "LoadedRevision",
    "ReplayEvent",
    "calculate_changes",
    "calculate_difference",
    "iter_replay",
    "new_line_count",
    "replay_events",
    "split_lines",
]
