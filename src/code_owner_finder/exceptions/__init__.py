"""Exception hierarchy for Code Owner Finder."""

from .base import CodeOwnerFinderError
from .config import ConfigurationError, InvalidConfigError
from .history import (
    DiffReplayError,
    HistoryError,
    HistoryExtractionError,
    HistoryOrderError,
)
from .knowledge import KnowledgeInvariantError

__all__ = [
    "CodeOwnerFinderError",
    "HistoryError",
    "DiffReplayError",
    "HistoryOrderError",
    "HistoryExtractionError",
    "KnowledgeInvariantError",
    "ConfigurationError",
    "InvalidConfigError",
]
