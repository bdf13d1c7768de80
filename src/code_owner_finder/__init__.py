"""
Code Owner Finder - who knows this file best, right now?

Replays the revision history of a single file and models, line by line,
how much each contributor still knows of it: knowledge is gained by
writing lines and by reading the code around one's edits, and fades over
time. The developers with the highest weighted knowledge are the best
candidates to ask about the file.
"""

__version__ = "0.1.0"

from .algo import (
    CodeOwnerFinder,
    CodeOwnerResult,
    KnowledgeState,
    KnowledgeStateCalculator,
    KnowledgeStateCodeOwnerFinder,
)
from .config import KnowledgeConfig, build_finder, load_config
from .diff import DiffHistory, DiffHistoryCalculator, DiffRevision

__all__ = [
    "CodeOwnerFinder",  # Main entry point
    "CodeOwnerResult",
    "DiffHistory",
    "DiffHistoryCalculator",
    "DiffRevision",
    "KnowledgeConfig",
    "KnowledgeState",
    "KnowledgeStateCalculator",
    "KnowledgeStateCodeOwnerFinder",
    "build_finder",
    "load_config",
]
