"""Code owner finders: from a file's history to per-developer knowledge levels."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Mapping, Optional

from ..diff.models import DiffHistory
from ..exceptions import KnowledgeInvariantError
from ..logging_config import get_logger
from .calculator import KnowledgeStateCalculator

logger = get_logger(__name__)


@dataclass(frozen=True)
class CodeOwnerResult:
    """Knowledge level in [0, 1] of every developer who touched the file.

    Higher levels make better code owner candidates. Ranking and
    truncation are left to the caller through :meth:`ranked` and :meth:`top`.
    """

    developer_to_knowledge_level: Mapping[str, float] = field(default_factory=dict)

    def ranked(self) -> list[tuple[str, float]]:
        """Developers by descending knowledge level, ties by name."""
        return sorted(self.developer_to_knowledge_level.items(), key=lambda item: (-item[1], item[0]))

    def top(self, n: int) -> list[tuple[str, float]]:
        return self.ranked()[:n]

    def __len__(self) -> int:
        return len(self.developer_to_knowledge_level)

    def __getitem__(self, developer: str) -> float:
        return self.developer_to_knowledge_level[developer]


class CodeOwnerFinder(ABC):
    """Computes a :class:`CodeOwnerResult` from the history of one file."""

    @abstractmethod
    def find(self, history: DiffHistory) -> CodeOwnerResult:
        pass


class DeveloperIndependentCodeOwnerFinder(CodeOwnerFinder):
    """Scores every author on their own and groups the scores.

    Since no developer's level depends on another's, the authors can be
    scored concurrently on ``workers`` threads. A failure for any author
    fails the whole call.
    """

    def __init__(self, workers: Optional[int] = None):
        if workers is not None and workers < 1:
            raise ValueError("workers must be at least 1")
        self.workers = workers

    @abstractmethod
    def knowledge_level_of(self, developer: str, history: DiffHistory) -> float:
        """Knowledge level of ``developer``; must be a real in [0, 1]."""

    def find(self, history: DiffHistory) -> CodeOwnerResult:
        developers = sorted(history.authors)
        logger.debug(
            "Scoring %d developers over %d revisions", len(developers), history.total_revisions
        )

        if self.workers is not None and self.workers > 1 and len(developers) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                levels = list(executor.map(lambda d: self._checked_level(d, history), developers))
        else:
            levels = [self._checked_level(d, history) for d in developers]

        return CodeOwnerResult(dict(zip(developers, levels)))

    def _checked_level(self, developer: str, history: DiffHistory) -> float:
        level = self.knowledge_level_of(developer, history)
        if not isinstance(level, (int, float)) or not math.isfinite(level) or not 0.0 <= level <= 1.0:
            raise KnowledgeInvariantError(
                f"{type(self).__name__} returned a knowledge level outside [0, 1]",
                developer=developer,
                value=level,
            )
        logger.debug("Knowledge level of %s: %.4f", developer, level)
        return float(level)


class KnowledgeStateCodeOwnerFinder(DeveloperIndependentCodeOwnerFinder):
    """Folds each developer's :class:`KnowledgeState` over the whole history."""

    def __init__(
        self,
        calculator: Optional[KnowledgeStateCalculator] = None,
        workers: Optional[int] = None,
    ):
        super().__init__(workers=workers)
        self.calculator = calculator or KnowledgeStateCalculator()

    def knowledge_level_of(self, developer: str, history: DiffHistory) -> float:
        return self.calculator.fold(developer, history).total_knowledge_level


class SummarizedCodeOwnerFinder(DeveloperIndependentCodeOwnerFinder):
    """Baseline: a developer's share of all changed lines in the history.

    Ignores time and line content entirely; useful as a point of
    comparison for the knowledge model.
    """

    def knowledge_level_of(self, developer: str, history: DiffHistory) -> float:
        total = 0
        by_developer = 0
        for revision in history.revisions:
            changed = sum(change.size for change in revision.changes)
            total += changed
            if revision.author == developer:
                by_developer += changed
        if total == 0:
            return 0.0
        return by_developer / total
