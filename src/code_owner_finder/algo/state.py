"""Knowledge state: how much one developer knows each line of a file."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable

import numpy as np

from ..diff.models import DISTANT_PAST, DiffLine


@dataclass(frozen=True)
class LineWithKnowledge:
    """A line of the file together with a developer's knowledge of it."""

    line: DiffLine
    knowledge: float

    def with_knowledge(self, knowledge: float) -> LineWithKnowledge:
        return LineWithKnowledge(line=self.line, knowledge=knowledge)


@dataclass(frozen=True)
class KnowledgeState:
    """What ``developer`` knows about the file as of ``timestamp``.

    ``lines`` mirrors the file line by line; its length is always the
    file's line count at ``timestamp`` and every knowledge value lies in
    [0, 1]. States are immutable: every transition builds a new one.
    """

    developer: str
    timestamp: float
    lines: tuple[LineWithKnowledge, ...] = ()

    @classmethod
    def initial(cls, developer: str) -> KnowledgeState:
        """State before the file existed: no lines, distant past."""
        return cls(developer=developer, timestamp=DISTANT_PAST, lines=())

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def total_line_weight(self) -> int:
        return sum(lwk.line.weight for lwk in self.lines)

    @property
    def total_knowledge(self) -> float:
        if not self.lines:
            return 0.0
        return float(np.dot(self.weight_array(), self.knowledge_array()))

    @property
    def total_knowledge_level(self) -> float:
        """Weighted average knowledge over the file; 0 for a weightless file."""
        total_weight = self.total_line_weight
        if total_weight == 0:
            return 0.0
        return self.total_knowledge / float(total_weight)

    def knowledge_array(self) -> np.ndarray:
        return np.fromiter((lwk.knowledge for lwk in self.lines), dtype=float, count=len(self.lines))

    def weight_array(self) -> np.ndarray:
        return np.fromiter((lwk.line.weight for lwk in self.lines), dtype=float, count=len(self.lines))

    def with_lines(self, lines: Iterable[LineWithKnowledge]) -> KnowledgeState:
        return replace(self, lines=tuple(lines))

    def at(self, timestamp: float) -> KnowledgeState:
        return replace(self, timestamp=timestamp)
