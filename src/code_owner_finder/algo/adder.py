"""Knowledge injection on edited lines.

When a revision inserts lines, the developer whose state is computed
gains knowledge in two ways:

* writing: full knowledge of the lines they wrote themselves;
* reading: partial knowledge of the lines around their edit, which they
  had to read to make it.

Reading knowledge spreads from every inserted line of weight ``w`` with a
budget of ``round(w * writing_knowledge * spread_coefficient)`` weight
units, independently to the left and to the right. Walking away from the
edit, each line of weight ``wi`` takes the next ``wi`` units of the
budget. With ``r`` units remaining, the units it takes are worth
``r, r-1, ..., r-wi+1``: closer lines receive larger shares of the
triangular sum ``1 + 2 + ... + budget``. The share is divided by the
budget and by ``wi`` to get a per-line knowledge delta.

Deltas proposed by several inserted lines for the same line are combined
with ``max``, never summed, so a block of simultaneous insertions does
not credit its neighbours several times.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from ..exceptions import KnowledgeInvariantError
from .state import KnowledgeState

DEFAULT_SPREAD_COEFFICIENT = 6.0  # to one direction
SAME_AUTHOR_WRITING_KNOWLEDGE = 1.0
OTHER_AUTHOR_WRITING_KNOWLEDGE = 0.0


def _triangular(r: int) -> int:
    """1 + 2 + ... + r"""
    return r * (r + 1) // 2


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class LineKnowledgeAdder:
    """Computes and applies the knowledge gained from one revision."""

    def __init__(
        self,
        spread_coefficient: float = DEFAULT_SPREAD_COEFFICIENT,
        same_author_writing_knowledge: float = SAME_AUTHOR_WRITING_KNOWLEDGE,
        other_author_writing_knowledge: float = OTHER_AUTHOR_WRITING_KNOWLEDGE,
    ):
        if spread_coefficient < 0:
            raise ValueError("spread_coefficient must be non-negative")
        for name, value in (
            ("same_author_writing_knowledge", same_author_writing_knowledge),
            ("other_author_writing_knowledge", other_author_writing_knowledge),
        ):
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0.0 and 1.0")
        self.spread_coefficient = spread_coefficient
        self.same_author_writing_knowledge = same_author_writing_knowledge
        self.other_author_writing_knowledge = other_author_writing_knowledge

    def writing_knowledge(self, developer: str, author: str) -> float:
        if author == developer:
            return self.same_author_writing_knowledge
        return self.other_author_writing_knowledge

    def calculate_addition(
        self,
        state: KnowledgeState,
        inserted_line_indices: Sequence[int],
        author: str,
    ) -> np.ndarray:
        """Knowledge delta in [0, 1] for every line of ``state``."""
        weights = [lwk.line.weight for lwk in state.lines]
        addition = np.zeros(len(weights), dtype=float)
        writing = self.writing_knowledge(state.developer, author)

        for index in inserted_line_indices:
            addition[index] = max(addition[index], writing)

            w = weights[index]
            if w <= 0:
                continue
            budget = _round_half_up(w * writing * self.spread_coefficient)
            for direction in (+1, -1):
                self._spread(addition, weights, index + direction, direction, budget)

        return addition

    @staticmethod
    def _spread(
        addition: np.ndarray,
        weights: Sequence[int],
        start: int,
        direction: int,
        budget: int,
    ) -> None:
        index = start
        remaining = budget
        while 0 <= index < len(weights) and remaining > 0:
            weight = weights[index]
            if weight > 0:
                if remaining < weight:
                    consumed = _triangular(remaining)
                else:
                    consumed = _triangular(remaining) - _triangular(remaining - weight)
                delta = consumed / budget / weight
                addition[index] = max(addition[index], delta)
            remaining -= weight
            index += direction

    def add(
        self,
        state: KnowledgeState,
        inserted_line_indices: Sequence[int],
        author: str,
    ) -> KnowledgeState:
        """Return ``state`` with the knowledge of this revision added.

        Raises:
            KnowledgeInvariantError: If the computed delta does not cover
                exactly the lines of ``state``.
        """
        addition = self.calculate_addition(state, inserted_line_indices, author)
        if addition.shape != (state.line_count,):
            raise KnowledgeInvariantError(
                f"addition covers {addition.size} lines, file has {state.line_count}",
                developer=state.developer,
            )
        if not state.lines:
            return state

        knowledge = np.clip(state.knowledge_array() + addition, 0.0, 1.0)
        return state.with_lines(
            lwk.with_knowledge(float(k)) for lwk, k in zip(state.lines, knowledge)
        )
