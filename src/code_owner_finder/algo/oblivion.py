"""Oblivion functions: how fast developers forget code they knew.

An oblivion function maps a knowledge level ``k`` in [0, 1] and an
elapsed time ``d >= 0`` (seconds) to the remaining level. Every
implementation must satisfy:

    decay(k, 0) == k
    d1 <= d2  =>  decay(k, d2) <= decay(k, d1) <= k
    decay(k, d) -> 0 as d -> infinity   (except the "never forget" policy)

Reference: exponential forgetting with a half-life, as in

    k' = k * 0.5 ** (d / half_life)
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Union

import numpy as np

from .state import KnowledgeState, LineWithKnowledge

SECONDS_PER_DAY = 86400.0
DEFAULT_HALF_LIFE_DAYS = 500.0

KnowledgeLike = Union[float, np.ndarray]


class OblivionFunction(ABC):
    """Time-decay policy for knowledge."""

    @abstractmethod
    def decay(self, knowledge: KnowledgeLike, elapsed: float) -> KnowledgeLike:
        """Knowledge left after ``elapsed`` seconds.

        Accepts a scalar or a numpy array of knowledge levels.

        Raises:
            ValueError: If ``elapsed`` is negative.
        """

    def apply_to_state(self, state: KnowledgeState, elapsed: float) -> KnowledgeState:
        """Decay every line of ``state`` and move its timestamp forward."""
        _check_elapsed(elapsed)
        timestamp = state.timestamp + elapsed
        if not state.lines:
            return state.at(timestamp)

        decayed = self.decay(state.knowledge_array(), elapsed)
        lines = tuple(
            LineWithKnowledge(line=lwk.line, knowledge=float(k))
            for lwk, k in zip(state.lines, np.asarray(decayed, dtype=float))
        )
        return KnowledgeState(developer=state.developer, timestamp=timestamp, lines=lines)


class ConstantOblivionFunction(OblivionFunction):
    """Developers never forget anything."""

    def decay(self, knowledge: KnowledgeLike, elapsed: float) -> KnowledgeLike:
        _check_elapsed(elapsed)
        return knowledge

    def __repr__(self) -> str:
        return "ConstantOblivionFunction()"


class ExponentialOblivionFunction(OblivionFunction):
    """Half of the remembered knowledge is forgotten every ``half_life_days``."""

    def __init__(self, half_life_days: float = DEFAULT_HALF_LIFE_DAYS):
        if not half_life_days > 0 or math.isinf(half_life_days):
            raise ValueError(f"half_life_days must be a positive finite number, got {half_life_days}")
        self.half_life_days = half_life_days
        self.half_life_seconds = half_life_days * SECONDS_PER_DAY

    def factor(self, elapsed: float) -> float:
        """Multiplier applied to knowledge after ``elapsed`` seconds."""
        _check_elapsed(elapsed)
        return 0.5 ** (elapsed / self.half_life_seconds)

    def decay(self, knowledge: KnowledgeLike, elapsed: float) -> KnowledgeLike:
        return knowledge * self.factor(elapsed)

    def __repr__(self) -> str:
        return f"ExponentialOblivionFunction(half_life_days={self.half_life_days})"


def _check_elapsed(elapsed: float) -> None:
    if elapsed < 0:
        raise ValueError(f"elapsed time must be non-negative, got {elapsed}")
