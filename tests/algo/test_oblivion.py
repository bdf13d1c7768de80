"""Tests for knowledge decay over time."""

import numpy as np
import pytest

from code_owner_finder.algo.oblivion import (
    SECONDS_PER_DAY,
    ConstantOblivionFunction,
    ExponentialOblivionFunction,
)
from code_owner_finder.algo.state import KnowledgeState, LineWithKnowledge
from code_owner_finder.diff.models import DiffLine


def make_state(knowledge, timestamp=0):
    lines = tuple(LineWithKnowledge(DiffLine("alice", 0, 1), k) for k in knowledge)
    return KnowledgeState(developer="alice", timestamp=timestamp, lines=lines)


class TestExponentialOblivion:
    """Half-life decay."""

    def test_zero_elapsed_is_identity(self):
        fn = ExponentialOblivionFunction(half_life_days=500)
        assert fn.decay(0.73, 0) == 0.73

    def test_one_half_life_halves(self):
        fn = ExponentialOblivionFunction(half_life_days=500)
        assert fn.decay(1.0, 500 * SECONDS_PER_DAY) == 0.5
        assert fn.decay(0.8, 1000 * SECONDS_PER_DAY) == pytest.approx(0.2)

    def test_monotonic_in_elapsed_time(self):
        fn = ExponentialOblivionFunction(half_life_days=30)
        previous = 1.0
        for days in (0, 1, 7, 30, 90, 365, 3650):
            current = fn.decay(1.0, days * SECONDS_PER_DAY)
            assert current <= previous
            previous = current

    def test_decay_composes(self):
        """Decaying by d1 then d2 equals decaying by d1 + d2."""
        fn = ExponentialOblivionFunction(half_life_days=100)
        d1, d2 = 13 * SECONDS_PER_DAY, 57 * SECONDS_PER_DAY
        assert fn.decay(fn.decay(0.9, d1), d2) == pytest.approx(fn.decay(0.9, d1 + d2))

    def test_tends_to_zero(self):
        fn = ExponentialOblivionFunction(half_life_days=1)
        assert fn.decay(1.0, 200 * SECONDS_PER_DAY) < 1e-50

    def test_decays_numpy_arrays(self):
        fn = ExponentialOblivionFunction(half_life_days=500)
        decayed = fn.decay(np.array([1.0, 0.5, 0.0]), 500 * SECONDS_PER_DAY)
        np.testing.assert_allclose(decayed, [0.5, 0.25, 0.0])

    def test_negative_elapsed_rejected(self):
        fn = ExponentialOblivionFunction()
        with pytest.raises(ValueError, match="non-negative"):
            fn.decay(1.0, -1)

    @pytest.mark.parametrize("half_life", [0, -5, float("inf"), float("nan")])
    def test_invalid_half_life_rejected(self, half_life):
        with pytest.raises(ValueError, match="half_life_days"):
            ExponentialOblivionFunction(half_life_days=half_life)


class TestConstantOblivion:
    """Never-forget policy."""

    def test_knowledge_never_changes(self):
        fn = ConstantOblivionFunction()
        assert fn.decay(0.4, 0) == 0.4
        assert fn.decay(0.4, 10**9) == 0.4

    def test_negative_elapsed_rejected(self):
        with pytest.raises(ValueError):
            ConstantOblivionFunction().decay(0.4, -10)


class TestApplyToState:
    """Decay of a whole knowledge state."""

    def test_every_line_decays_and_time_moves_forward(self):
        fn = ExponentialOblivionFunction(half_life_days=1)
        state = make_state([1.0, 0.5], timestamp=100)

        decayed = fn.apply_to_state(state, SECONDS_PER_DAY)

        assert decayed.timestamp == 100 + SECONDS_PER_DAY
        assert [lwk.knowledge for lwk in decayed.lines] == [0.5, 0.25]
        assert decayed.developer == "alice"
        assert [lwk.line for lwk in decayed.lines] == [lwk.line for lwk in state.lines]

    def test_input_state_is_untouched(self):
        fn = ExponentialOblivionFunction(half_life_days=1)
        state = make_state([1.0])
        fn.apply_to_state(state, SECONDS_PER_DAY)
        assert state.lines[0].knowledge == 1.0
        assert state.timestamp == 0

    def test_empty_state_only_moves_time(self):
        fn = ExponentialOblivionFunction()
        state = KnowledgeState(developer="bob", timestamp=10)
        decayed = fn.apply_to_state(state, 5)
        assert decayed.timestamp == 15
        assert decayed.lines == ()

    def test_negative_elapsed_rejected(self):
        with pytest.raises(ValueError):
            ConstantOblivionFunction().apply_to_state(make_state([1.0]), -1)
