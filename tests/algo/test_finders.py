"""Tests for code owner finders and their results."""

import math

import pytest

from code_owner_finder.algo.calculator import KnowledgeStateCalculator
from code_owner_finder.algo.finders import (
    CodeOwnerResult,
    DeveloperIndependentCodeOwnerFinder,
    KnowledgeStateCodeOwnerFinder,
    SummarizedCodeOwnerFinder,
)
from code_owner_finder.algo.oblivion import ExponentialOblivionFunction
from code_owner_finder.diff.models import DiffChange, DiffHistory, DiffLine, DiffRevision, Difference
from code_owner_finder.exceptions import KnowledgeInvariantError


def two_author_history(creation_revision, t0, day):
    """alice writes four lines, bob later rewrites the last one."""
    first = creation_revision("alice", t0, [2, 2, 2, 2])
    content = first.content[:3] + (DiffLine("bob", t0 + day, 2),)
    second = DiffRevision(
        revision_id="r2",
        content=content,
        difference_with_previous=Difference("bob", t0 + day, (DiffChange(1, 1, 3, 3),)),
    )
    return DiffHistory((first, second))


class FixedLevelFinder(DeveloperIndependentCodeOwnerFinder):
    def __init__(self, level, workers=None):
        super().__init__(workers=workers)
        self.level = level

    def knowledge_level_of(self, developer, history):
        return self.level


class TestCodeOwnerResult:
    """Ranking of the result mapping."""

    def test_ranked_by_level_then_name(self):
        result = CodeOwnerResult({"carol": 0.2, "bob": 0.7, "alice": 0.7, "dave": 0.0})
        assert result.ranked() == [("alice", 0.7), ("bob", 0.7), ("carol", 0.2), ("dave", 0.0)]

    def test_top(self):
        result = CodeOwnerResult({"a": 0.1, "b": 0.9, "c": 0.5})
        assert result.top(2) == [("b", 0.9), ("c", 0.5)]
        assert result.top(10) == result.ranked()

    def test_mapping_access(self):
        result = CodeOwnerResult({"a": 0.1})
        assert len(result) == 1
        assert result["a"] == 0.1
        assert len(CodeOwnerResult()) == 0


class TestKnowledgeStateCodeOwnerFinder:
    """Knowledge-model scoring."""

    def test_every_author_is_scored(self, creation_revision, t0, day, clock_at):
        calc = KnowledgeStateCalculator(clock=clock_at(t0 + day))
        result = KnowledgeStateCodeOwnerFinder(calc).find(two_author_history(creation_revision, t0, day))

        assert set(result.developer_to_knowledge_level) == {"alice", "bob"}
        # alice keeps three of four lines, decayed by one day
        assert result["alice"] == pytest.approx(0.75 * 0.5 ** (1 / 500))
        # bob wrote one line and read the three above it: (24 + 23 + 19 + 15) / 24 / 4
        assert result["bob"] == pytest.approx(81 / 96)
        assert result.ranked()[0][0] == "bob"

    def test_owner_changes_as_time_passes(self, creation_revision, t0, day, clock_at):
        """Bob rewrites everything long after alice wrote it."""
        first = creation_revision("alice", t0, [1, 1])
        later = t0 + 1000 * day
        second = DiffRevision(
            revision_id="r2",
            content=(DiffLine("bob", later, 1), DiffLine("bob", later, 1)),
            difference_with_previous=Difference("bob", later, (DiffChange(2, 2, 0, 0),)),
        )
        calc = KnowledgeStateCalculator(ExponentialOblivionFunction(100), clock=clock_at(later))

        result = KnowledgeStateCodeOwnerFinder(calc).find(DiffHistory((first, second)))

        assert result["bob"] == 1.0
        assert result["alice"] == 0.0

    def test_threaded_scoring_matches_sequential(self, creation_revision, t0, day, clock_at):
        history = two_author_history(creation_revision, t0, day)
        calc = KnowledgeStateCalculator(clock=clock_at(t0 + 30 * day))

        sequential = KnowledgeStateCodeOwnerFinder(calc).find(history)
        threaded = KnowledgeStateCodeOwnerFinder(calc, workers=4).find(history)

        assert threaded == sequential

    def test_empty_history_has_no_owners(self):
        assert len(KnowledgeStateCodeOwnerFinder().find(DiffHistory())) == 0


class TestSummarizedCodeOwnerFinder:
    """Share of changed lines."""

    def test_share_of_changed_lines(self, creation_revision, t0, day):
        result = SummarizedCodeOwnerFinder().find(two_author_history(creation_revision, t0, day))
        # alice inserted 4 lines, bob deleted 1 and inserted 1
        assert result["alice"] == pytest.approx(4 / 6)
        assert result["bob"] == pytest.approx(2 / 6)

    def test_no_changes_scores_zero(self, t0):
        empty = DiffRevision("r1", (), Difference("alice", t0, ()))
        result = SummarizedCodeOwnerFinder().find(DiffHistory((empty,)))
        assert result["alice"] == 0.0


class TestKnowledgeLevelInvariant:
    """Finders must never report levels outside [0, 1]."""

    @pytest.mark.parametrize("level", [1.5, -0.1, math.nan, math.inf])
    def test_out_of_range_level_fails(self, creation_revision, t0, level):
        history = DiffHistory((creation_revision("alice", t0, [1]),))
        with pytest.raises(KnowledgeInvariantError) as exc_info:
            FixedLevelFinder(level).find(history)
        assert exc_info.value.developer == "alice"

    def test_failure_in_worker_propagates(self, creation_revision, t0, day):
        history = two_author_history(creation_revision, t0, day)
        with pytest.raises(KnowledgeInvariantError):
            FixedLevelFinder(2.0, workers=2).find(history)

    def test_workers_must_be_positive(self):
        with pytest.raises(ValueError):
            FixedLevelFinder(0.5, workers=0)
