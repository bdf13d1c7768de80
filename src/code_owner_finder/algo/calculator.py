"""Knowledge state transitions.

A developer's knowledge evolves on two kinds of events:

* a new revision of the file (:meth:`KnowledgeStateCalculator.next_state`):
  the state first decays to the revision's timestamp, then the revision's
  diff is replayed and the lines it inserts receive knowledge;
* the passage of time up to now
  (:meth:`KnowledgeStateCalculator.update_to_present`).

Every transition is a pure function returning a new state.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from ..diff.models import DiffHistory, DiffRevision
from ..diff.replay import DiffReplayer, DiffReplayHandler
from ..exceptions import DiffReplayError, HistoryOrderError
from ..logging_config import get_logger
from .adder import LineKnowledgeAdder
from .oblivion import ExponentialOblivionFunction, OblivionFunction
from .state import KnowledgeState, LineWithKnowledge

logger = get_logger(__name__)

Clock = Callable[[], float]


class _NextLinesBuilder(DiffReplayHandler):
    """Stayed lines keep their knowledge; inserted lines start from zero."""

    def __init__(self, state: KnowledgeState, revision: DiffRevision):
        self.state = state
        self.revision = revision
        self.lines: list[LineWithKnowledge] = []
        self.inserted_indices: list[int] = []

    def on_stayed_line(self, old_index: int) -> None:
        self.lines.append(self.state.lines[old_index])

    def on_inserted_line(self, new_index: int) -> None:
        self.lines.append(LineWithKnowledge(line=self.revision.content[new_index], knowledge=0.0))
        self.inserted_indices.append(len(self.lines) - 1)


class KnowledgeStateCalculator:
    """Evolves a :class:`KnowledgeState` through revisions and time.

    Args:
        oblivion_function: How knowledge decays between events.
        adder: How a revision adds knowledge.
        clock: Source of "now" in unix seconds, used by
            :meth:`update_to_present`.
    """

    def __init__(
        self,
        oblivion_function: Optional[OblivionFunction] = None,
        adder: Optional[LineKnowledgeAdder] = None,
        clock: Clock = time.time,
    ):
        self.oblivion_function = oblivion_function or ExponentialOblivionFunction()
        self.adder = adder or LineKnowledgeAdder()
        self.clock = clock

    def decay(self, state: KnowledgeState, elapsed: float) -> KnowledgeState:
        """Let ``elapsed`` seconds pass without any change to the file."""
        return self.oblivion_function.apply_to_state(state, elapsed)

    def next_state(self, state: KnowledgeState, revision: DiffRevision) -> KnowledgeState:
        """State right after ``revision`` was committed.

        Raises:
            HistoryOrderError: If ``revision`` is older than ``state``.
            DiffReplayError: If the revision's difference does not turn the
                current lines into the revision's content.
        """
        elapsed = revision.timestamp - state.timestamp
        if elapsed < 0:
            raise HistoryOrderError(state.developer, state.timestamp, revision.timestamp)
        # pin the timestamp: state.timestamp + elapsed is inexact far from DISTANT_PAST
        up_to_date = self.decay(state, elapsed).at(revision.timestamp)
        return self.instant_next_state(up_to_date, revision)

    def instant_next_state(self, state: KnowledgeState, revision: DiffRevision) -> KnowledgeState:
        """Apply ``revision`` to a state already decayed to its timestamp."""
        builder = _NextLinesBuilder(state, revision)
        try:
            DiffReplayer(builder).replay(state.line_count, revision.difference_with_previous)
        except IndexError as e:
            raise DiffReplayError(f"inserted line out of range: {e}", revision.revision_id) from e
        except DiffReplayError as e:
            raise DiffReplayError(e.reason, revision.revision_id) from e

        if len(builder.lines) != revision.line_count:
            raise DiffReplayError(
                f"replay produced {len(builder.lines)} lines, revision has {revision.line_count}",
                revision.revision_id,
            )

        with_inserted = state.with_lines(builder.lines)
        return self.adder.add(with_inserted, builder.inserted_indices, revision.author)

    def update_to_present(self, state: KnowledgeState) -> KnowledgeState:
        """Decay ``state`` up to the clock's current time."""
        now = self.clock()
        elapsed = now - state.timestamp
        if elapsed < 0:
            logger.warning(
                "Clock (%s) is behind the last revision (%s); skipping decay", now, state.timestamp
            )
            return state
        return self.decay(state, elapsed).at(now)

    def fold(self, developer: str, history: DiffHistory) -> KnowledgeState:
        """Final, up-to-date state of ``developer`` after the whole history."""
        state = KnowledgeState.initial(developer)
        for revision in history.revisions:
            state = self.next_state(state, revision)
        return self.update_to_present(state)
