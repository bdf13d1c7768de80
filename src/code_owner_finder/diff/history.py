"""Build a :class:`DiffHistory` from raw loaded revisions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Sequence

from ..exceptions import DiffReplayError
from ..logging_config import get_logger
from .lines import calculate_changes
from .models import DiffChange, DiffHistory, DiffLine, DiffRevision, Difference, LoadedRevision
from .replay import DiffReplayer, DiffReplayHandler

if TYPE_CHECKING:
    from ..algo.weights import LineWeightCalculator

logger = get_logger(__name__)

LineDiffer = Callable[[Sequence[str], Sequence[str]], Sequence[DiffChange]]


class _ContentBuilder(DiffReplayHandler):
    """Carries provenance of stayed lines over and stamps inserted ones."""

    def __init__(
        self,
        old_content: Sequence[DiffLine],
        revision: LoadedRevision,
        weights: LineWeightCalculator,
    ):
        self.old_content = old_content
        self.revision = revision
        self.weights = weights
        self.lines: list[DiffLine] = []

    def on_stayed_line(self, old_index: int) -> None:
        self.lines.append(self.old_content[old_index])

    def on_inserted_line(self, new_index: int) -> None:
        text = self.revision.lines[new_index]
        self.lines.append(
            DiffLine(
                author=self.revision.author,
                timestamp=self.revision.timestamp,
                weight=self.weights.calculate(text),
            )
        )


class DiffHistoryCalculator:
    """Turns a timeline of loaded revisions into a :class:`DiffHistory`.

    The first revision is treated as the insertion of the whole file.
    Every following revision is diffed against its predecessor with
    ``differ``, and the resulting edit script is replayed to find out who
    wrote each line of the new content.
    """

    def __init__(self, line_weight_calculator: LineWeightCalculator, differ: LineDiffer = calculate_changes):
        self.line_weight_calculator = line_weight_calculator
        self.differ = differ

    def calculate(self, revisions: Sequence[LoadedRevision]) -> DiffHistory:
        """Build the history of ``revisions``, ordered oldest first.

        Raises:
            DiffReplayError: If an edit script does not reproduce the line
                count of the revision it was computed for.
        """
        if not revisions:
            return DiffHistory()

        first = revisions[0]
        diff_revisions = [self._first_revision(first)]
        for previous, current in zip(revisions, revisions[1:]):
            changes = tuple(self.differ(previous.lines, current.lines))
            difference = Difference(author=current.author, timestamp=current.timestamp, changes=changes)
            diff_revisions.append(self._apply(diff_revisions[-1], difference, current))

        logger.debug("Built diff history of %d revisions", len(diff_revisions))
        return DiffHistory(revisions=tuple(diff_revisions))

    def _first_revision(self, revision: LoadedRevision) -> DiffRevision:
        content = tuple(
            DiffLine(
                author=revision.author,
                timestamp=revision.timestamp,
                weight=self.line_weight_calculator.calculate(line),
            )
            for line in revision.lines
        )
        difference = Difference(
            author=revision.author,
            timestamp=revision.timestamp,
            changes=(DiffChange(deleted=0, inserted=revision.line_count, line_begin1=0, line_begin2=0),),
        )
        return DiffRevision(
            revision_id=revision.revision_id,
            content=content,
            difference_with_previous=difference,
        )

    def _apply(
        self,
        previous: DiffRevision,
        difference: Difference,
        revision: LoadedRevision,
    ) -> DiffRevision:
        builder = _ContentBuilder(previous.content, revision, self.line_weight_calculator)
        try:
            DiffReplayer(builder).replay(previous.line_count, difference)
        except IndexError as e:
            raise DiffReplayError(f"inserted line out of range: {e}", revision.revision_id) from e

        if len(builder.lines) != revision.line_count:
            raise DiffReplayError(
                f"replay produced {len(builder.lines)} lines, revision has {revision.line_count}",
                revision.revision_id,
            )

        return DiffRevision(
            revision_id=revision.revision_id,
            content=tuple(builder.lines),
            difference_with_previous=difference,
        )
