"""Replay of a :class:`Difference` against old file content.

The replayer walks the old file once, in document order, and reports
each old line as stayed or deleted and each new line introduced by a
change as inserted. Consuming the events in order rebuilds the new file:
stayed lines and inserted lines, in the order they are reported, are
exactly the lines of the new revision.

Example:
    >>> prefix = Difference("alice", 0, (DiffChange(0, 2, 0, 0),))
    >>> [(e.kind.value, e.index) for e in replay_events(3, prefix)]
    [('inserted', 0), ('inserted', 1), ('stayed', 0), ('stayed', 1), ('stayed', 2)]
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, NamedTuple

from ..exceptions import DiffReplayError
from .models import Difference


class LineStatus(str, Enum):
    STAYED = "stayed"
    DELETED = "deleted"
    INSERTED = "inserted"


class ReplayEvent(NamedTuple):
    kind: LineStatus
    index: int  # old index for stayed/deleted, new index for inserted


class DiffReplayHandler:
    """Receives the events produced by :class:`DiffReplayer`.

    Every callback does nothing by default; subclasses override the ones
    they care about.
    """

    def on_stayed_line(self, old_index: int) -> None:
        pass

    def on_deleted_line(self, old_index: int) -> None:
        pass

    def on_inserted_line(self, new_index: int) -> None:
        pass


class DiffReplayer:
    """Feeds the events of a difference replay to a handler."""

    def __init__(self, handler: DiffReplayHandler):
        self.handler = handler

    def replay(self, size: int, difference: Difference) -> None:
        """Replay ``difference`` against an old file of ``size`` lines.

        Raises:
            DiffReplayError: If a change starts before the previous one ends
                or reaches past the end of the old file.
        """
        for event in iter_replay(size, difference):
            if event.kind is LineStatus.STAYED:
                self.handler.on_stayed_line(event.index)
            elif event.kind is LineStatus.DELETED:
                self.handler.on_deleted_line(event.index)
            else:
                self.handler.on_inserted_line(event.index)


def iter_replay(size: int, difference: Difference) -> Iterator[ReplayEvent]:
    """Yield replay events lazily, in document order."""
    if size < 0:
        raise DiffReplayError(f"old line count must be non-negative, got {size}")

    i = 0
    for change in difference.changes:
        if change.line_begin1 < i:
            raise DiffReplayError(
                f"change at old line {change.line_begin1} overlaps or precedes old line {i}"
            )
        if change.line_begin1 + change.deleted > size:
            raise DiffReplayError(
                f"change deletes old lines {change.line_begin1}.."
                f"{change.line_begin1 + change.deleted - 1} of a {size}-line file"
            )
        while i < change.line_begin1:
            yield ReplayEvent(LineStatus.STAYED, i)
            i += 1
        while i < change.line_begin1 + change.deleted:
            yield ReplayEvent(LineStatus.DELETED, i)
            i += 1
        for j in range(change.line_begin2, change.line_begin2 + change.inserted):
            yield ReplayEvent(LineStatus.INSERTED, j)
    # the tail after the last change can only be walked knowing the old size
    while i < size:
        yield ReplayEvent(LineStatus.STAYED, i)
        i += 1


def replay_events(size: int, difference: Difference) -> list[ReplayEvent]:
    """All replay events of ``difference`` as a list."""
    return list(iter_replay(size, difference))


def new_line_count(size: int, difference: Difference) -> int:
    """Line count of the file after applying ``difference`` to ``size`` lines."""
    return size - difference.total_deleted + difference.total_inserted
