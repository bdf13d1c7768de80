"""Data models for file revision history and line-level differences."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property

from .lines import split_lines

# Far before any real commit; the timestamp of every initial knowledge state.
DISTANT_PAST: int = -(2**53)


@dataclass(frozen=True)
class DiffLine:
    """One line of a file revision: who wrote it, when, and how much it says."""

    author: str
    timestamp: float  # unix seconds
    weight: int


@dataclass(frozen=True)
class DiffChange:
    """A single atomic edit: delete ``deleted`` lines, insert ``inserted`` lines.

    Lines are numbered from 0 in both files.

    ``line_begin1`` is the first deleted line of the old file; when nothing
    is deleted it is the old line before which the insertion happens.
    ``line_begin2`` is the first inserted line of the new file; when nothing
    is inserted it is the first new line after the deleted block.
    """

    deleted: int
    inserted: int
    line_begin1: int
    line_begin2: int

    def __post_init__(self) -> None:
        if self.deleted < 0 or self.inserted < 0:
            raise ValueError("deleted and inserted must be non-negative")
        if self.line_begin1 < 0 or self.line_begin2 < 0:
            raise ValueError("line_begin1 and line_begin2 must be non-negative")

    @property
    def size(self) -> int:
        """Total lines touched (deleted + inserted)."""
        return self.deleted + self.inserted


@dataclass(frozen=True)
class Difference:
    """A commit by ``author`` at ``timestamp``, as an ordered list of changes.

    Changes are sorted by ``line_begin1`` and do not overlap.
    """

    author: str
    timestamp: float
    changes: tuple[DiffChange, ...] = ()

    @property
    def total_deleted(self) -> int:
        return sum(c.deleted for c in self.changes)

    @property
    def total_inserted(self) -> int:
        return sum(c.inserted for c in self.changes)


@dataclass(frozen=True)
class DiffRevision:
    """A file revision with per-line provenance and its diff to the previous one."""

    revision_id: str
    content: tuple[DiffLine, ...]
    difference_with_previous: Difference

    @property
    def author(self) -> str:
        return self.difference_with_previous.author

    @property
    def timestamp(self) -> float:
        return self.difference_with_previous.timestamp

    @property
    def changes(self) -> tuple[DiffChange, ...]:
        return self.difference_with_previous.changes

    @property
    def line_count(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class DiffHistory:
    """Complete history of one file, oldest revision first."""

    revisions: tuple[DiffRevision, ...] = ()

    @property
    def authors(self) -> frozenset[str]:
        """Distinct authors across all revisions."""
        return frozenset(r.author for r in self.revisions)

    @property
    def total_revisions(self) -> int:
        return len(self.revisions)

    def __len__(self) -> int:
        return len(self.revisions)


@dataclass(frozen=True)
class LoadedRevision:
    """A revision as delivered by a VCS backend: metadata plus raw text."""

    revision_id: str
    author: str
    timestamp: float
    content: str = field(repr=False)

    @cached_property
    def lines(self) -> list[str]:
        return split_lines(self.content)

    @property
    def line_count(self) -> int:
        return len(self.lines)
