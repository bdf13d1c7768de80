"""Line splitting and line-level edit scripts.

Every component that turns text into lines must go through
:func:`split_lines`. Replaying a difference computed over one split against
content produced by another corrupts the line alignment.
"""

from __future__ import annotations

import difflib
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .models import DiffChange, Difference


def split_lines(text: str) -> list[str]:
    """Split text into lines without their terminators.

    A trailing newline does not produce an extra empty line, and empty text
    has no lines.
    """
    return text.splitlines()


def calculate_changes(old_lines: Sequence[str], new_lines: Sequence[str]) -> tuple[DiffChange, ...]:
    """Compute the edit script turning ``old_lines`` into ``new_lines``.

    A "replace" opcode becomes a single change that both deletes and
    inserts; "equal" blocks produce nothing.
    """
    from .models import DiffChange

    matcher = difflib.SequenceMatcher(a=list(old_lines), b=list(new_lines), autojunk=False)
    changes = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        changes.append(
            DiffChange(
                deleted=i2 - i1,
                inserted=j2 - j1,
                line_begin1=i1,
                line_begin2=j1,
            )
        )
    return tuple(changes)


def calculate_difference(
    old_content: str,
    new_content: str,
    author: str,
    timestamp: float,
) -> Difference:
    """Build the :class:`Difference` between two revisions of a file."""
    from .models import Difference

    changes = calculate_changes(split_lines(old_content), split_lines(new_content))
    return Difference(author=author, timestamp=timestamp, changes=changes)
