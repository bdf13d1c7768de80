"""Shared CLI helpers."""

import math
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from ..algo.finders import CodeOwnerResult

console = Console()


def display_percentage(level: float) -> int:
    """Map a knowledge level in [0, 1] to a whole percentage, rounding half up."""
    return int(math.floor(level * 100 + 0.5))


def render_owners_table(result: CodeOwnerResult, top: int, file_path: Optional[Path] = None) -> Table:
    """Table of the ``top`` best code owner candidates."""
    title = f"Code owners of {file_path}" if file_path is not None else "Code owners"
    table = Table(title=title, show_header=True, pad_edge=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Developer", min_width=20)
    table.add_column("Knows", justify="right")

    for rank, (developer, level) in enumerate(result.top(top), start=1):
        pct = display_percentage(level)
        style = "green" if pct >= 50 else "yellow" if pct >= 20 else "red"
        table.add_row(str(rank), developer, f"[{style}]{pct}%[/{style}]")
    return table


def render_owners_lines(result: CodeOwnerResult, top: int) -> str:
    """Plain ``developer: knows NN%`` lines, best candidate first."""
    return "\n".join(
        f"{developer}: knows {display_percentage(level)}%" for developer, level in result.top(top)
    )
