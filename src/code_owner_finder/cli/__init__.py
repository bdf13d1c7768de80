"""CLI entry point: registers the subcommands."""

import typer

from ._common import console  # noqa: F401

app = typer.Typer(
    name="code-owner-finder",
    help="Code Owner Finder - who knows this file best, right now?",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .find import find as _find  # noqa: F401, E402


def main() -> None:
    app()
