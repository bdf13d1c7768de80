"""Find command: rank the developers who know a file best."""

import json
from pathlib import Path
from typing import Optional

import typer

from .. import __version__
from ..config import build_finder, build_line_weight_calculator, load_config
from ..diff.history import DiffHistoryCalculator
from ..exceptions import CodeOwnerFinderError
from ..logging_config import get_logger, setup_logging
from ..temporal.git_loader import GitFileHistoryLoader
from . import app
from ._common import console, display_percentage, render_owners_lines, render_owners_table

logger = get_logger(__name__)

_FORMATS = ("rich", "plain", "json")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"code-owner-finder {__version__}")
        raise typer.Exit()


def _positive_half_life(value: Optional[float]) -> Optional[float]:
    if value is not None and not value > 0:
        raise typer.BadParameter("must be greater than 0")
    return value


@app.command()
def find(
    file: Path = typer.Argument(
        ...,
        help="File whose code owners to find",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    repo: Optional[Path] = typer.Option(
        None,
        "--repo",
        "-r",
        help="Directory inside the git work tree (default: the file's directory)",
        file_okay=False,
        dir_okay=True,
    ),
    top: Optional[int] = typer.Option(
        None,
        "--top",
        "-t",
        help="Number of developers to display (default: 5)",
        min=1,
    ),
    finder: Optional[str] = typer.Option(
        None,
        "--finder",
        help="Scoring model: knowledge (default) or summarized",
    ),
    half_life: Optional[float] = typer.Option(
        None,
        "--half-life",
        help="Days after which a developer forgets half of the code, > 0 (default: 500)",
        callback=_positive_half_life,
    ),
    weights: Optional[str] = typer.Option(
        None,
        "--weights",
        help="Line weight heuristic: words (default) or length",
    ),
    max_revisions: Optional[int] = typer.Option(
        None,
        "--max-revisions",
        "-n",
        help="Only replay the newest N revisions (0 = all)",
        min=0,
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Threads used to score developers",
        min=1,
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (default), plain, json",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML configuration file",
        exists=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also append plain-text logs to this file",
        dir_okay=False,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """
    Rank the developers who currently know [bold]FILE[/bold] best.

    Replays the git history of the file, crediting developers for the lines
    they write and read, and letting that knowledge fade over time.

    [bold cyan]Examples:[/bold cyan]

      code-owner-finder src/app.py

      code-owner-finder src/app.py --top 10 --half-life 365

      code-owner-finder src/app.py --format json
    """
    if fmt not in _FORMATS:
        console.print(f"[red]Error:[/red] unknown format '{fmt}', expected one of {', '.join(_FORMATS)}")
        raise typer.Exit(1)

    try:
        settings = load_config(
            config_file=config,
            top=top,
            finder=finder,
            half_life_days=half_life,
            line_weight=weights,
            max_revisions=max_revisions,
            workers=workers,
            verbose=verbose,
            quiet=quiet,
        )
        setup_logging(
            verbose=settings.verbosity == "verbose",
            quiet=settings.verbosity == "quiet",
            log_file=str(log_file) if log_file is not None else None,
        )

        file_path = file.resolve()
        loader = GitFileHistoryLoader(
            repo_path=repo if repo is not None else file_path.parent,
            max_revisions=settings.max_revisions,
        )
        revisions = loader.load(file_path)
        history = DiffHistoryCalculator(build_line_weight_calculator(settings)).calculate(revisions)
        result = build_finder(settings).find(history)
    except CodeOwnerFinderError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    logger.info("Scored %d developers over %d revisions", len(result), history.total_revisions)

    if fmt == "json":
        print(
            json.dumps(
                {
                    "file": str(file),
                    "revisions": history.total_revisions,
                    "owners": [
                        {
                            "developer": developer,
                            "knowledge_level": level,
                            "percentage": display_percentage(level),
                        }
                        for developer, level in result.ranked()
                    ],
                },
                indent=2,
            )
        )
        return

    if len(result) == 0:
        console.print("[yellow]No developers found in the history of this file.[/yellow]")
        return

    if fmt == "plain":
        print(render_owners_lines(result, settings.top))
        return

    console.print()
    console.print(render_owners_table(result, settings.top, file))
    console.print(f"[dim]{history.total_revisions} revisions replayed[/dim]")
