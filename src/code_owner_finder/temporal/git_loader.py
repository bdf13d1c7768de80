"""Load the revisions of a single file from git via subprocess."""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..diff.models import LoadedRevision
from ..exceptions import HistoryExtractionError
from ..logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FileCommit:
    """One commit touching the file, as listed by ``git log --follow``."""

    hash: str
    timestamp: int  # unix seconds, committer date
    author: str
    status: str  # A, M, D, R, C, ...
    path: str  # path of the file in this commit


class GitFileHistoryLoader:
    """Loads every revision of one file, oldest first, following renames.

    Args:
        repo_path: Any directory inside the work tree.
        max_revisions: Keep only the newest ``max_revisions`` commits
            (0 = unlimited). The oldest kept revision is then treated as the
            creation of the file.
        timeout: Seconds allowed for each git invocation.
    """

    def __init__(self, repo_path: str | Path = ".", max_revisions: int = 0, timeout: float = 30.0):
        self.repo_path = str(Path(repo_path).resolve())
        self.max_revisions = max_revisions
        self.timeout = timeout

    def load(self, file_path: str | Path) -> list[LoadedRevision]:
        """Load all revisions of ``file_path``.

        Raises:
            HistoryExtractionError: If git is unavailable, the path is not in a
                git work tree, the file has no history, or a revision cannot be read.
        """
        root = self._toplevel(file_path)
        relative = self._relative_path(file_path, root)

        commits = self._parse_log(self._run_git_log(root, relative, file_path))
        if not commits:
            raise HistoryExtractionError(str(file_path), "File has no valid revisions.")

        commits.reverse()  # git lists newest first
        logger.info("Loading %d revisions of %s", len(commits), relative)

        revisions = []
        previous_ts: Optional[int] = None
        for commit in commits:
            timestamp = commit.timestamp
            if previous_ts is not None and timestamp < previous_ts:
                logger.debug(
                    "Commit %s is dated before its predecessor; using %d", commit.hash[:10], previous_ts
                )
                timestamp = previous_ts
            previous_ts = timestamp

            revisions.append(
                LoadedRevision(
                    revision_id=commit.hash,
                    author=commit.author,
                    timestamp=timestamp,
                    content=self._content_at(root, commit, file_path),
                )
            )
        return revisions

    def _git(self, args: list[str], cwd: str) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                ["git", "-C", cwd, *args],
                capture_output=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise HistoryExtractionError(cwd, "git executable not found")
        except subprocess.TimeoutExpired:
            raise HistoryExtractionError(cwd, f"git {args[0]} timed out after {self.timeout}s")

    def _toplevel(self, file_path: str | Path) -> str:
        result = self._git(["rev-parse", "--show-toplevel"], self.repo_path)
        if result.returncode != 0:
            raise HistoryExtractionError(
                str(file_path),
                "Could not find a git repository connected to the file.",
            )
        return result.stdout.decode("utf-8").strip()

    def _relative_path(self, file_path: str | Path, root: str) -> str:
        path = Path(file_path)
        if not path.is_absolute():
            path = Path(self.repo_path) / path
        try:
            return path.resolve().relative_to(Path(root).resolve()).as_posix()
        except ValueError:
            raise HistoryExtractionError(str(file_path), f"File is outside the repository {root}.")

    def _run_git_log(self, root: str, relative: str, file_path: str | Path) -> str:
        cmd = [
            "log",
            "--follow",
            "--format=%H|%ct|%ae",
            "--name-status",
        ]
        if self.max_revisions:
            cmd.append(f"-n{self.max_revisions}")
        cmd += ["--", relative]

        result = self._git(cmd, root)
        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise HistoryExtractionError(str(file_path), f"git log failed: {stderr}")
        return result.stdout.decode("utf-8", errors="replace")

    # Matches: 40-char hex hash | unix timestamp | author email
    _HEADER_RE = re.compile(r"^[0-9a-f]{40}\|\d+\|.*$")

    def _parse_log(self, raw: str) -> list[FileCommit]:
        """Parse ``git log --name-status`` output into commits.

        Each header is followed by one status line for the followed file:
        ``M<TAB>path``, or ``R100<TAB>old<TAB>new`` for renames.
        """
        commits: list[FileCommit] = []
        header: Optional[tuple[str, int, str]] = None

        for line in raw.split("\n"):
            line = line.strip()
            if not line:
                continue

            if self._HEADER_RE.match(line):
                hash_, ts, author = line.split("|", 2)
                header = (hash_, int(ts), author)
            elif header is not None:
                parts = line.split("\t")
                status = parts[0][:1]
                commits.append(
                    FileCommit(
                        hash=header[0],
                        timestamp=header[1],
                        author=header[2],
                        status=status,
                        path=parts[-1],
                    )
                )
                header = None

        return commits

    def _content_at(self, root: str, commit: FileCommit, file_path: str | Path) -> str:
        if commit.status == "D":
            return ""
        result = self._git(["show", f"{commit.hash}:{commit.path}"], root)
        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise HistoryExtractionError(
                str(file_path),
                f"Unable to load revision {commit.hash}: {stderr}",
            )
        return result.stdout.decode("utf-8", errors="replace")
