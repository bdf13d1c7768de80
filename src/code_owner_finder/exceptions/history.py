"""History-related exceptions: replay, ordering, extraction."""

from typing import Optional

from .base import CodeOwnerFinderError


class HistoryError(CodeOwnerFinderError):
    """Base class for errors caused by inconsistent revision history."""

    pass


class DiffReplayError(HistoryError):
    """Raised when a difference cannot be replayed against the old content."""

    def __init__(self, reason: str, revision_id: Optional[str] = None):
        details = {"reason": reason}
        if revision_id is not None:
            details["revision"] = revision_id

        super().__init__("Cannot replay difference", details=details)
        self.reason = reason
        self.revision_id = revision_id


class HistoryOrderError(HistoryError):
    """Raised when a revision is older than the state it is applied to."""

    def __init__(self, developer: str, state_timestamp: float, revision_timestamp: float):
        super().__init__(
            "Revisions are not in chronological order",
            details={
                "developer": developer,
                "state_timestamp": str(state_timestamp),
                "revision_timestamp": str(revision_timestamp),
            },
        )
        self.developer = developer
        self.state_timestamp = state_timestamp
        self.revision_timestamp = revision_timestamp


class HistoryExtractionError(HistoryError):
    """Raised when the history of a file cannot be loaded."""

    def __init__(self, filepath: str, reason: str):
        super().__init__(
            f"Could not load history of file '{filepath}'",
            details={"reason": reason},
        )
        self.filepath = filepath
        self.reason = reason
