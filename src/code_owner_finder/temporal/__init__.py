"""Temporal layer: loading file history from version control."""

from .git_loader import FileCommit, GitFileHistoryLoader

__all__ = [
    "FileCommit",
    "GitFileHistoryLoader",
]
