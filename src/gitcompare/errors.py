"""gitcompare error types."""

from typing import Optional


class GitCompareError(Exception):
    """Base class for errors raised by gitcompare."""


class ResolutionError(GitCompareError):
    """Raised when git cannot resolve a reference, range or repository.

    Attributes:
        repo_path: Repository the query ran against.
        ref: The reference or range expression that failed, if any.
    """

    def __init__(self, message: str, *, repo_path: str, ref: Optional[str] = None) -> None:
        self.repo_path = repo_path
        self.ref = ref
        super().__init__(message)


class PersistenceError(GitCompareError):
    """Raised when the workspace state could not be written."""
