"""Abstract interface for the git queries a comparison needs."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from gitcompare.models.base import AheadBehind, FileStatus, GitBranch, GitLog, LogCursor


class GitQueryService(ABC):
    """Read-only git queries used to compose a branch comparison.

    A ``None`` result means "no result" (no merge base, nothing changed, no
    commits) and is never an error. Invalid references or repositories raise
    ``ResolutionError``.
    """

    @abstractmethod
    async def get_ahead_behind_commit_count(
        self, repo_path: str, ranges: Sequence[str]
    ) -> Optional[AheadBehind]:
        """Count commits on each side of a symmetric difference.

        Uses `git rev-list --left-right --count A...B`: ``ahead`` is the left
        side (reachable from A only), ``behind`` the right side (B only).
        """
        ...

    @abstractmethod
    async def get_merge_base(
        self, repo_path: str, ref1: str, ref2: str, *, fork_point: bool = False
    ) -> Optional[str]:
        """Get the merge base of two refs, or None if there is none.

        Args:
            repo_path: Path to the git repository
            ref1: First ref; with ``fork_point`` the ref whose reflog is consulted
            ref2: Second ref
            fork_point: Use `git merge-base --fork-point`
        """
        ...

    @abstractmethod
    async def get_diff_status(self, repo_path: str, expression: str) -> Optional[List[FileStatus]]:
        """Get the file-level status of `git diff <expression>`.

        Returns None when nothing changed.
        """
        ...

    @abstractmethod
    async def get_log(
        self,
        repo_path: str,
        *,
        ref: str,
        limit: Optional[int],
        cursor: Optional[LogCursor] = None,
    ) -> Optional[GitLog]:
        """Get one page of commits for ``ref``.

        Without a cursor the first page is returned; with a cursor the page
        following it. ``limit=None`` returns every remaining commit.
        """
        ...

    @abstractmethod
    async def get_branch(self, repo_path: str, name: Optional[str] = None) -> Optional[GitBranch]:
        """Look up a branch by name, or the checked-out branch when name is None."""
        ...
