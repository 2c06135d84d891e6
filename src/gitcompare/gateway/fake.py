"""Fake implementation of the git query service for testing."""

from typing import Dict, List, Optional, Sequence, Set, Tuple

from gitcompare.errors import ResolutionError
from gitcompare.gateway.abc import GitQueryService
from gitcompare.models.base import (
    AheadBehind,
    CommitInfo,
    FileStatus,
    GitBranch,
    GitLog,
    LogCursor,
)


class FakeGitQueryService(GitQueryService):
    """In-memory fake implementation for testing.

    Constructor Injection: pre-configured state passed via constructor.
    Every query is recorded in ``calls`` as ``(method, *args)``.
    """

    def __init__(
        self,
        *,
        ahead_behind: Optional[Dict[str, AheadBehind]] = None,
        merge_bases: Optional[Dict[Tuple[str, str], str]] = None,
        fork_points: Optional[Dict[Tuple[str, str], str]] = None,
        diffs: Optional[Dict[str, List[FileStatus]]] = None,
        logs: Optional[Dict[str, List[CommitInfo]]] = None,
        branches: Optional[List[GitBranch]] = None,
        invalid_refs: Optional[Set[str]] = None,
    ) -> None:
        """Create FakeGitQueryService with pre-configured state.

        Args:
            ahead_behind: Mapping of range expression -> counts
            merge_bases: Mapping of (ref1, ref2) -> merge base SHA, either order
            fork_points: Mapping of (ref, commit) -> fork point SHA
            diffs: Mapping of diff expression -> file statuses
            logs: Mapping of ref or range -> commits, newest first
            branches: Known branches; the one with ``current=True`` is checked out
            invalid_refs: Refs or expressions that raise ResolutionError
        """
        self._ahead_behind = ahead_behind if ahead_behind is not None else {}
        self._merge_bases = merge_bases if merge_bases is not None else {}
        self._fork_points = fork_points if fork_points is not None else {}
        self._diffs = diffs if diffs is not None else {}
        self._logs = logs if logs is not None else {}
        self._branches = branches if branches is not None else []
        self._invalid_refs = invalid_refs if invalid_refs is not None else set()
        self.calls: List[tuple] = []

    def _check(self, repo_path: str, *refs: str) -> None:
        for ref in refs:
            if ref in self._invalid_refs:
                raise ResolutionError(f"Unknown revision {ref}", repo_path=repo_path, ref=ref)

    # ============================================================================
    # Query Operations
    # ============================================================================

    async def get_ahead_behind_commit_count(
        self, repo_path: str, ranges: Sequence[str]
    ) -> Optional[AheadBehind]:
        self.calls.append(("get_ahead_behind_commit_count", *ranges))
        self._check(repo_path, *ranges)
        for range_ in ranges:
            if range_ in self._ahead_behind:
                return self._ahead_behind[range_]
        return None

    async def get_merge_base(
        self, repo_path: str, ref1: str, ref2: str, *, fork_point: bool = False
    ) -> Optional[str]:
        self.calls.append(("get_merge_base", ref1, ref2, fork_point))
        self._check(repo_path, ref1, ref2)
        if fork_point:
            return self._fork_points.get((ref1, ref2))
        if (ref1, ref2) in self._merge_bases:
            return self._merge_bases[(ref1, ref2)]
        return self._merge_bases.get((ref2, ref1))

    async def get_diff_status(self, repo_path: str, expression: str) -> Optional[List[FileStatus]]:
        self.calls.append(("get_diff_status", expression))
        self._check(repo_path, expression)
        files = self._diffs.get(expression)
        return list(files) if files is not None else None

    async def get_log(
        self,
        repo_path: str,
        *,
        ref: str,
        limit: Optional[int],
        cursor: Optional[LogCursor] = None,
    ) -> Optional[GitLog]:
        self.calls.append(("get_log", ref, limit, cursor))
        if cursor is not None:
            ref = cursor.ref
        self._check(repo_path, ref)

        commits = self._logs.get(ref)
        if commits is None:
            return None

        skip = cursor.skip if cursor is not None else 0
        end = len(commits) if limit is None else skip + limit
        page = commits[skip:end]
        if not page:
            return None

        has_more = end < len(commits)
        return GitLog(
            entries=list(page),
            has_more=has_more,
            cursor=LogCursor(ref=ref, skip=end) if has_more else None,
        )

    async def get_branch(self, repo_path: str, name: Optional[str] = None) -> Optional[GitBranch]:
        self.calls.append(("get_branch", name))
        for branch in self._branches:
            if (name is None and branch.current) or branch.name == name:
                return branch
        if name is None:
            raise ResolutionError("HEAD is detached", repo_path=repo_path, ref="HEAD")
        return None

    # ============================================================================
    # Test Setup
    # ============================================================================

    def set_log(self, ref: str, commits: List[CommitInfo]) -> None:
        """Replace the commits returned for ``ref``."""
        self._logs[ref] = commits
