"""GitPython implementation of the git query service."""

import asyncio
from typing import Dict, List, Optional, Sequence

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from loguru import logger

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


def parse_name_status(output: str) -> List[FileStatus]:
    """Parse the output of `git diff --name-status -z`.

    Fields are NUL-separated: a status, then one path, or the source and
    destination paths for renames and copies. Paths are never quoted.
    """
    files = []
    fields = iter(output.split("\0"))
    for status in fields:
        if not status:
            continue

        kind = status[0]
        if kind in ("R", "C"):
            original = next(fields, "")
            files.append(FileStatus(file_name=next(fields, ""), status=kind, original_file_name=original))
        else:
            files.append(FileStatus(file_name=next(fields, ""), status=kind))
    return files


class RealGitQueryService(GitQueryService):
    """Runs git queries through GitPython off the event loop."""

    def __init__(self) -> None:
        self._repos: Dict[str, Repo] = {}

    def _repo(self, repo_path: str) -> Repo:
        repo = self._repos.get(repo_path)
        if repo is None:
            try:
                repo = Repo(repo_path)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise ResolutionError(f"Not a git repository: {repo_path}", repo_path=repo_path) from e
            self._repos[repo_path] = repo
        return repo

    # ============================================================================
    # Query Operations
    # ============================================================================

    async def get_ahead_behind_commit_count(
        self, repo_path: str, ranges: Sequence[str]
    ) -> Optional[AheadBehind]:
        return await asyncio.to_thread(self._ahead_behind, repo_path, list(ranges))

    def _ahead_behind(self, repo_path: str, ranges: List[str]) -> Optional[AheadBehind]:
        repo = self._repo(repo_path)
        try:
            output = repo.git.rev_list("--left-right", "--count", *ranges)
        except GitCommandError as e:
            raise ResolutionError(
                f"Unable to count commits for {' '.join(ranges)}", repo_path=repo_path, ref=" ".join(ranges)
            ) from e

        parts = output.split()
        if len(parts) != 2:
            return None
        return AheadBehind(ahead=int(parts[0]), behind=int(parts[1]))

    async def get_merge_base(
        self, repo_path: str, ref1: str, ref2: str, *, fork_point: bool = False
    ) -> Optional[str]:
        return await asyncio.to_thread(self._merge_base, repo_path, ref1, ref2, fork_point)

    def _merge_base(self, repo_path: str, ref1: str, ref2: str, fork_point: bool) -> Optional[str]:
        repo = self._repo(repo_path)
        args = ["--fork-point", ref1, ref2] if fork_point else [ref1, ref2]
        try:
            output = repo.git.merge_base(*args)
        except GitCommandError as e:
            # Exit status 1 without output means no common ancestor
            if e.status == 1:
                return None
            raise ResolutionError(
                f"Unable to find merge base of {ref1} and {ref2}", repo_path=repo_path, ref=f"{ref1} {ref2}"
            ) from e

        return output.strip() or None

    async def get_diff_status(self, repo_path: str, expression: str) -> Optional[List[FileStatus]]:
        return await asyncio.to_thread(self._diff_status, repo_path, expression)

    def _diff_status(self, repo_path: str, expression: str) -> Optional[List[FileStatus]]:
        repo = self._repo(repo_path)
        args = ["--name-status", "-z", "-M", "--no-ext-diff"]
        if expression:
            args.append(expression)
        try:
            output = repo.git.diff(*args, "--")
        except GitCommandError as e:
            raise ResolutionError(f"Unable to diff {expression}", repo_path=repo_path, ref=expression) from e

        files = parse_name_status(output)
        return files or None

    async def get_log(
        self,
        repo_path: str,
        *,
        ref: str,
        limit: Optional[int],
        cursor: Optional[LogCursor] = None,
    ) -> Optional[GitLog]:
        return await asyncio.to_thread(self._log, repo_path, ref, limit, cursor)

    def _log(
        self, repo_path: str, ref: str, limit: Optional[int], cursor: Optional[LogCursor]
    ) -> Optional[GitLog]:
        repo = self._repo(repo_path)
        if cursor is not None:
            ref = cursor.ref
        skip = cursor.skip if cursor is not None else 0

        kwargs = {}
        if limit is not None:
            # One extra commit tells us whether another page exists
            kwargs["max_count"] = limit + 1
        if skip:
            kwargs["skip"] = skip

        logger.debug(f"git log {ref} (limit={limit}, skip={skip})")
        try:
            commits = list(repo.iter_commits(ref, **kwargs))
        except (GitCommandError, ValueError) as e:
            raise ResolutionError(f"Unable to read log of {ref}", repo_path=repo_path, ref=ref) from e

        if not commits:
            return None

        has_more = limit is not None and len(commits) > limit
        if has_more:
            commits = commits[:limit]

        return GitLog(
            entries=[CommitInfo.from_git_commit(commit) for commit in commits],
            has_more=has_more,
            cursor=LogCursor(ref=ref, skip=skip + len(commits)) if has_more else None,
        )

    async def get_branch(self, repo_path: str, name: Optional[str] = None) -> Optional[GitBranch]:
        return await asyncio.to_thread(self._branch, repo_path, name)

    def _branch(self, repo_path: str, name: Optional[str]) -> Optional[GitBranch]:
        repo = self._repo(repo_path)
        current = None if repo.head.is_detached else repo.active_branch

        if name is None:
            if current is None:
                raise ResolutionError("HEAD is detached", repo_path=repo_path, ref="HEAD")
            sha = current.commit.hexsha if current.is_valid() else None
            return GitBranch(repo_path=repo_path, name=current.name, current=True, sha=sha)

        for head in repo.heads:
            if head.name == name:
                return GitBranch(
                    repo_path=repo_path,
                    name=head.name,
                    current=current is not None and current.name == head.name,
                    sha=head.commit.hexsha,
                )

        for remote in repo.remotes:
            for remote_ref in remote.refs:
                if remote_ref.name == name:
                    return GitBranch(
                        repo_path=repo_path, name=remote_ref.name, remote=True, sha=remote_ref.commit.hexsha
                    )

        return None
