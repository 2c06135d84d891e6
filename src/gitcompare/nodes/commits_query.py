"""Restartable, incrementally extensible commit queries."""

import asyncio
from enum import Enum
from typing import List, Optional

from loguru import logger

from gitcompare.gateway.abc import GitQueryService
from gitcompare.models.base import CommitInfo, GitLog, LogCursor


def page_limit(limit: Optional[int]) -> Optional[int]:
    """Normalize a page size; zero or negative means no limit."""
    if limit is not None and limit <= 0:
        return None
    return limit


class QueryState(Enum):
    OPEN = "open"
    EXHAUSTED = "exhausted"


class PagedCommitResult:
    """Commits fetched so far for a range, plus the cursor to continue it.

    ``more`` continues from the cursor of the last page and appends to
    ``entries``; running the owning ``CommitsQuery`` again restarts the range
    from scratch instead.
    """

    def __init__(self, git: GitQueryService, repo_path: str, log: Optional[GitLog]) -> None:
        self.git = git
        self.repo_path = repo_path
        self.entries: List[CommitInfo] = list(log.entries) if log is not None else []
        self.has_more = log.has_more if log is not None else False
        self.cursor: Optional[LogCursor] = log.cursor if log is not None else None
        self._lock = asyncio.Lock()

    @property
    def state(self) -> QueryState:
        return QueryState.OPEN if self.has_more else QueryState.EXHAUSTED

    async def more(self, limit: Optional[int]) -> "PagedCommitResult":
        """Fetch the next page and append it; a no-op once exhausted."""
        async with self._lock:
            if self.state is QueryState.EXHAUSTED or self.cursor is None:
                return self

            page = await self.git.get_log(
                self.repo_path, ref=self.cursor.ref, limit=page_limit(limit), cursor=self.cursor
            )
            if page is None:
                # Nothing to continue with; keep what we have
                return self

            self.entries.extend(page.entries)
            self.has_more = page.has_more
            self.cursor = page.cursor
            logger.debug(f"Fetched {len(page.entries)} more commits ({len(self.entries)} total)")
            return self


class CommitsQuery:
    """Commit listing for one range expression, e.g. ``main..feature``."""

    def __init__(self, git: GitQueryService, repo_path: str, range_: str) -> None:
        self.git = git
        self.repo_path = repo_path
        self.range = range_

    async def __call__(self, limit: Optional[int]) -> PagedCommitResult:
        """Fetch the first page; ``limit=None`` or 0 fetches every commit at once."""
        log = await self.git.get_log(self.repo_path, ref=self.range, limit=page_limit(limit))
        return PagedCommitResult(self.git, self.repo_path, log)

    def __repr__(self) -> str:
        return f"CommitsQuery({self.range!r})"
