"""Ahead/behind reference pairs, range expressions and merge bases."""

from typing import Optional

from loguru import logger

from gitcompare.gateway.abc import GitQueryService
from gitcompare.models.base import AheadBehind, RangePair
from gitcompare.models.comparison import RangeNotation


def create_range(
    ref1: Optional[str], ref2: Optional[str], notation: RangeNotation = RangeNotation.TWO_DOT
) -> str:
    """Build a revision range such as ``main..feature`` or ``main...feature``.

    An empty side is left open, so ``create_range("main", "")`` is ``main..``
    (up to HEAD).
    """
    return f"{ref1 or ''}{notation.value}{ref2 or ''}"


class RangeResolver:
    """Derives the directional pairs of a comparison and resolves its merge base.

    ``base_ref`` is the branch being compared; ``compare_with_ref`` the chosen
    target, where an empty value falls back to ``HEAD``.
    """

    def __init__(self, git: GitQueryService, repo_path: str, base_ref: str, compare_with_ref: Optional[str]):
        self.git = git
        self.repo_path = repo_path
        self.base_ref = base_ref
        self.compare_with_ref = compare_with_ref

    def ahead_pair(self) -> RangePair:
        return RangePair(ref1=self.compare_with_ref or "HEAD", ref2=self.base_ref)

    def behind_pair(self) -> RangePair:
        return RangePair(ref1=self.base_ref, ref2=self.compare_with_ref or "HEAD")

    async def ahead_behind_counts(self) -> Optional[AheadBehind]:
        """Count commits ahead and behind relative to the merge base."""
        behind = self.behind_pair()
        return await self.git.get_ahead_behind_commit_count(
            self.repo_path, [create_range(behind.ref1, behind.ref2, RangeNotation.THREE_DOT)]
        )

    async def merge_base(self, ref1: str, ref2: str) -> Optional[str]:
        """Resolve the fork point of ref1 and ref2, else their merge base.

        None means the histories share no ancestor; callers then use ref1
        literally.
        """
        merge_base = await self.git.get_merge_base(self.repo_path, ref1, ref2, fork_point=True)
        if merge_base is not None:
            return merge_base

        logger.debug(f"No fork point for {ref1} and {ref2}, falling back to merge base")
        return await self.git.get_merge_base(self.repo_path, ref1, ref2)
