"""Per-branch persistence of the chosen compare-with target."""

from typing import Optional

from loguru import logger

from gitcompare.gateway.workspace import WorkspaceState
from gitcompare.models.base import GitBranch
from gitcompare.models.comparison import (
    ComparisonMode,
    ComparisonTarget,
    StoredComparisons,
    parse_stored_comparison,
)

BRANCH_COMPARISONS_KEY = "gitcompare:branch:comparisons"


def branch_identity(branch: GitBranch) -> str:
    """Key of a branch in the stored comparisons.

    The checked-out branch gets its own entry, distinct from the same branch
    when it is not current.
    """
    return f"{branch.id}{'+current' if branch.current else ''}"


class ComparisonStateStore:
    """Reads and writes compare-with targets keyed by branch identity.

    Every write re-reads the whole mapping first, so edits to other branches'
    entries are never clobbered. Two concurrent writes to the same entry race
    and the last one wins.
    """

    def __init__(self, workspace: WorkspaceState, key: str = BRANCH_COMPARISONS_KEY) -> None:
        self.workspace = workspace
        self.key = key

    def _comparisons(self) -> StoredComparisons:
        comparisons = self.workspace.get(self.key)
        if not isinstance(comparisons, dict):
            return {}
        return comparisons

    def load(self, identity: str, default_mode: ComparisonMode) -> Optional[ComparisonTarget]:
        """Get the target stored for identity, normalizing legacy entries."""
        return parse_stored_comparison(self._comparisons().get(identity), default_mode)

    async def save(self, identity: str, target: Optional[ComparisonTarget]) -> None:
        """Store target for identity, or remove the entry when target is None."""
        comparisons = dict(self._comparisons())

        if target is not None:
            comparisons[identity] = target.to_stored()
            logger.debug(f"Saving comparison {identity} -> {target.ref!r} ({target.mode.value})")
        else:
            comparisons.pop(identity, None)
            logger.debug(f"Removing comparison {identity}")

        await self.workspace.update(self.key, comparisons)
