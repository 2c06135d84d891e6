"""Branch comparison node: the stateful facade over a branch's comparison.

The node owns the compare-with target of one branch. It loads the persisted
target on construction, builds its children (behind commits, ahead commits,
changed files) lazily on first access, and drops them whenever the target or
comparison mode changes.
"""

from enum import Enum
from typing import List, Optional, Union

from loguru import logger

from gitcompare.gateway.abc import GitQueryService
from gitcompare.gateway.picker import PickCancelled, PickerOptions, ReferencePicker
from gitcompare.gateway.view import ViewNotifier
from gitcompare.models.base import GitBranch, RangePair
from gitcompare.models.comparison import ComparisonMode, ComparisonTarget, RangeNotation
from gitcompare.nodes.commits_query import CommitsQuery
from gitcompare.nodes.comparison_store import ComparisonStateStore, branch_identity
from gitcompare.nodes.files_query import FileDiffQuery
from gitcompare.nodes.range_resolver import RangeResolver, create_range
from gitcompare.nodes.results import (
    FilesComparison,
    ResultsCommits,
    ResultsFiles,
)
from gitcompare.utils.strings import pluralize, shorten_ref

Child = Union[ResultsCommits, ResultsFiles]


class NodeState(Enum):
    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"


class CacheState(Enum):
    EMPTY = "empty"
    POPULATED = "populated"


class ChildrenCache:
    """Memoized children with a single invalidation entry point.

    Each invalidation starts a new generation; children computed for an
    older generation are discarded instead of cached.
    """

    def __init__(self) -> None:
        self.state = CacheState.EMPTY
        self.generation = 0
        self._children: List[Child] = []

    def get(self) -> Optional[List[Child]]:
        return self._children if self.state is CacheState.POPULATED else None

    def populate(self, children: List[Child], generation: int) -> bool:
        if generation != self.generation:
            return False
        self._children = children
        self.state = CacheState.POPULATED
        return True

    def invalidate(self) -> None:
        self.generation += 1
        self._children = []
        self.state = CacheState.EMPTY


class CompareBranchNode:
    """Compares a branch, or the working tree on top of it, with another reference."""

    key = ":compare-branch"

    @classmethod
    def get_id(cls, repo_path: str, name: str, root: bool) -> str:
        return f"gitcompare:repository({repo_path}){cls.key}({name}){':root' if root else ''}"

    def __init__(
        self,
        git: GitQueryService,
        store: ComparisonStateStore,
        picker: ReferencePicker,
        view: ViewNotifier,
        branch: GitBranch,
        show_comparison: ComparisonMode = ComparisonMode.BRANCH,
        root: bool = False,
    ) -> None:
        self.git = git
        self.store = store
        self.picker = picker
        self.view = view
        self.branch = branch
        self.show_comparison = show_comparison
        # Shown as a root of the view rather than under a repository
        self.root = root

        self._compare_with: Optional[ComparisonTarget] = None
        self._children = ChildrenCache()
        self._load_compare_with()

    # ============================================================================
    # Properties
    # ============================================================================

    @property
    def id(self) -> str:
        return self.get_id(self.branch.repo_path, self.branch.name, self.root)

    @property
    def identity(self) -> str:
        return branch_identity(self.branch)

    @property
    def repo_path(self) -> str:
        return self.branch.repo_path

    @property
    def compare_with(self) -> Optional[ComparisonTarget]:
        return self._compare_with

    @property
    def state(self) -> NodeState:
        return NodeState.UNCONFIGURED if self._compare_with is None else NodeState.CONFIGURED

    @property
    def comparison_mode(self) -> ComparisonMode:
        if self._compare_with is not None:
            return self._compare_with.mode
        return self.show_comparison

    @property
    def compare_with_working_tree(self) -> bool:
        return self.comparison_mode is ComparisonMode.WORKING

    @property
    def ahead(self) -> RangePair:
        return self._resolver().ahead_pair()

    @property
    def behind(self) -> RangePair:
        return self._resolver().behind_pair()

    @property
    def label(self) -> str:
        subject = "Working Tree" if self.compare_with_working_tree else self.branch.name
        if self._compare_with is None:
            return f"Compare {subject} with <branch, tag, or ref>"
        return f"Compare {subject} with {shorten_ref(self._compare_with.ref)}"

    @property
    def tooltip(self) -> Optional[str]:
        if self._compare_with is not None:
            return None
        subject = "Working Tree" if self.compare_with_working_tree else self.branch.name
        return f"Click to compare {subject} with a branch, tag, or ref"

    # ============================================================================
    # Children
    # ============================================================================

    async def get_children(self) -> List[Child]:
        """Build, or return the cached, behind/ahead/files children."""
        if self._compare_with is None:
            return []

        cached = self._children.get()
        if cached is not None:
            return cached

        generation = self._children.generation
        compare_with = self._compare_with
        working = self.compare_with_working_tree
        resolver = self._resolver()

        ahead = resolver.ahead_pair()
        behind = resolver.behind_pair()
        counts = await resolver.ahead_behind_counts()
        merge_base = await resolver.merge_base(behind.ref1, behind.ref2)

        files = FileDiffQuery(self.git, self.repo_path, self.branch.ref, compare_with.ref, working)

        children: List[Child] = [
            ResultsCommits(
                id="behind",
                label="Behind",
                direction="behind",
                comparison=behind,
                query=CommitsQuery(
                    self.git, self.repo_path, create_range(behind.ref1, behind.ref2, RangeNotation.TWO_DOT)
                ),
                files=FilesComparison(
                    ref1="" if working else merge_base or behind.ref1,
                    ref2=behind.ref2,
                    query=files.behind,
                ),
                description=pluralize("commit", counts.behind if counts is not None else 0),
            ),
            ResultsCommits(
                id="ahead",
                label="Ahead",
                direction="ahead",
                comparison=ahead,
                query=CommitsQuery(
                    self.git,
                    self.repo_path,
                    create_range(ahead.ref1, "" if working else ahead.ref2, RangeNotation.TWO_DOT),
                ),
                files=FilesComparison(
                    ref1=merge_base or ahead.ref1,
                    ref2="" if working else ahead.ref2,
                    query=files.ahead,
                ),
                description=pluralize("commit", counts.ahead if counts is not None else 0),
            ),
            ResultsFiles(
                ref1=compare_with.ref or "HEAD",
                ref2="" if working else self.branch.ref,
                query=files.full,
            ),
        ]

        if self._children.populate(children, generation):
            logger.info(
                f"Compared {self.branch.name} with {compare_with.ref or 'the working tree'}: "
                f"{counts}, merge base {merge_base}"
            )
        else:
            logger.debug(f"Discarding stale children of {self.id}")
        return children

    # ============================================================================
    # Mutations
    # ============================================================================

    async def edit(self) -> None:
        """Let the user pick a new compare-with reference."""
        subject = f"{self.branch.name}{' (working)' if self.compare_with_working_tree else ''}"
        pick = await self.picker.show(
            self.repo_path,
            f"Compare {subject} with",
            "Choose a reference to compare with",
            PickerOptions(
                allow_entering_refs=True,
                picked=self.branch.ref,
                sort={"branches": {"current": True}, "tags": {}},
            ),
        )
        if pick is None or isinstance(pick, PickCancelled):
            logger.debug(f"No reference picked for {self.id}")
            return

        logger.info(f"Comparing {self.branch.name} with {pick.ref}")
        await self._update_compare_with(
            ComparisonTarget(ref=pick.ref, notation=None, mode=self.comparison_mode)
        )
        self._notify()

    async def clear(self) -> None:
        if self._compare_with is None:
            return

        logger.info(f"Clearing comparison of {self.branch.name}")
        await self._update_compare_with(None)
        self._notify()

    async def set_comparison_mode(self, mode: ComparisonMode) -> None:
        logger.info(f"Setting comparison mode of {self.branch.name} to {mode.value}")
        if self._compare_with is not None:
            await self._update_compare_with(self._compare_with.with_mode(mode))
        else:
            self.show_comparison = mode
            self._invalidate()
        self._notify()

    def refresh(self) -> None:
        """Drop cached children and re-read the persisted target."""
        self._invalidate()
        self._load_compare_with()

    # ============================================================================
    # Internals
    # ============================================================================

    def _resolver(self) -> RangeResolver:
        ref = self._compare_with.ref if self._compare_with is not None else None
        return RangeResolver(self.git, self.repo_path, self.branch.ref, ref)

    def _invalidate(self) -> None:
        self._children.invalidate()

    def _notify(self) -> None:
        self.view.trigger_node_change(self)

    def _load_compare_with(self) -> None:
        self._compare_with = self.store.load(self.identity, self.show_comparison)

    async def _update_compare_with(self, compare_with: Optional[ComparisonTarget]) -> None:
        # Memory is updated before the write; a failed write propagates.
        self._compare_with = compare_with
        self._invalidate()
        await self.store.save(self.identity, compare_with)
