"""Tests for per-branch comparison persistence."""

import asyncio

import pytest

from gitcompare.gateway.workspace import MemoryWorkspaceState
from gitcompare.models.base import GitBranch
from gitcompare.models.comparison import ComparisonMode, ComparisonTarget, RangeNotation
from gitcompare.nodes.comparison_store import (
    BRANCH_COMPARISONS_KEY,
    ComparisonStateStore,
    branch_identity,
)


@pytest.fixture
def workspace():
    return MemoryWorkspaceState()


@pytest.fixture
def store(workspace):
    return ComparisonStateStore(workspace)


def test_identity_distinguishes_current_branch():
    current = GitBranch(repo_path="/repo", name="main", current=True)
    other = GitBranch(repo_path="/repo", name="main", current=False)

    assert branch_identity(current) == "/repo|heads/main+current"
    assert branch_identity(other) == "/repo|heads/main"
    assert branch_identity(current) != branch_identity(other)


def test_identity_distinguishes_remote_branches():
    local = GitBranch(repo_path="/repo", name="origin/main")
    remote = GitBranch(repo_path="/repo", name="origin/main", remote=True)

    assert branch_identity(local) != branch_identity(remote)


def test_load_missing_entry(store):
    assert store.load("/repo|heads/main", ComparisonMode.BRANCH) is None


def test_load_legacy_string_entry():
    workspace = MemoryWorkspaceState({BRANCH_COMPARISONS_KEY: {"/repo|heads/feature": "main"}})
    store = ComparisonStateStore(workspace)

    target = store.load("/repo|heads/feature", ComparisonMode.WORKING)

    assert target == ComparisonTarget(ref="main", notation=None, mode=ComparisonMode.WORKING)


def test_load_ignores_unreadable_entry():
    workspace = MemoryWorkspaceState({BRANCH_COMPARISONS_KEY: {"/repo|heads/feature": {"ref": 3}}})
    store = ComparisonStateStore(workspace)

    assert store.load("/repo|heads/feature", ComparisonMode.BRANCH) is None


def test_load_entry_without_mode_uses_default():
    workspace = MemoryWorkspaceState(
        {BRANCH_COMPARISONS_KEY: {"/repo|heads/feature": {"ref": "main", "notation": None}}}
    )
    store = ComparisonStateStore(workspace)

    target = store.load("/repo|heads/feature", ComparisonMode.WORKING)

    assert target == ComparisonTarget(ref="main", notation=None, mode=ComparisonMode.WORKING)


@pytest.mark.asyncio
async def test_save_and_load(store, workspace):
    target = ComparisonTarget(ref="v1.0.0", notation=RangeNotation.THREE_DOT, mode=ComparisonMode.TAG)

    await store.save("/repo|heads/feature", target)

    assert workspace.get(BRANCH_COMPARISONS_KEY) == {
        "/repo|heads/feature": {"ref": "v1.0.0", "notation": "...", "type": "tag"}
    }
    assert store.load("/repo|heads/feature", ComparisonMode.BRANCH) == target


@pytest.mark.asyncio
async def test_save_none_removes_only_that_entry(store, workspace):
    await store.save("a", ComparisonTarget(ref="main", mode=ComparisonMode.BRANCH))
    await store.save("b", ComparisonTarget(ref="develop", mode=ComparisonMode.BRANCH))

    await store.save("a", None)

    assert list(workspace.get(BRANCH_COMPARISONS_KEY)) == ["b"]
    assert store.load("a", ComparisonMode.BRANCH) is None


@pytest.mark.asyncio
async def test_stores_sharing_workspace_keep_each_others_entries(workspace):
    first = ComparisonStateStore(workspace)
    second = ComparisonStateStore(workspace)

    await asyncio.gather(
        first.save("a", ComparisonTarget(ref="main", mode=ComparisonMode.BRANCH)),
        second.save("b", ComparisonTarget(ref="develop", mode=ComparisonMode.WORKING)),
    )

    assert first.load("b", ComparisonMode.BRANCH).ref == "develop"
    assert second.load("a", ComparisonMode.BRANCH).ref == "main"


@pytest.mark.asyncio
async def test_same_entry_last_writer_wins(workspace):
    first = ComparisonStateStore(workspace)
    second = ComparisonStateStore(workspace)

    await asyncio.gather(
        first.save("a", ComparisonTarget(ref="main", mode=ComparisonMode.BRANCH)),
        second.save("a", ComparisonTarget(ref="develop", mode=ComparisonMode.BRANCH)),
    )

    assert first.load("a", ComparisonMode.BRANCH).ref == "develop"


@pytest.mark.asyncio
async def test_saved_entry_is_a_copy(store, workspace):
    await store.save("a", ComparisonTarget(ref="main", mode=ComparisonMode.BRANCH))

    comparisons = workspace.get(BRANCH_COMPARISONS_KEY)
    comparisons["a"]["ref"] = "changed"

    assert store.load("a", ComparisonMode.BRANCH).ref == "main"
