"""Tests for persisted workspace state."""

import pytest

from gitcompare.errors import PersistenceError
from gitcompare.gateway.workspace import DiskWorkspaceState, MemoryWorkspaceState


@pytest.mark.asyncio
async def test_memory_state_returns_copies():
    state = MemoryWorkspaceState()
    value = {"a": {"ref": "main"}}

    await state.update("key", value)
    value["a"]["ref"] = "changed"
    read = state.get("key")
    read["a"]["ref"] = "other"

    assert state.get("key") == {"a": {"ref": "main"}}
    assert state.writes == 1


@pytest.mark.asyncio
async def test_memory_state_update_none_removes():
    state = MemoryWorkspaceState({"key": 1})

    await state.update("key", None)

    assert state.get("key") is None


@pytest.mark.asyncio
async def test_disk_state_survives_reopen(tmp_path):
    state = DiskWorkspaceState(str(tmp_path / "state"))
    await state.update("comparisons", {"a": {"ref": "main", "notation": None, "type": "branch"}})
    state.close()

    reopened = DiskWorkspaceState(str(tmp_path / "state"))
    try:
        assert reopened.get("comparisons") == {"a": {"ref": "main", "notation": None, "type": "branch"}}

        await reopened.update("comparisons", None)
        assert reopened.get("comparisons") is None
    finally:
        reopened.close()


class ReadOnlyCache:
    def get(self, key, default=None):
        return default

    def set(self, key, value):
        raise OSError("read-only file system")


@pytest.mark.asyncio
async def test_disk_state_write_failure(tmp_path):
    state = DiskWorkspaceState(str(tmp_path / "state"))
    cache, state.store = state.store, ReadOnlyCache()
    try:
        with pytest.raises(PersistenceError):
            await state.update("comparisons", {"a": "main"})
    finally:
        cache.close()
