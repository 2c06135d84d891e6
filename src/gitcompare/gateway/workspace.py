"""Persisted workspace state shared by all comparison nodes."""

import asyncio
import copy
import sqlite3
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from diskcache import Cache as DiskCache
from diskcache import Timeout
from loguru import logger

from gitcompare.errors import PersistenceError


class WorkspaceState(ABC):
    """Key-value state that survives process restarts.

    Values are JSON-compatible structures. ``get`` always returns an
    independent copy, so callers may mutate what they read.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Get the value stored for key, or None if not found."""

    @abstractmethod
    async def update(self, key: str, value: Optional[Any]) -> None:
        """Store value for key; None removes the key."""


class MemoryWorkspaceState(WorkspaceState):
    """Process-local workspace state, mainly for tests."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self.writes = 0

    def get(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self._data.get(key))

    async def update(self, key: str, value: Optional[Any]) -> None:
        self.writes += 1
        if value is None:
            self._data.pop(key, None)
        else:
            self._data[key] = copy.deepcopy(value)


class DiskWorkspaceState(WorkspaceState):
    """Workspace state backed by diskcache (SQLite + files)."""

    def __init__(self, directory: str) -> None:
        self.directory = directory
        self.store = DiskCache(directory)

    def get(self, key: str) -> Optional[Any]:
        return self.store.get(key)

    async def update(self, key: str, value: Optional[Any]) -> None:
        await asyncio.to_thread(self._write, key, value)

    def _write(self, key: str, value: Optional[Any]) -> None:
        try:
            if value is None:
                self.store.delete(key)
            else:
                self.store.set(key, value)
        except (OSError, sqlite3.Error, Timeout) as e:
            raise PersistenceError(f"Unable to write {key} to {self.directory}") from e
        logger.debug(f"Persisted {key} to {self.directory}")

    def close(self) -> None:
        self.store.close()
