"""View refresh signal."""

from abc import ABC, abstractmethod
from typing import Any, List

from loguru import logger


class ViewNotifier(ABC):
    """One-way notification that a node's subtree changed."""

    @abstractmethod
    def trigger_node_change(self, node: Any) -> None:
        ...


class LoggingViewNotifier(ViewNotifier):
    def trigger_node_change(self, node: Any) -> None:
        logger.debug(f"Node changed: {getattr(node, 'id', node)}")


class RecordingViewNotifier(ViewNotifier):
    """Keeps every notified node, for tests."""

    def __init__(self) -> None:
        self.changed: List[Any] = []

    def trigger_node_change(self, node: Any) -> None:
        self.changed.append(node)
