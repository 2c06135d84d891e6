"""Reference selection collaborator."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional, Union


@dataclass(frozen=True)
class ReferencePick:
    """A reference chosen by the user."""

    ref: str
    name: Optional[str] = None


@dataclass(frozen=True)
class PickCancelled:
    """The user backed out of the picker through a command item."""

    reason: str = "cancelled"


@dataclass
class PickerOptions:
    """Options passed to a reference picker."""

    allow_entering_refs: bool = True
    picked: Optional[str] = None
    sort: Dict[str, Dict[str, bool]] = field(default_factory=dict)


PickResult = Union[ReferencePick, PickCancelled, None]


class ReferencePicker(ABC):
    """Lets the user choose a branch, tag or ref to compare with."""

    @abstractmethod
    async def show(
        self, repo_path: str, title: str, placeholder: str, options: PickerOptions
    ) -> PickResult:
        """Show the picker and return the pick, a cancellation, or None if dismissed."""


class StaticReferencePicker(ReferencePicker):
    """Picker that answers with a predetermined reference.

    Used by the command line and by scripted callers, where the reference
    comes from arguments rather than an interactive prompt.
    """

    def __init__(self, ref: Optional[str]) -> None:
        self.ref = ref
        self.shown: list = []

    async def show(
        self, repo_path: str, title: str, placeholder: str, options: PickerOptions
    ) -> PickResult:
        self.shown.append((repo_path, title, placeholder, options))
        if self.ref is None:
            return None
        return ReferencePick(ref=self.ref)
