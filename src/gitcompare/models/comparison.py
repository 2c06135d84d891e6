"""Comparison target types and their persisted representation."""

from enum import Enum
from typing import Any, Dict, Optional, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ComparisonMode(str, Enum):
    """Default comparison semantics of a branch node."""

    WORKING = "working"
    BRANCH = "branch"
    TAG = "tag"


class RangeNotation(str, Enum):
    """Revision range notations understood by git."""

    TWO_DOT = ".."
    THREE_DOT = "..."


class ComparisonTarget(BaseModel):
    """The reference a branch is compared against.

    An empty ``ref`` means the working tree, whatever the mode.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    ref: str
    notation: Optional[RangeNotation] = None
    mode: ComparisonMode = Field(..., alias="type")

    @property
    def is_working_tree(self) -> bool:
        return self.ref == ""

    def with_mode(self, mode: ComparisonMode) -> "ComparisonTarget":
        return self.model_copy(update={"mode": mode})

    def to_stored(self) -> Dict[str, Any]:
        """Serialize to the mapping kept in workspace state."""
        return self.model_dump(mode="json", by_alias=True)


# Older releases stored the bare reference string.
StoredComparison = Union[str, Dict[str, Any]]
StoredComparisons = Dict[str, StoredComparison]


def parse_stored_comparison(
    value: Optional[StoredComparison], default_mode: ComparisonMode
) -> Optional[ComparisonTarget]:
    """Normalize a persisted entry into a ComparisonTarget."""
    if value is None:
        return None

    if isinstance(value, str):
        return ComparisonTarget(ref=value, notation=None, mode=default_mode)

    if isinstance(value, dict) and "type" not in value and "mode" not in value:
        value = {**value, "type": default_mode.value}

    try:
        return ComparisonTarget.model_validate(value)
    except ValidationError as e:
        logger.warning(f"Ignoring unreadable stored comparison {value!r}: {e}")
        return None
