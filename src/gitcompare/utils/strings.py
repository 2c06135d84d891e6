"""Small text helpers for labels and descriptions."""

import re
from typing import Optional

_SHA_PATTERN = re.compile(r"^[0-9a-f]{40}$")


def pluralize(word: str, count: int, zero: Optional[str] = None) -> str:
    """Format ``count`` with ``word``, e.g. ``"1 file"``, ``"3 files"``.

    ``zero`` replaces the number when the count is 0 (``"No files"``).
    """
    number = zero if count == 0 and zero is not None else str(count)
    return f"{number} {word}{'' if count == 1 else 's'}"


def files_changed_label(count: int) -> str:
    return f"{pluralize('file', count, zero='No')} changed"


def shorten_ref(ref: Optional[str], working: str = "Working Tree") -> str:
    """Shorten a reference for display.

    Full shas become 7 characters; an empty reference is the working tree.
    """
    if not ref:
        return working
    if _SHA_PATTERN.match(ref):
        return ref[:7]
    return ref
