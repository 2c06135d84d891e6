"""Tests for label helpers."""

import pytest

from gitcompare.utils.strings import files_changed_label, pluralize, shorten_ref


@pytest.mark.parametrize(
    "count, expected",
    [(0, "No files changed"), (1, "1 file changed"), (3, "3 files changed")],
)
def test_files_changed_label(count, expected):
    assert files_changed_label(count) == expected


def test_pluralize_without_zero_word():
    assert pluralize("commit", 0) == "0 commits"
    assert pluralize("commit", 1) == "1 commit"
    assert pluralize("commit", 12) == "12 commits"


def test_shorten_ref():
    assert shorten_ref("") == "Working Tree"
    assert shorten_ref(None) == "Working Tree"
    assert shorten_ref("a" * 40) == "aaaaaaa"
    assert shorten_ref("origin/main") == "origin/main"
