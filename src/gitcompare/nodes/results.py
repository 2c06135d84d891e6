"""Child results exposed by a branch comparison node."""

from dataclasses import dataclass
from typing import Awaitable, Callable

from gitcompare.models.base import RangePair
from gitcompare.nodes.commits_query import CommitsQuery
from gitcompare.nodes.files_query import FileDiffResult

FilesQueryFn = Callable[[], Awaitable[FileDiffResult]]


@dataclass
class FilesComparison:
    """Files changed between ref1 and ref2; an empty ref2 is the working tree."""

    ref1: str
    ref2: str
    query: FilesQueryFn


@dataclass
class ResultsCommits:
    """Commits on one side of a comparison ("Behind" or "Ahead")."""

    id: str
    label: str
    direction: str  # 'behind', 'ahead'
    comparison: RangePair
    query: CommitsQuery
    files: FilesComparison
    description: str
    expand: bool = False


@dataclass
class ResultsFiles:
    """All files changed between the two sides of a comparison."""

    ref1: str
    ref2: str
    query: FilesQueryFn
    expand: bool = False

