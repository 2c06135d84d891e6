"""Base types used across the gitcompare system."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from git.objects.commit import Commit
from pydantic import BaseModel, Field


class CommitInfo(BaseModel):
    """Structured representation of a Git commit."""

    hash: str = Field(..., description="The commit hash")
    message: str = Field(..., description="The commit message")
    author: str = Field(..., description="The commit author's name")
    date: datetime = Field(..., description="The commit timestamp")

    @classmethod
    def from_git_commit(cls, commit: Commit) -> "CommitInfo":
        """Create a CommitInfo instance from a GitPython Commit object."""
        return cls(
            hash=commit.hexsha,
            message=commit.message.strip(),
            author=commit.author.name,
            date=datetime.fromtimestamp(commit.authored_date),
        )


@dataclass
class FileStatus:
    """File-level status of a single path in a diff."""

    file_name: str
    status: str  # 'A', 'M', 'D', 'R', 'C', 'T', 'U'
    original_file_name: Optional[str] = None


@dataclass(frozen=True)
class GitBranch:
    """A local or remote branch of a repository."""

    repo_path: str
    name: str
    current: bool = False
    remote: bool = False
    sha: Optional[str] = None

    @property
    def ref(self) -> str:
        return self.name

    @property
    def id(self) -> str:
        """Stable identifier, independent of process lifetime."""
        return f"{self.repo_path}|{'remotes' if self.remote else 'heads'}/{self.name}"


@dataclass(frozen=True)
class AheadBehind:
    """Commit counts on either side of a symmetric difference."""

    ahead: int
    behind: int


@dataclass(frozen=True)
class RangePair:
    """Directional pair of references."""

    ref1: str
    ref2: str


@dataclass(frozen=True)
class LogCursor:
    """Continuation point of a paged log query."""

    ref: str
    skip: int


@dataclass
class GitLog:
    """One page of commits returned by the git query service."""

    entries: List[CommitInfo] = field(default_factory=list)
    has_more: bool = False
    cursor: Optional[LogCursor] = None
