"""Shared fixtures: commit factories and a diverged test repository."""

from datetime import datetime, timedelta
from pathlib import Path
from types import SimpleNamespace
from typing import List

import pytest
from git import Repo

from gitcompare.models.base import CommitInfo


def build_commits(prefix: str, count: int) -> List[CommitInfo]:
    """Build ``count`` commits, newest first."""
    start = datetime(2024, 1, 1)
    return [
        CommitInfo(
            hash=f"{prefix}{i}".ljust(40, "0"),
            message=f"{prefix} commit {i}",
            author="Test Author",
            date=start - timedelta(hours=i),
        )
        for i in range(count)
    ]


@pytest.fixture
def make_commits():
    return build_commits


def create_commit(repo: Repo, name: str, content: str, message: str):
    """Helper function to create a commit in the test repository."""
    (Path(repo.working_dir) / name).write_text(content)
    repo.index.add([name])
    return repo.index.commit(message)


@pytest.fixture
def commit_file():
    return create_commit


@pytest.fixture
def diverged_repo(tmp_path):
    """Repository where ``feature`` is 2 commits ahead of and 1 behind the default branch.

    ``feature`` is checked out.
    """
    repo_path = tmp_path / "test_repo"
    repo_path.mkdir()
    repo = Repo.init(repo_path)

    initial = create_commit(repo, "base.txt", "base", "Initial commit")
    default = repo.active_branch.name
    repo.create_head("feature")
    main_commit = create_commit(repo, "main.txt", "main", "Add main file")

    repo.git.checkout("feature")
    first = create_commit(repo, "feature.txt", "one", "Add feature file")
    second = create_commit(repo, "feature.txt", "two", "Update feature file")

    return SimpleNamespace(
        path=str(repo_path),
        repo=repo,
        default=default,
        initial=initial.hexsha,
        main=main_commit.hexsha,
        feature=[second.hexsha, first.hexsha],
    )
