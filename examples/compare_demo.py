#!/usr/bin/env python3
"""
examples/compare_demo.py

Demonstrates a branch comparison on a local repository: compares the current
branch with a reference and prints the commits behind and ahead, paging
through them, and the files changed. State is kept in memory only.
"""

import argparse
import asyncio
import os
import sys

from gitcompare.gateway.picker import StaticReferencePicker
from gitcompare.gateway.real import RealGitQueryService
from gitcompare.gateway.view import RecordingViewNotifier
from gitcompare.gateway.workspace import MemoryWorkspaceState
from gitcompare.models.comparison import ComparisonMode
from gitcompare.nodes.compare_branch_node import CompareBranchNode
from gitcompare.nodes.comparison_store import ComparisonStateStore
from gitcompare.nodes.results import ResultsCommits


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Demonstrate gitcompare's branch comparison")
    parser.add_argument(
        "--repo-path",
        type=str,
        default=os.getcwd(),
        help="Path to Git repository (default: current directory)",
    )
    parser.add_argument(
        "--compare-with",
        type=str,
        default="main",
        help="Reference to compare the current branch with (default: main)",
    )
    parser.add_argument("--page-size", type=int, default=5, help="Commits per page")
    return parser.parse_args()


def format_commit(commit) -> str:
    """Format a single commit's information for display."""
    return f"  {commit.hash[:8]} {commit.date.strftime('%Y-%m-%d')} {commit.author}: {commit.message.splitlines()[0]}"


async def run(args) -> None:
    git = RealGitQueryService()
    branch = await git.get_branch(os.path.abspath(args.repo_path))
    node = CompareBranchNode(
        git,
        ComparisonStateStore(MemoryWorkspaceState()),
        StaticReferencePicker(args.compare_with),
        RecordingViewNotifier(),
        branch,
        ComparisonMode.BRANCH,
    )
    await node.edit()
    print(node.label)

    for child in await node.get_children():
        if isinstance(child, ResultsCommits):
            print(f"\n{child.label}: {child.description}")
            result = await child.query(args.page_size)
            for commit in result.entries:
                print(format_commit(commit))
            if result.has_more:
                await result.more(args.page_size)
                print(f"  ... {len(result.entries)} commits after fetching another page")
        else:
            files = await child.query()
            print(f"\n{files.label}")
            for f in files.files or []:
                print(f"  {f.status} {f.file_name}")


def main():
    """Run the comparison demo."""
    args = parse_args()
    print(f"Comparing current branch of {args.repo_path} with {args.compare_with}")

    try:
        asyncio.run(run(args))
    except Exception as e:
        print(f"Error running comparison: {str(e)}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
