"""gitcompare command line: compare a branch with another reference."""

import argparse
import asyncio
import os
import sys
from typing import List, Optional

from loguru import logger

from gitcompare.config import CompareConfig, load_config
from gitcompare.errors import GitCompareError
from gitcompare.gateway.abc import GitQueryService
from gitcompare.gateway.picker import StaticReferencePicker
from gitcompare.gateway.real import RealGitQueryService
from gitcompare.gateway.view import LoggingViewNotifier
from gitcompare.gateway.workspace import DiskWorkspaceState, WorkspaceState
from gitcompare.models.comparison import ComparisonMode
from gitcompare.nodes.compare_branch_node import CompareBranchNode
from gitcompare.nodes.comparison_store import ComparisonStateStore
from gitcompare.nodes.files_query import FileDiffResult
from gitcompare.nodes.results import ResultsCommits, ResultsFiles
from gitcompare.utils.strings import shorten_ref


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compare a branch with a branch, tag, or ref")
    parser.add_argument("--repo-path", type=str, help="Path to the Git repository", default=".")
    parser.add_argument("--branch", type=str, help="Branch to compare (default: current branch)")
    parser.add_argument("--working", action="store_true", help="Compare the working tree instead of the branch")
    parser.add_argument("--root", action="store_true", help="Treat the comparison as a root node")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    commands = parser.add_subparsers(dest="command", required=True)

    show = commands.add_parser("show", help="Show commits and files of the comparison")
    show.add_argument("--limit", type=int, help="Commits per page (default: GITCOMPARE_PAGE_SIZE)")
    show.add_argument("--pages", type=int, default=1, help="Number of commit pages to fetch")

    compare = commands.add_parser("compare", help="Set the reference to compare with")
    compare.add_argument("ref", type=str, help="Branch, tag, or ref; '' for the working tree")

    commands.add_parser("clear", help="Clear the comparison")

    mode = commands.add_parser("mode", help="Set the comparison mode")
    mode.add_argument("mode", choices=[m.value for m in ComparisonMode])

    return parser.parse_args(argv)


def format_files(result: FileDiffResult) -> str:
    lines = [result.label]
    for f in result.files or []:
        if f.original_file_name:
            lines.append(f"  {f.status} {f.original_file_name} -> {f.file_name}")
        else:
            lines.append(f"  {f.status} {f.file_name}")
    return "\n".join(lines)


async def show_comparison(node: CompareBranchNode, limit: Optional[int], pages: int) -> None:
    print(node.label)
    children = await node.get_children()
    if not children:
        print("  (no comparison set; use 'gitcompare compare <ref>')")
        return

    for child in children:
        if isinstance(child, ResultsCommits):
            print(f"\n{child.label} ({child.description}) [{child.query.range}]")
            result = await child.query(limit)
            for _ in range(pages - 1):
                if not result.has_more:
                    break
                await result.more(limit)
            for commit in result.entries:
                print(f"  {commit.hash[:8]} {commit.message.splitlines()[0] if commit.message else ''}")
            if result.has_more:
                print("  ...")
            print(f"\n{child.label} files {shorten_ref(child.files.ref1)}..{shorten_ref(child.files.ref2)}")
            print(format_files(await child.files.query()))
        elif isinstance(child, ResultsFiles):
            print(f"\nAll files {shorten_ref(child.ref1)}..{shorten_ref(child.ref2)}")
            print(format_files(await child.query()))


async def run_async(
    args: argparse.Namespace,
    config: CompareConfig,
    git: GitQueryService,
    workspace: WorkspaceState,
) -> CompareBranchNode:
    """Build the comparison node for the requested branch and run the command."""
    repo_path = os.path.abspath(args.repo_path)
    branch = await git.get_branch(repo_path, args.branch)
    if branch is None:
        raise GitCompareError(f"Branch not found: {args.branch}")

    picker = StaticReferencePicker(getattr(args, "ref", None))
    node = CompareBranchNode(
        git,
        ComparisonStateStore(workspace),
        picker,
        LoggingViewNotifier(),
        branch,
        ComparisonMode.WORKING if args.working else config.default_mode,
        root=args.root,
    )

    if args.command == "show":
        limit = args.limit if args.limit is not None else config.page_size
        await show_comparison(node, limit, max(args.pages, 1))
    elif args.command == "compare":
        await node.edit()
        print(node.label)
    elif args.command == "clear":
        await node.clear()
        print(node.label)
    elif args.command == "mode":
        await node.set_comparison_mode(ComparisonMode(args.mode))
        print(node.label)

    return node


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = load_config()

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else config.log_level)

    config.state_dir.mkdir(parents=True, exist_ok=True)
    workspace = DiskWorkspaceState(str(config.state_dir))
    try:
        asyncio.run(run_async(args, config, RealGitQueryService(), workspace))
    except GitCompareError as e:
        logger.error(f"{e}")
        return 1
    finally:
        workspace.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
