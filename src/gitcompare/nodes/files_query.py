"""Changed-file sets for full, ahead and behind comparisons."""

from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from gitcompare.gateway.abc import GitQueryService
from gitcompare.models.base import FileStatus
from gitcompare.models.comparison import RangeNotation
from gitcompare.nodes.range_resolver import create_range
from gitcompare.utils.strings import files_changed_label


@dataclass
class FileDiffResult:
    """Changed files and their label.

    ``files`` is None when git reported nothing, which is not the same as an
    empty list.
    """

    label: str
    files: Optional[List[FileStatus]]

    @classmethod
    def from_files(cls, files: Optional[List[FileStatus]]) -> "FileDiffResult":
        return cls(label=files_changed_label(len(files or [])), files=files)


def overlay_working_files(
    files: Optional[List[FileStatus]], working_files: Optional[List[FileStatus]]
) -> Optional[List[FileStatus]]:
    """Merge working tree changes over historical ones.

    A working tree entry replaces the historical entry with the same file
    name, in place; otherwise it is appended.
    """
    if working_files is None:
        return files
    if files is None:
        return list(working_files)

    merged = list(files)
    for working_file in working_files:
        index = next((i for i, f in enumerate(merged) if f.file_name == working_file.file_name), None)
        if index is not None:
            merged[index] = working_file
        else:
            merged.append(working_file)
    return merged


class FileDiffQuery:
    """File-level diffs between a base branch and its compare-with target."""

    def __init__(
        self,
        git: GitQueryService,
        repo_path: str,
        base_ref: str,
        compare_with_ref: str,
        working_tree: bool = False,
    ) -> None:
        self.git = git
        self.repo_path = repo_path
        self.base_ref = base_ref
        self.compare_with_ref = compare_with_ref
        self.working_tree = working_tree

    def full_expression(self) -> str:
        if self.compare_with_ref == "":
            return self.base_ref
        if self.working_tree:
            return self.compare_with_ref
        return create_range(self.compare_with_ref, self.base_ref, RangeNotation.THREE_DOT)

    async def full(self) -> FileDiffResult:
        files = await self.git.get_diff_status(self.repo_path, self.full_expression())
        return FileDiffResult.from_files(files)

    async def ahead(self) -> FileDiffResult:
        files = await self.git.get_diff_status(
            self.repo_path,
            create_range(self.compare_with_ref or "HEAD", self.base_ref or "HEAD", RangeNotation.THREE_DOT),
        )

        if self.working_tree:
            working_files = await self.git.get_diff_status(self.repo_path, "HEAD")
            logger.debug(f"Overlaying {len(working_files or [])} working tree changes")
            files = overlay_working_files(files, working_files)

        return FileDiffResult.from_files(files)

    async def behind(self) -> FileDiffResult:
        files = await self.git.get_diff_status(
            self.repo_path,
            create_range(self.base_ref, self.compare_with_ref or "HEAD", RangeNotation.THREE_DOT),
        )
        return FileDiffResult.from_files(files)
