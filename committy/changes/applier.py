"""Index staging for committy change items.

Contains:
- StageMethod / StageResult: How each item ended up in the index
- StagingLedger: What one collection pass has put into the index so far
- stage_items: Stage a batch of items, hunk by hunk with whole-file fallback
- unstage_files: Remove paths from the index (rollback)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import typer

from committy.changes.collector import replace_hunk_header
from committy.changes.models import ChangeItem, ChangeKind, HunkRange
from committy.git.exceptions import RepositoryCommandError
from committy.git.repository import GitRepository


class StageMethod(str, Enum):
    """Which path staged an item."""

    PATCH = "patch"  # hunk applied on its own
    WHOLE_FILE = "whole_file"  # untracked file, always staged whole
    FILE_FALLBACK = "file_fallback"  # hunk rejected, whole file staged instead
    FAILED = "failed"  # hunk rejected and the whole file could not be staged
    ALREADY_STAGED = "already_staged"  # file staged whole earlier in the pass


@dataclass
class StageResult:
    """Outcome of staging one item."""

    item: ChangeItem
    method: StageMethod
    error: Optional[str] = None

    @property
    def staged(self) -> bool:
        return self.method != StageMethod.FAILED


@dataclass
class StagingLedger:
    """Index changes made from the items of one collection pass.

    Hunk coordinates are relative to the index the pass was collected
    against. Once some hunks of a file are applied, later hunks below them
    move by their net line change; the ledger supplies that offset.
    """

    applied: dict[str, list[HunkRange]] = field(default_factory=dict)
    whole_files: set[str] = field(default_factory=set)

    def offset_for(self, path: str, hunk: HunkRange) -> int:
        """Net line change of applied hunks of `path` lying above `hunk`."""
        return sum(
            done.delta for done in self.applied.get(path, []) if done.position < hunk.position
        )

    def record_hunk(self, path: str, hunk: HunkRange) -> None:
        self.applied.setdefault(path, []).append(hunk)

    def record_file(self, path: str) -> None:
        self.whole_files.add(path)


def _rebased_patch(item: ChangeItem, ledger: StagingLedger) -> str:
    """The item's patch, moved past hunks already applied to its file."""
    if item.hunk is None:
        return item.patch
    offset = ledger.offset_for(item.file, item.hunk)
    if offset == 0:
        return item.patch
    return replace_hunk_header(item.patch, item.hunk.isolated(offset).header())


def _stage_hunk(repo: GitRepository, item: ChangeItem, ledger: StagingLedger) -> StageResult:
    """Apply one hunk to the index, staging its whole file if git refuses it.

    Never raises: a rejected patch and a failed fallback are both reported
    in the returned StageResult.
    """
    if item.file in ledger.whole_files:
        # An earlier fallback in this pass already staged this hunk
        return StageResult(item, StageMethod.ALREADY_STAGED)

    patch_error = "item has no patch"
    if item.patch:
        try:
            repo.apply_to_index(_rebased_patch(item, ledger))
            if item.hunk is not None:
                ledger.record_hunk(item.file, item.hunk)
            return StageResult(item, StageMethod.PATCH)
        except RepositoryCommandError as e:
            patch_error = e.output or str(e)

    typer.echo(f"Warning: Patch apply failed for {item.file}, adding file fully.", err=True)
    try:
        repo.add([item.file])
    except RepositoryCommandError as e:
        typer.echo(f"Warning: Could not stage {item.file}: {e.output or e}", err=True)
        return StageResult(item, StageMethod.FAILED, error=str(e))

    ledger.record_file(item.file)
    return StageResult(item, StageMethod.FILE_FALLBACK, error=patch_error)


def stage_items(
    repo: GitRepository,
    items: list[ChangeItem],
    ledger: Optional[StagingLedger] = None,
) -> list[StageResult]:
    """Stage the given items in order. Only the index is modified.

    File items are staged whole. Hunk items are applied individually with
    zero fuzz, each shifted by the line changes of hunks of the same file
    already applied above it. When git rejects a hunk (stale after later
    edits, or overlapping another change) the whole file is staged instead
    and the batch carries on. Items staged earlier in the batch stay staged
    whatever happens later.

    Args:
        repo: Repository to stage into.
        items: Items to stage, in order.
        ledger: Index changes already made from the same collection pass.
            Updated in place; a fresh one is used when omitted.

    Returns:
        One StageResult per item, in input order.

    Raises:
        RepositoryCommandError: If staging an untracked file fails.
    """
    if ledger is None:
        ledger = StagingLedger()
    results: list[StageResult] = []

    for item in items:
        if item.kind == ChangeKind.FILE:
            repo.add([item.file])
            ledger.record_file(item.file)
            results.append(StageResult(item, StageMethod.WHOLE_FILE))
        else:
            results.append(_stage_hunk(repo, item, ledger))

    return results


def unstage_files(repo: GitRepository, files: list[str]) -> None:
    """Unstage the given paths, keeping their working tree changes.

    An empty list is a no-op. Duplicate paths are passed once.

    Raises:
        RepositoryCommandError: If git refuses the reset.
    """
    unique_files = list(dict.fromkeys(files))
    if not unique_files:
        return
    repo.reset(unique_files)
