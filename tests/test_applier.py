"""Tests for committy.changes.applier module."""

from unittest.mock import MagicMock

import pytest

from committy.changes import (
    ChangeItem,
    ChangeKind,
    HunkRange,
    StageMethod,
    StagingLedger,
    collect_unstaged_changes,
    stage_items,
    unstage_files,
)
from committy.git import GitRepository, RepositoryCommandError


def _hunk_item(item_id: str, file: str, patch: str = "patch") -> ChangeItem:
    return ChangeItem(id=item_id, file=file, kind=ChangeKind.HUNK, preview="", patch=patch)


def _file_item(item_id: str, file: str) -> ChangeItem:
    return ChangeItem(id=item_id, file=file, kind=ChangeKind.FILE, preview="")


@pytest.fixture
def mock_repo():
    """GitRepository double with every method mocked."""
    return MagicMock(spec=GitRepository)


ORIGINAL_NUMBERS = [f"line {n}\n" for n in range(1, 11)]


@pytest.fixture
def shrink_then_insert(temp_repo):
    """numbers.txt with lines 2-4 deleted and "C" inserted after line 8.

    Yields two hunks: a deletion that moves every later line up by three,
    then a pure insertion below it.
    """
    worktree = ORIGINAL_NUMBERS[:1] + ORIGINAL_NUMBERS[4:8] + ["C\n"] + ORIGINAL_NUMBERS[8:]
    (temp_repo / "numbers.txt").write_text("".join(worktree))
    return "".join(worktree)


class TestStageItems:
    """Tests for stage_items function."""

    def test_stages_hunks_individually(self, repo, temp_repo):
        """Test that each hunk is applied on its own."""
        lines = [f"line {n}\n" for n in range(1, 11)]
        lines[1] = "line two\n"
        lines[7] = "line eight\n"
        (temp_repo / "numbers.txt").write_text("".join(lines))
        items = collect_unstaged_changes(repo)

        results = stage_items(repo, items)

        assert [result.method for result in results] == [StageMethod.PATCH, StageMethod.PATCH]
        assert repo.unstaged_diff() == ""

    def test_stages_only_the_given_hunk(self, repo, temp_repo):
        """Test that hunks outside the batch stay unstaged."""
        lines = [f"line {n}\n" for n in range(1, 11)]
        lines[1] = "line two\n"
        lines[7] = "line eight\n"
        (temp_repo / "numbers.txt").write_text("".join(lines))
        items = collect_unstaged_changes(repo)

        stage_items(repo, items[1:])

        assert "+line eight" in repo.staged_diff()
        assert "+line two" in repo.unstaged_diff()

    def test_bad_patch_falls_back_to_whole_file(self, repo, temp_repo):
        """Test that a rejected hunk stages its whole file without raising."""
        (temp_repo / "README.md").write_text("# Changed\n")
        stale_patch = (
            "diff --git a/README.md b/README.md\n"
            "--- a/README.md\n"
            "+++ b/README.md\n"
            "@@ -1 +1 @@\n"
            "-# Something else entirely\n"
            "+# Changed\n"
        )

        results = stage_items(repo, [_hunk_item("h-1", "README.md", stale_patch)])

        assert results[0].method == StageMethod.FILE_FALLBACK
        assert results[0].staged
        assert results[0].error
        assert repo.staged_files() == ["README.md"]
        assert repo.unstaged_diff() == ""

    def test_untracked_file_staged_whole(self, repo, temp_repo):
        """Test that file items are added in full."""
        (temp_repo / "new.txt").write_text("new\n")

        results = stage_items(repo, [_file_item("u-1", "new.txt")])

        assert results[0].method == StageMethod.WHOLE_FILE
        assert repo.staged_files() == ["new.txt"]

    def test_later_insertion_staged_alone_lands_in_place(self, repo, temp_repo, git, shrink_then_insert):
        """Test that an insertion below a deletion is staged after its own line."""
        items = collect_unstaged_changes(repo)
        assert len(items) == 2

        results = stage_items(repo, items[1:])

        assert results[0].method == StageMethod.PATCH
        assert git(temp_repo, "show", ":numbers.txt") == "".join(
            ORIGINAL_NUMBERS[:8] + ["C\n"] + ORIGINAL_NUMBERS[8:]
        )

    def test_hunk_after_line_count_change_in_same_batch(self, repo, temp_repo, git, shrink_then_insert):
        """Test that a later hunk is shifted by an earlier hunk of the same file."""
        items = collect_unstaged_changes(repo)

        results = stage_items(repo, items)

        assert [result.method for result in results] == [StageMethod.PATCH, StageMethod.PATCH]
        assert git(temp_repo, "show", ":numbers.txt") == shrink_then_insert
        assert repo.unstaged_diff() == ""

    def test_hunks_staged_bottom_up(self, repo, temp_repo, git, shrink_then_insert):
        """Test that staging the lower hunk first does not move the upper one."""
        items = collect_unstaged_changes(repo)

        results = stage_items(repo, [items[1], items[0]])

        assert [result.method for result in results] == [StageMethod.PATCH, StageMethod.PATCH]
        assert git(temp_repo, "show", ":numbers.txt") == shrink_then_insert

    def test_ledger_carries_offsets_across_batches(self, repo, temp_repo, git, shrink_then_insert):
        """Test that a shared ledger shifts hunks staged by a later batch."""
        items = collect_unstaged_changes(repo)
        ledger = StagingLedger()

        stage_items(repo, items[:1], ledger)
        results = stage_items(repo, items[1:], ledger)

        assert results[0].method == StageMethod.PATCH
        assert git(temp_repo, "show", ":numbers.txt") == shrink_then_insert

    def test_growing_hunk_shifts_later_change(self, repo, temp_repo, git):
        """Test that an insertion above a modification moves it down."""
        worktree = ORIGINAL_NUMBERS[:1] + ["A\n", "B\n"] + ORIGINAL_NUMBERS[1:8]
        worktree += ["line nine\n", "line 10\n"]
        (temp_repo / "numbers.txt").write_text("".join(worktree))
        items = collect_unstaged_changes(repo)
        assert len(items) == 2

        ledger = StagingLedger()
        stage_items(repo, items[:1], ledger)
        stage_items(repo, items[1:], ledger)

        assert git(temp_repo, "show", ":numbers.txt") == "".join(worktree)

    def test_file_staged_earlier_in_pass_is_not_reapplied(self, mock_repo):
        """Test that a whole-file stage from an earlier batch covers later hunks."""
        ledger = StagingLedger()
        ledger.record_file("a.py")

        results = stage_items(mock_repo, [_hunk_item("h-1", "a.py")], ledger)

        assert results[0].method == StageMethod.ALREADY_STAGED
        assert results[0].staged
        mock_repo.apply_to_index.assert_not_called()
        mock_repo.add.assert_not_called()

    def test_later_hunks_of_fallback_file_skip_apply(self, mock_repo):
        """Test that hunks of a file already staged whole are not re-applied."""
        mock_repo.apply_to_index.side_effect = RepositoryCommandError(["git", "apply"], "no match")

        results = stage_items(
            mock_repo,
            [_hunk_item("h-1", "a.py"), _hunk_item("h-2", "a.py")],
        )

        assert [result.method for result in results] == [
            StageMethod.FILE_FALLBACK,
            StageMethod.ALREADY_STAGED,
        ]
        mock_repo.apply_to_index.assert_called_once()
        mock_repo.add.assert_called_once_with(["a.py"])

    def test_failed_fallback_does_not_raise(self, mock_repo):
        """Test that a failing whole-file fallback is reported, not raised."""
        mock_repo.apply_to_index.side_effect = RepositoryCommandError(["git", "apply"], "no match")
        mock_repo.add.side_effect = [RepositoryCommandError(["git", "add"], "locked"), None]

        results = stage_items(
            mock_repo,
            [_hunk_item("h-1", "a.py"), _hunk_item("h-2", "b.py")],
        )

        assert results[0].method == StageMethod.FAILED
        assert not results[0].staged
        assert "locked" in results[0].error
        assert results[1].method == StageMethod.FILE_FALLBACK

    def test_untracked_add_failure_propagates(self, mock_repo):
        """Test that a failure to add an untracked file is raised."""
        mock_repo.add.side_effect = RepositoryCommandError(["git", "add"], "denied")

        with pytest.raises(RepositoryCommandError):
            stage_items(mock_repo, [_file_item("u-1", "new.txt")])

    def test_empty_batch(self, mock_repo):
        """Test that an empty batch touches nothing."""
        assert stage_items(mock_repo, []) == []
        mock_repo.apply_to_index.assert_not_called()
        mock_repo.add.assert_not_called()


class TestStagingLedger:
    """Tests for StagingLedger offsets."""

    def test_offset_counts_hunks_above_only(self):
        """Test that only applied hunks above the target in the same file count."""
        ledger = StagingLedger()
        ledger.record_hunk("a.txt", HunkRange.from_header("@@ -2,3 +1,0 @@"))
        ledger.record_hunk("a.txt", HunkRange.from_header("@@ -20,0 +18,5 @@"))
        ledger.record_hunk("b.txt", HunkRange.from_header("@@ -1,0 +1,4 @@"))

        assert ledger.offset_for("a.txt", HunkRange.from_header("@@ -8,0 +6 @@")) == -3
        assert ledger.offset_for("a.txt", HunkRange.from_header("@@ -30 +32 @@")) == 2
        assert ledger.offset_for("a.txt", HunkRange.from_header("@@ -1 +1 @@")) == 0
        assert ledger.offset_for("c.txt", HunkRange.from_header("@@ -5 +5 @@")) == 0

    def test_insertion_after_line_is_above_next_line(self):
        """Test that an insertion after line n shifts a change at line n + 1."""
        ledger = StagingLedger()
        ledger.record_hunk("a.txt", HunkRange.from_header("@@ -4,0 +5,2 @@"))

        assert ledger.offset_for("a.txt", HunkRange.from_header("@@ -5 +7 @@")) == 2
        assert ledger.offset_for("a.txt", HunkRange.from_header("@@ -4 +4 @@")) == 0


class TestUnstageFiles:
    """Tests for unstage_files function."""

    def test_empty_list_is_noop(self, mock_repo):
        """Test that nothing happens for an empty list."""
        unstage_files(mock_repo, [])

        mock_repo.reset.assert_not_called()

    def test_deduplicates_paths(self, mock_repo):
        """Test that repeated paths are passed once, in order."""
        unstage_files(mock_repo, ["a.py", "b.py", "a.py"])

        mock_repo.reset.assert_called_once_with(["a.py", "b.py"])

    def test_keeps_worktree_changes(self, repo, temp_repo):
        """Test that unstaging leaves the working tree as it was."""
        (temp_repo / "README.md").write_text("# Changed\n")
        repo.add(["README.md"])

        unstage_files(repo, ["README.md"])

        assert repo.staged_files() == []
        assert (temp_repo / "README.md").read_text() == "# Changed\n"
