"""Index mutation utilities.

Contains:
- apply_patch_to_index: Apply a unified diff fragment to the index only
- add_paths: Stage whole paths
- reset_paths: Unstage paths
- commit_with_message: Create a commit from the index
"""

from pathlib import Path
from typing import Optional

from committy.git.runner import _run_git_command


def apply_patch_to_index(patch: str, cwd: Optional[Path] = None) -> None:
    """Apply a single patch fragment to the index, leaving the worktree alone.

    The patch is applied with zero fuzz: git refuses it unless every line it
    touches matches the index exactly. ``--unidiff-zero`` is required because
    the fragments come from a ``-U0`` diff and carry no context lines.

    Raises:
        RepositoryCommandError: If git rejects the patch.
    """
    _run_git_command(
        ["apply", "--cached", "--unidiff-zero", "--whitespace=nowarn", "-"],
        input_text=patch,
        cwd=cwd,
    )


def add_paths(paths: list[str], cwd: Optional[Path] = None) -> None:
    """Stage the full contents of the given paths."""
    if not paths:
        return
    _run_git_command(["add", "--"] + paths, cwd=cwd)


def reset_paths(paths: list[str], cwd: Optional[Path] = None) -> None:
    """Remove the given paths from the index, keeping worktree changes."""
    if not paths:
        return
    _run_git_command(["reset", "--quiet", "--"] + paths, cwd=cwd)


def commit_with_message(message: str, cwd: Optional[Path] = None) -> str:
    """Commit the index with the given message.

    The message is passed on stdin so multi-line bodies survive intact.

    Returns:
        The output git printed for the new commit.
    """
    return _run_git_command(["commit", "--file", "-"], input_text=message, cwd=cwd)
