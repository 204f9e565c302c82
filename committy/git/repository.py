"""Repository facade used by the staging workflow.

Bundles the git command helpers behind one object bound to a working
directory, so the collector, the patch applier and the workflow can be
handed a fake in tests.
"""

from pathlib import Path
from typing import Optional

from committy.git.diff import get_staged_diff, get_unstaged_diff
from committy.git.index import (
    add_paths,
    apply_patch_to_index,
    commit_with_message,
    reset_paths,
)
from committy.git.status import get_staged_files_list, list_untracked_files


class GitRepository:
    """Git operations for a single working tree.

    Every method is a blocking call to git. Failures surface as
    RepositoryCommandError carrying the command and git's diagnostics.
    """

    def __init__(self, root: Optional[Path] = None):
        self.root = root

    def list_untracked(self) -> list[str]:
        return list_untracked_files(cwd=self.root)

    def unstaged_diff(self) -> str:
        return get_unstaged_diff(cwd=self.root)

    def staged_diff(self) -> str:
        return get_staged_diff(cwd=self.root)

    def staged_files(self) -> list[str]:
        return get_staged_files_list(cwd=self.root)

    def apply_to_index(self, patch: str) -> None:
        apply_patch_to_index(patch, cwd=self.root)

    def add(self, paths: list[str]) -> None:
        add_paths(paths, cwd=self.root)

    def reset(self, paths: list[str]) -> None:
        reset_paths(paths, cwd=self.root)

    def commit(self, message: str) -> str:
        return commit_with_message(message, cwd=self.root)
