"""Git access layer for committy.

This package provides modular git access with:
- exceptions: GitError, RepositoryCommandError
- runner: _run_git_command, get_repo_root
- status: list_untracked_files, get_staged_files_list
- diff: get_unstaged_diff, get_staged_diff
- index: apply_patch_to_index, add_paths, reset_paths, commit_with_message
- repository: GitRepository
"""

# Exceptions
from committy.git.exceptions import (
    GitError,
    RepositoryCommandError,
)

# Runner utilities
from committy.git.runner import (
    _run_git_command,
    get_repo_root,
)

# Status utilities
from committy.git.status import (
    get_staged_files_list,
    list_untracked_files,
)

# Diff utilities
from committy.git.diff import (
    get_staged_diff,
    get_unstaged_diff,
)

# Index mutation utilities
from committy.git.index import (
    add_paths,
    apply_patch_to_index,
    commit_with_message,
    reset_paths,
)

# Repository facade
from committy.git.repository import GitRepository


__all__ = [
    # Exceptions
    "GitError",
    "RepositoryCommandError",
    # Runner
    "_run_git_command",
    "get_repo_root",
    # Status
    "list_untracked_files",
    "get_staged_files_list",
    # Diff
    "get_unstaged_diff",
    "get_staged_diff",
    # Index
    "apply_patch_to_index",
    "add_paths",
    "reset_paths",
    "commit_with_message",
    # Repository
    "GitRepository",
]
