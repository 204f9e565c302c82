"""Git status utilities.

Contains:
- list_untracked_files: Untracked paths not excluded by ignore rules
- get_staged_files_list: Paths currently staged in the index
"""

from pathlib import Path
from typing import Optional

from committy.git.runner import _run_git_command


def _split_paths(output: str) -> list[str]:
    # -z output: NUL-terminated, unquoted paths
    return [path for path in output.split("\0") if path]


def list_untracked_files(cwd: Optional[Path] = None) -> list[str]:
    """List untracked files, honouring .gitignore and other exclude rules.

    Returns:
        Untracked paths relative to the repository root, in git's order.
    """
    output = _run_git_command(
        ["ls-files", "-z", "--others", "--exclude-standard"],
        cwd=cwd,
        strip=False,
    )
    return _split_paths(output)


def get_staged_files_list(cwd: Optional[Path] = None) -> list[str]:
    """Get list of staged file paths.

    Returns:
        List of staged file paths.
    """
    output = _run_git_command(
        ["diff", "--cached", "--name-only", "-z"],
        cwd=cwd,
        strip=False,
    )
    return _split_paths(output)
