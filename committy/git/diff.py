"""Git diff utilities.

Contains:
- get_unstaged_diff: Zero-context diff of tracked, unstaged modifications
- get_staged_diff: Diff of everything currently staged
"""

from pathlib import Path
from typing import Optional

from committy.git.runner import _run_git_command


# Options shared by every diff we read. External diff drivers and colour
# would make the output unparseable, and quoted paths would not match the
# paths git expects back on the command line.
_DIFF_OPTIONS = ["--no-color", "--no-ext-diff"]


def get_unstaged_diff(cwd: Optional[Path] = None) -> str:
    """Get a zero-context diff of tracked modifications not yet staged.

    Zero context keeps every hunk minimal so that each one can be applied to
    the index on its own.

    Returns:
        Raw unified diff text, empty if the working tree matches the index.
    """
    return _run_git_command(
        ["-c", "core.quotepath=off", "diff", *_DIFF_OPTIONS, "-U0"],
        cwd=cwd,
        strip=False,
    )


def get_staged_diff(cwd: Optional[Path] = None) -> str:
    """Get the diff of all staged changes.

    Returns:
        Raw unified diff text of the index against HEAD.
    """
    return _run_git_command(
        ["-c", "core.quotepath=off", "diff", *_DIFF_OPTIONS, "--cached"],
        cwd=cwd,
        strip=False,
    )
