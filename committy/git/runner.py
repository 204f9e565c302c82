"""Git command runner and repository utilities.

Contains:
- _run_git_command: Run a git command and return its output
- get_repo_root: Get the root directory of the current git repository
"""

import subprocess
from pathlib import Path
from typing import Optional

from committy.git.exceptions import GitError, RepositoryCommandError


def _run_git_command(
    args: list[str],
    input_text: Optional[str] = None,
    cwd: Optional[Path] = None,
    strip: bool = True,
) -> str:
    """Run a git command and return its output.

    Args:
        args: List of arguments to pass to git.
        input_text: Text fed to the command on stdin (e.g. a patch).
        cwd: Directory to run the command in. Defaults to the process cwd.
        strip: Whether to strip surrounding whitespace from stdout. Patch
            text must be returned verbatim, so diff callers pass False.

    Returns:
        The stdout of the git command.

    Raises:
        RepositoryCommandError: If the command exits non-zero.
        GitError: If git is not installed.
    """
    command = ["git"] + args
    try:
        result = subprocess.run(
            command,
            input=input_text,
            capture_output=True,
            text=True,
            check=True,
            cwd=cwd,
        )
    except subprocess.CalledProcessError as e:
        output = (e.stderr or "").strip() or (e.stdout or "").strip()
        raise RepositoryCommandError(command, output)
    except FileNotFoundError:
        raise GitError("Git is not installed or not in PATH.")
    return result.stdout.strip() if strip else result.stdout


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Get the root directory of the current git repository.

    Returns:
        Path to the repository root.

    Raises:
        GitError: If not in a git repository.
    """
    try:
        root = _run_git_command(["rev-parse", "--show-toplevel"], cwd=cwd)
        return Path(root)
    except GitError:
        raise GitError("Not in a git repository. Please run this command from within a git repo.")
