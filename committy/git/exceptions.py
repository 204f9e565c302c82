"""Git-related exception classes.

Contains all exception classes for Git operations:
- GitError: Base exception for git-related errors
- RepositoryCommandError: Raised when a git command exits non-zero
"""


class GitError(Exception):
    """Custom exception for git-related errors."""

    pass


class RepositoryCommandError(GitError):
    """Raised when a git command exits with a non-zero status.

    Carries the failing command line and the diagnostic output git printed
    so callers can surface both to the user.
    """

    def __init__(self, command: list[str], output: str):
        self.command = command
        self.output = output
        super().__init__(f"Git command failed: {' '.join(command)}\n{output}".rstrip())
