"""Interactive prompts for committy.

Contains:
- Prompter: The three primitives the workflow needs from a user
- TerminalPrompter: Prompter backed by typer/click terminal prompts
- find_editor: Pick the editor command used for message editing
"""

import os
from abc import ABC, abstractmethod
from typing import Optional

import click
import typer

from committy.git.exceptions import GitError
from committy.git.runner import _run_git_command


class Prompter(ABC):
    """User interaction used by the staging workflow."""

    @abstractmethod
    def select(self, message: str, choices: list[tuple[str, str]]) -> str:
        """Ask the user to pick one of ``choices`` (value, label) pairs.

        Returns:
            The value of the chosen entry.
        """
        pass

    @abstractmethod
    def confirm(self, message: str, default: bool = True) -> bool:
        """Ask a yes/no question."""
        pass

    @abstractmethod
    def edit(self, text: str) -> Optional[str]:
        """Open ``text`` in an editor.

        Returns:
            The edited text, or None if editing was cancelled.
        """
        pass


def find_editor() -> Optional[str]:
    """Find the editor command to use.

    Preference order:
    1. $VISUAL
    2. $EDITOR
    3. git's configured editor (git var GIT_EDITOR)

    Returns:
        The editor command, or None to let click pick its default.
    """
    for name in ("VISUAL", "EDITOR"):
        editor = os.environ.get(name)
        if editor:
            return editor
    try:
        return _run_git_command(["var", "GIT_EDITOR"]) or None
    except GitError:
        return None


class TerminalPrompter(Prompter):
    """Prompter for an interactive terminal."""

    def select(self, message: str, choices: list[tuple[str, str]]) -> str:
        for index, (_, label) in enumerate(choices, 1):
            typer.echo(f"  {index}. {label}")
        picked = typer.prompt(
            message,
            type=click.IntRange(1, len(choices)),
            default=1,
        )
        return choices[picked - 1][0]

    def confirm(self, message: str, default: bool = True) -> bool:
        return typer.confirm(message, default=default)

    def edit(self, text: str) -> Optional[str]:
        try:
            # click returns None when the editor exits without saving changes
            return click.edit(text + "\n", editor=find_editor(), extension=".txt")
        except click.ClickException as e:
            typer.echo(f"Warning: Could not open editor: {e.format_message()}", err=True)
            return None
