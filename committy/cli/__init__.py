"""CLI entry point for committy.

This package wires the interactive staging workflow into a single typer
application.

Contains:
- main: Top-level command that runs the workflow
- workflow: StagingWorkflow state machine and message review loop
- prompts: Prompter abstraction and terminal implementation
- display: Table and box rendering
"""

import typer

from committy.cli.main import main_command
from committy.cli.workflow import (
    GroupReport,
    GroupStatus,
    ReviewAction,
    StagingWorkflow,
    UserAbort,
    review_message,
)
from committy.cli.prompts import Prompter, TerminalPrompter, find_editor

# Main application
app = typer.Typer(
    name="committy",
    help="committy: split a dirty working tree into topic commits",
    add_completion=False,
)

# The only command; invocation takes no arguments
app.command()(main_command)


def run() -> None:
    """Console script entry point."""
    app()


__all__ = [
    "app",
    "run",
    "main_command",
    "StagingWorkflow",
    "GroupReport",
    "GroupStatus",
    "ReviewAction",
    "UserAbort",
    "review_message",
    "Prompter",
    "TerminalPrompter",
    "find_editor",
]
