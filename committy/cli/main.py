"""Main CLI command: run the interactive staging workflow."""

import typer

from committy.cli.prompts import TerminalPrompter
from committy.cli.workflow import StagingWorkflow, UserAbort
from committy.config import ConfigError, load_config
from committy.git import GitError, GitRepository, get_repo_root
from committy.llm import LLMError, MissingAPIKeyError, get_provider


def main_command() -> None:
    """Split unstaged and untracked changes into topic commits."""
    try:
        config = load_config()
    except (MissingAPIKeyError, ConfigError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    try:
        repo = GitRepository(get_repo_root())
    except GitError as e:
        typer.echo(f"Git error: {e}", err=True)
        raise typer.Exit(1)

    typer.secho("committy - topic commits from a dirty working tree", bold=True)
    typer.echo(f"Repository: {repo.root}")
    typer.echo(f"Model: {config.model}")

    workflow = StagingWorkflow(
        repo=repo,
        provider=get_provider(config),
        config=config,
        prompter=TerminalPrompter(),
    )

    try:
        workflow.run()
    except UserAbort:
        typer.secho("Aborted by user.", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    except GitError as e:
        typer.echo(f"Git error: {e}", err=True)
        raise typer.Exit(1)
    except LLMError as e:
        typer.echo(f"LLM error: {e}", err=True)
        raise typer.Exit(1)

    typer.secho("All done.", fg=typer.colors.GREEN)
