"""Interactive staging workflow: collect, group, review, stage, commit.

The workflow drives one shared index, so every repository mutation happens
strictly one after another from this module. Groups are handled in order;
a failure in one group is reported and the next group proceeds, except for
an explicit abort, which unstages the current group and stops everything.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

import typer

from committy.changes import (
    ChangeItem,
    StageMethod,
    StageResult,
    StagingLedger,
    TopicGroup,
    cluster_changes,
    collect_unstaged_changes,
    stage_items,
    unstage_files,
)
from committy.cli.display import render_box, render_group_table
from committy.cli.prompts import Prompter
from committy.config import CommittyConfig
from committy.git.exceptions import GitError
from committy.git.repository import GitRepository
from committy.llm import LLMError, generate_commit_message
from committy.llm.base import BaseLLMProvider


class UserAbort(Exception):
    """Raised when the user aborts during message review."""

    pass


class ReviewAction(str, Enum):
    """Transitions out of the message review state."""

    COMMIT = "commit"
    EDIT = "edit"
    REGENERATE = "regenerate"
    ABORT = "abort"


REVIEW_CHOICES = [
    (ReviewAction.COMMIT.value, "Use this message and commit"),
    (ReviewAction.EDIT.value, "Edit message in $EDITOR (multi-line)"),
    (ReviewAction.REGENERATE.value, "Regenerate (ask model again)"),
    (ReviewAction.ABORT.value, "Abort"),
]


class GroupStatus(str, Enum):
    """What happened to one topic group."""

    COMMITTED = "committed"
    DECLINED = "declined"
    STAGING_FAILED = "staging_failed"
    SKIPPED = "skipped"  # everything was staged and committed with an earlier group
    COMMIT_FAILED = "commit_failed"


@dataclass
class GroupReport:
    """Result of processing one topic group."""

    topic: str
    status: GroupStatus
    message: Optional[str] = None
    stage_results: list[StageResult] = field(default_factory=list)


def review_message(
    draft: str,
    regenerate: Callable[[], str],
    prompter: Prompter,
) -> str:
    """Let the user accept, edit, regenerate or abort a draft message.

    Args:
        draft: Initial message.
        regenerate: Produces a fresh draft; may raise LLMError.
        prompter: Interactive surface.

    Returns:
        The accepted message.

    Raises:
        UserAbort: If the user chooses to abort.
    """
    while True:
        typer.echo("")
        typer.secho("Generated commit message:", fg=typer.colors.BLUE)
        typer.echo(render_box(draft))

        action = ReviewAction(prompter.select("What would you like to do?", REVIEW_CHOICES))

        if action == ReviewAction.COMMIT:
            return draft

        if action == ReviewAction.EDIT:
            edited = prompter.edit(draft)
            if edited is None:
                typer.echo("Edit cancelled; keeping previous.", err=True)
            elif edited.strip():
                draft = edited.strip()
            else:
                typer.echo("Empty message not allowed; keeping previous.", err=True)

        elif action == ReviewAction.REGENERATE:
            typer.echo("Regenerating commit message...", err=True)
            try:
                draft = regenerate()
                typer.echo("Regenerated.", err=True)
            except LLMError as e:
                typer.echo(f"Regeneration failed: {e}", err=True)

        else:
            raise UserAbort("Aborted by user")


def _fallback_subject(files: list[str]) -> str:
    if len(files) == 1:
        return f"Update {files[0]}"
    return f"Update {len(files)} files"


class StagingWorkflow:
    """Top-level loop turning a dirty working tree into topic commits."""

    def __init__(
        self,
        repo: GitRepository,
        provider: BaseLLMProvider,
        config: CommittyConfig,
        prompter: Prompter,
    ):
        self.repo = repo
        self.provider = provider
        self.config = config
        self.prompter = prompter

    def run(self) -> list[GroupReport]:
        """Commit already-staged changes, then work through the rest.

        Raises:
            UserAbort: If the user aborts a message review.
            GitError: If the repository cannot be read.
        """
        reports = []
        prelude = self.handle_staged_changes()
        if prelude is not None:
            reports.append(prelude)
        reports.extend(self.handle_unstaged_changes())
        return reports

    def _draft_message(self, patch: str, one_line: bool) -> str:
        return generate_commit_message(self.provider, self.config, patch, one_line=one_line)

    def _commit(self, topic: str, message: str, stage_results: list[StageResult]) -> GroupReport:
        try:
            self.repo.commit(message)
        except GitError as e:
            typer.secho(f"git commit failed: {e}", fg=typer.colors.RED, err=True)
            typer.echo(
                "The changes remain staged and will be part of the next commit.", err=True
            )
            return GroupReport(topic, GroupStatus.COMMIT_FAILED, message, stage_results)

        typer.secho(f"Committed: {message.splitlines()[0]}", fg=typer.colors.GREEN)
        return GroupReport(topic, GroupStatus.COMMITTED, message, stage_results)

    def handle_staged_changes(self) -> Optional[GroupReport]:
        """Draft and commit a message for changes staged before startup.

        Returns:
            A report for the prelude commit, or None if nothing was staged.

        Raises:
            UserAbort: If the user aborts; the staged changes are left as
                they were found.
        """
        staged_files = self.repo.staged_files()
        if not staged_files:
            return None

        typer.secho(
            "Detected staged changes - generating commit message first...",
            fg=typer.colors.CYAN,
        )
        staged_patch = self.repo.staged_diff()

        try:
            draft = self._draft_message(staged_patch, one_line=False)
        except LLMError as e:
            typer.echo(f"Warning: Commit message generation failed: {e}", err=True)
            draft = _fallback_subject(staged_files)

        message = review_message(
            draft, lambda: self._draft_message(staged_patch, one_line=False), self.prompter
        )
        return self._commit("staged changes", message, [])

    def group_changes(self, items: list[ChangeItem]) -> list[TopicGroup]:
        """Group items by topic; always returns a usable grouping."""
        typer.echo("Grouping changes into topics...", err=True)
        try:
            outcome = cluster_changes(self.provider, self.config, items)
        except LLMError as e:
            typer.echo(f"Warning: Grouping failed: {e}", err=True)
            return [TopicGroup(topic=item.file, items=[item.id]) for item in items]

        typer.echo(f"Grouped into {len(outcome.groups)} topics:")
        for index, group in enumerate(outcome.groups, 1):
            typer.echo(f"  {index}. {group.topic} ({len(group.items)} items)")
        return outcome.groups

    def process_group(
        self,
        group: TopicGroup,
        items_by_id: dict[str, ChangeItem],
        ledger: Optional[StagingLedger] = None,
    ) -> GroupReport:
        """Review, stage, draft and commit one topic group.

        `ledger` records what earlier groups of the same pass staged, so
        hunks of files they touched land on the right lines.

        Raises:
            UserAbort: After unstaging this group's files, if the user aborts.
        """
        group_items = [items_by_id[item_id] for item_id in group.items if item_id in items_by_id]

        typer.echo("")
        typer.secho("---", fg=typer.colors.YELLOW)
        typer.secho(f"Topic: {group.topic}", bold=True)
        typer.echo(render_group_table(group_items))
        typer.secho("---", fg=typer.colors.YELLOW)

        if not self.prompter.confirm(f"Stage these {len(group_items)} changes for commit?", default=True):
            typer.echo("Skipping this group for now.")
            return GroupReport(group.topic, GroupStatus.DECLINED)

        try:
            stage_results = stage_items(self.repo, group_items, ledger)
        except GitError as e:
            typer.secho(f"Staging failed: {e}", fg=typer.colors.RED, err=True)
            return GroupReport(group.topic, GroupStatus.STAGING_FAILED)

        if not any(result.staged for result in stage_results):
            typer.secho("Staging failed: nothing could be staged.", fg=typer.colors.RED, err=True)
            return GroupReport(group.topic, GroupStatus.STAGING_FAILED, stage_results=stage_results)

        already_staged = all(result.method == StageMethod.ALREADY_STAGED for result in stage_results)
        if already_staged and not self.repo.staged_files():
            typer.echo("These changes were already committed with an earlier group.")
            return GroupReport(group.topic, GroupStatus.SKIPPED, stage_results=stage_results)

        staged_patch: Optional[str] = None
        draft = group.topic
        try:
            staged_patch = self.repo.staged_diff()
            draft = self._draft_message(staged_patch, one_line=True)
        except (GitError, LLMError) as e:
            typer.echo(f"Warning: Commit message generation failed: {e}", err=True)

        def regenerate() -> str:
            if staged_patch is None:
                raise LLMError("the staged diff could not be read")
            return self._draft_message(staged_patch, one_line=True)

        try:
            message = review_message(draft, regenerate, self.prompter)
        except (UserAbort, typer.Abort):
            typer.secho("Aborted by user. Unstaging what we just staged.", fg=typer.colors.RED, err=True)
            self._rollback(group_items)
            raise UserAbort("Aborted by user")

        return self._commit(group.topic, message, stage_results)

    def _rollback(self, group_items: list[ChangeItem]) -> None:
        files = [item.file for item in group_items]
        try:
            unstage_files(self.repo, files)
        except GitError as e:
            typer.echo(f"Warning: Could not unstage {', '.join(dict.fromkeys(files))}: {e}", err=True)

    def handle_unstaged_changes(self) -> list[GroupReport]:
        """Loop until no unstaged or untracked changes are left.

        Each pass collects fresh change items, groups them and walks the
        groups in order. When a whole pass commits nothing, the user is
        asked whether to review the remaining changes again.
        """
        reports: list[GroupReport] = []

        while True:
            items = collect_unstaged_changes(self.repo)
            if not items:
                typer.secho("No unstaged/untracked changes left. Done.", fg=typer.colors.GREEN)
                break

            typer.secho(f"Found {len(items)} unstaged/untracked change items.", fg=typer.colors.CYAN)
            groups = self.group_changes(items)
            items_by_id = {item.id: item for item in items}
            ledger = StagingLedger()

            pass_reports = [self.process_group(group, items_by_id, ledger) for group in groups]
            reports.extend(pass_reports)

            if not any(report.status == GroupStatus.COMMITTED for report in pass_reports):
                if not self.prompter.confirm(
                    "Nothing was committed in this pass. Review the remaining changes again?",
                    default=True,
                ):
                    typer.echo("Leaving the remaining changes unstaged.")
                    break

        return reports
