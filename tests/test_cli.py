"""Tests for committy.cli module."""

from typer.testing import CliRunner

from committy.cli import app
from committy.config import ConfigError
from committy.git import GitError
from committy.llm import MissingAPIKeyError


runner = CliRunner()


class TestMainCommand:
    """Tests for the committy command."""

    def test_missing_api_key(self, mocker):
        """Test that a missing API key exits with an error."""
        mocker.patch(
            "committy.cli.main.load_config",
            side_effect=MissingAPIKeyError("Missing OpenAI API key."),
        )

        result = runner.invoke(app, [])

        assert result.exit_code == 1
        assert "Missing OpenAI API key" in result.output

    def test_invalid_config(self, mocker):
        """Test that an unparseable setting exits with an error."""
        mocker.patch("committy.cli.main.load_config", side_effect=ConfigError("bad temperature"))

        result = runner.invoke(app, [])

        assert result.exit_code == 1
        assert "bad temperature" in result.output

    def test_not_a_repository(self, mocker, config):
        """Test that running outside a repository exits with an error."""
        mocker.patch("committy.cli.main.load_config", return_value=config)
        mocker.patch("committy.cli.main.get_repo_root", side_effect=GitError("Not in a git repository."))

        result = runner.invoke(app, [])

        assert result.exit_code == 1
        assert "git error" in result.output.lower()

    def test_runs_workflow(self, mocker, config, temp_dir):
        """Test the success path."""
        mocker.patch("committy.cli.main.load_config", return_value=config)
        mocker.patch("committy.cli.main.get_repo_root", return_value=temp_dir)
        mocker.patch("committy.cli.main.get_provider")
        workflow_cls = mocker.patch("committy.cli.main.StagingWorkflow")

        result = runner.invoke(app, [])

        assert result.exit_code == 0
        assert "All done." in result.output
        workflow_cls.return_value.run.assert_called_once()

    def test_abort_exits_nonzero(
        self, mocker, config, temp_repo, git, make_provider, make_prompter, group_by_file_reply
    ):
        """Test that aborting the second group exits 1 after one commit."""
        (temp_repo / "README.md").write_text("# Test Repo\n\nMore docs.\n")
        (temp_repo / "notes.txt").write_text("notes\n")
        mocker.patch("committy.cli.main.load_config", return_value=config)
        mocker.patch("committy.cli.main.get_repo_root", return_value=temp_repo)
        mocker.patch("committy.cli.main.get_provider", return_value=make_provider([group_by_file_reply]))
        mocker.patch(
            "committy.cli.main.TerminalPrompter",
            return_value=make_prompter(selects=["commit", "abort"], confirms=[True, True]),
        )

        result = runner.invoke(app, [])

        assert result.exit_code == 1
        assert "Aborted by user." in result.output
        assert git(temp_repo, "rev-list", "--count", "HEAD").strip() == "2"
        assert git(temp_repo, "diff", "--cached", "--name-only").strip() == ""
        assert "notes.txt" in git(temp_repo, "ls-files", "--others", "--exclude-standard")
