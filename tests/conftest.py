"""Shared test fixtures and configuration."""

import re
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, Optional, Union

import pytest

from committy.cli.prompts import Prompter
from committy.config import CommittyConfig
from committy.git.repository import GitRepository
from committy.llm.base import BaseLLMProvider, ChatMessage, RawLLMResult


SAMPLE_ZERO_CONTEXT_DIFF = """diff --git a/src/app.py b/src/app.py
index 1234567..abcdefg 100644
--- a/src/app.py
+++ b/src/app.py
@@ -3 +3 @@ def main():
-    print("hello")
+    print("hello, world")
@@ -10,0 +11,2 @@ def main():
+    log("done")
+    return 0
diff --git a/README.md b/README.md
index 2345678..bcdefgh 100644
--- a/README.md
+++ b/README.md
@@ -1 +1 @@
-# App
+# App (beta)
"""


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _git(repo_dir: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=repo_dir,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


@pytest.fixture
def git():
    """Run a git command in a directory and return its stdout."""
    return _git


@pytest.fixture
def temp_repo(tmp_path):
    """Create a temporary git repository with one commit."""
    repo_dir = tmp_path / "test_repo"
    repo_dir.mkdir()

    _git(repo_dir, "init", "--quiet")
    _git(repo_dir, "config", "user.email", "test@example.com")
    _git(repo_dir, "config", "user.name", "Test User")
    _git(repo_dir, "config", "commit.gpgsign", "false")

    (repo_dir / "README.md").write_text("# Test Repo\n")
    (repo_dir / "numbers.txt").write_text(
        "".join(f"line {n}\n" for n in range(1, 11))
    )
    _git(repo_dir, "add", "README.md", "numbers.txt")
    _git(repo_dir, "commit", "--quiet", "-m", "Initial commit")

    return repo_dir


@pytest.fixture
def repo(temp_repo):
    """GitRepository bound to the temporary repository."""
    return GitRepository(temp_repo)


@pytest.fixture
def config():
    """Configuration with a dummy API key."""
    return CommittyConfig(api_key="test-key")


Reply = Union[str, Exception, Callable[[list[ChatMessage], bool], str]]


class ScriptedProvider(BaseLLMProvider):
    """Provider that answers from a list of scripted replies.

    A reply may be a string, an exception to raise, or a callable taking
    (messages, json_mode) and returning the reply text. The last reply is
    reused once the script runs out.
    """

    def __init__(self, replies: list[Reply]):
        self.replies = list(replies)
        self.calls: list[dict] = []

    def chat(
        self,
        messages: list[ChatMessage],
        model: str,
        temperature: float,
        json_mode: bool = False,
    ) -> RawLLMResult:
        self.calls.append(
            {"messages": messages, "model": model, "temperature": temperature, "json_mode": json_mode}
        )
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            reply = reply(messages, json_mode)
        return RawLLMResult(raw_response=reply, model=model)


@pytest.fixture
def make_provider():
    """Build a ScriptedProvider from a list of replies."""
    return ScriptedProvider


def group_ids_by_file(messages: list[ChatMessage], json_mode: bool) -> str:
    """Reply handler: group the prompt's items by file, draft plain subjects otherwise."""
    if not json_mode:
        return "Update files"
    prompt = messages[-1]["content"]
    pairs = re.findall(r"^ID: (\S+)\nFILE: (.+)$", prompt, flags=re.MULTILINE)
    by_file: dict[str, list[str]] = {}
    for item_id, path in pairs:
        by_file.setdefault(path, []).append(item_id)
    groups = ",".join(
        '{"topic": "%s", "items": [%s]}' % (path, ",".join(f'"{i}"' for i in ids))
        for path, ids in by_file.items()
    )
    return '{"groups": [%s]}' % groups


class ScriptedPrompter(Prompter):
    """Prompter that replays scripted answers and records the questions."""

    def __init__(
        self,
        selects: Optional[list[str]] = None,
        confirms: Optional[list[bool]] = None,
        edits: Optional[list[Optional[str]]] = None,
    ):
        self.selects = list(selects or [])
        self.confirms = list(confirms or [])
        self.edits = list(edits or [])
        self.questions: list[str] = []
        self.defaults: list[bool] = []

    def select(self, message: str, choices: list[tuple[str, str]]) -> str:
        self.questions.append(message)
        return self.selects.pop(0)

    def confirm(self, message: str, default: bool = True) -> bool:
        self.questions.append(message)
        self.defaults.append(default)
        return self.confirms.pop(0)

    def edit(self, text: str) -> Optional[str]:
        self.questions.append("edit")
        return self.edits.pop(0)


@pytest.fixture
def make_prompter():
    """Build a ScriptedPrompter from scripted answers."""
    return ScriptedPrompter


@pytest.fixture
def sample_diff():
    """Zero-context diff touching two files with three hunks."""
    return SAMPLE_ZERO_CONTEXT_DIFF


@pytest.fixture
def group_by_file_reply():
    """Reply handler that groups prompt items by file."""
    return group_ids_by_file
