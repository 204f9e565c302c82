"""Change collector for committy.

Turns the live repository state into an ordered list of ChangeItems:
- collect_unstaged_changes: Hunks of tracked modifications, then untracked files
- parse_zero_context_diff: Split a -U0 diff into standalone single-hunk patches
- build_hunk_patch: Wrap one hunk in synthetic file headers
"""

import re
from typing import Optional

import typer

from committy.changes.models import (
    UNKNOWN_FILE,
    ChangeItem,
    ChangeKind,
    HunkRange,
    new_change_id,
    untracked_preview,
)
from committy.git.repository import GitRepository


PREVIEW_LINES = 6
DEFAULT_FILE_MODE = "100644"

_FILE_HEADER_RE = re.compile(r"^diff --git a/(.*?) b/(.*?)$")
_QUOTED_PATH_RE = re.compile(r'"(?:[^"\\]|\\.)*"')
_DELETED_MODE_RE = re.compile(r"^deleted file mode (\d+)$")

# git's C-style path quoting (quote_c_style in git's quote.c)
_C_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "t": "\t",
    "n": "\n",
    "v": "\v",
    "f": "\f",
    "r": "\r",
    '"': '"',
    "\\": "\\",
}
_C_QUOTES = {value: key for key, value in _C_ESCAPES.items()}


def unquote_path(token: str) -> str:
    """Undo git's C-style quoting of a path.

    Unquoted tokens are returned unchanged. Octal escapes are bytes of the
    UTF-8 encoded path.
    """
    if len(token) < 2 or not (token.startswith('"') and token.endswith('"')):
        return token

    body = token[1:-1]
    raw = bytearray()
    i = 0
    while i < len(body):
        char = body[i]
        if char == "\\" and i + 1 < len(body):
            octal = body[i + 1:i + 4]
            if re.fullmatch(r"[0-3][0-7]{2}", octal):
                raw.append(int(octal, 8))
                i += 4
                continue
            raw.extend(_C_ESCAPES.get(body[i + 1], body[i + 1]).encode("utf-8"))
            i += 2
            continue
        raw.extend(char.encode("utf-8"))
        i += 1
    return raw.decode("utf-8", errors="surrogateescape")


def quote_path(path: str) -> str:
    """Quote a path the way git writes it in patch headers, if it needs it."""
    if not any(char in _C_QUOTES or ord(char) < 0x20 or ord(char) == 0x7F for char in path):
        return path

    quoted = []
    for char in path:
        if char in _C_QUOTES:
            quoted.append("\\" + _C_QUOTES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            quoted.append(f"\\{ord(char):03o}")
        else:
            quoted.append(char)
    return '"' + "".join(quoted) + '"'


def _strip_prefix(path: str, prefix: str) -> Optional[str]:
    return path[len(prefix):] if path.startswith(prefix) else None


def _parse_file_header(header: str) -> tuple[str, str]:
    """Read the source and destination paths from a 'diff --git' line.

    The destination path is the one the change belongs to. Quoted paths are
    unquoted. Lines that do not match yield UNKNOWN_FILE for both sides
    rather than an error.
    """
    rest = header[len("diff --git "):]

    if rest.startswith('"'):
        # git quotes both sides when the path needs it
        first = _QUOTED_PATH_RE.match(rest)
        if first and rest[first.end():first.end() + 1] == " ":
            old_path = _strip_prefix(unquote_path(first.group(0)), "a/")
            new_path = _strip_prefix(unquote_path(rest[first.end() + 1:]), "b/")
            if old_path is not None and new_path is not None:
                return old_path, new_path
        return UNKNOWN_FILE, UNKNOWN_FILE

    # Unstaged diffs never rename, so both halves normally name the same
    # path; splitting in the middle copes with paths containing " b/".
    half = len(rest) // 2
    if len(rest) % 2 == 1 and rest[half] == " ":
        left, right = rest[:half], rest[half + 1:]
        if left.startswith("a/") and right.startswith("b/") and left[2:] == right[2:]:
            return left[2:], right[2:]

    match = _FILE_HEADER_RE.match(header)
    if not match:
        return UNKNOWN_FILE, UNKNOWN_FILE
    return match.group(1), match.group(2)


def build_hunk_patch(
    old_path: str,
    new_path: str,
    hunk_lines: list[str],
    deleted_file_mode: Optional[str] = None,
) -> str:
    """Build a patch that applies exactly one hunk to one file.

    The @@ line is rewritten so the new-side start follows from the
    old-side start alone. git positions zero-context hunks by that start,
    and the one in a full diff assumes every earlier hunk of the file is
    applied too.

    Args:
        old_path: Path on the pre-image side.
        new_path: Path on the post-image side.
        hunk_lines: The hunk, starting with its @@ range line.
        deleted_file_mode: Mode of the removed file when the hunk deletes
            the whole file, else None.

    Returns:
        A self-contained unified diff ending with a newline.
    """
    old_name = quote_path(f"a/{old_path}")
    new_name = quote_path(f"b/{new_path}")
    lines = [f"diff --git {old_name} {new_name}"]
    if deleted_file_mode is not None:
        lines.append(f"deleted file mode {deleted_file_mode}")
        lines.append(f"--- {old_name}")
        lines.append("+++ /dev/null")
    else:
        lines.append(f"--- {old_name}")
        lines.append(f"+++ {new_name}")

    hunk = HunkRange.from_header(hunk_lines[0]) if hunk_lines else None
    if hunk is not None:
        lines.append(hunk.isolated().header())
        lines.extend(hunk_lines[1:])
    else:
        lines.extend(hunk_lines)
    # git apply requires the patch to end with a newline
    return "\n".join(lines) + "\n"


def replace_hunk_header(patch: str, header: str) -> str:
    """Swap the @@ line of a single-hunk patch."""
    lines = patch.split("\n")
    for index, line in enumerate(lines):
        if line.startswith("@@"):
            lines[index] = header
            break
    return "\n".join(lines)


def _split_hunks(lines: list[str]) -> list[list[str]]:
    """Split the body of a file section into hunks.

    A hunk starts at an @@ line and runs until the next @@ line or the end
    of the section. Lines before the first @@ are header lines and ignored.
    """
    hunks: list[list[str]] = []
    current: Optional[list[str]] = None
    for line in lines:
        if line.startswith("@@"):
            current = [line]
            hunks.append(current)
        elif current is not None:
            current.append(line)
    return hunks


def parse_zero_context_diff(
    diff_output: str, taken_ids: Optional[set[str]] = None
) -> tuple[list[ChangeItem], list[str]]:
    """Parse 'git diff -U0' output into hunk-kind ChangeItems.

    Args:
        diff_output: Raw diff text.
        taken_ids: Ids already issued in this collection pass.

    Returns:
        Tuple of (hunk items in diff order, list of warning messages)
    """
    items: list[ChangeItem] = []
    warnings: list[str] = []
    if taken_ids is None:
        taken_ids = set()

    if not diff_output.strip():
        return items, warnings

    # Each file starts with 'diff --git a/... b/...'
    file_blocks = re.split(r"(?=^diff --git )", diff_output, flags=re.MULTILINE)

    for block in file_blocks:
        if not block.startswith("diff --git"):
            continue

        lines = block.split("\n")
        while lines and lines[-1] == "":
            lines.pop()

        old_path, new_path = _parse_file_header(lines[0])
        deleted_file_mode = None
        for line in lines[1:]:
            if line.startswith("@@"):
                break
            mode_match = _DELETED_MODE_RE.match(line)
            if mode_match:
                deleted_file_mode = mode_match.group(1)

        hunks = _split_hunks(lines[1:])
        if not hunks:
            # Binary or mode-only changes have nothing we can apply per hunk
            if any("Binary files" in line or "GIT binary patch" in line for line in lines):
                warnings.append(f"Binary change skipped: {new_path}")
            continue

        for hunk_lines in hunks:
            items.append(
                ChangeItem(
                    id=new_change_id("h-", taken_ids),
                    file=new_path,
                    kind=ChangeKind.HUNK,
                    preview="\n".join(hunk_lines[:PREVIEW_LINES]),
                    patch=build_hunk_patch(old_path, new_path, hunk_lines, deleted_file_mode),
                    hunk=HunkRange.from_header(hunk_lines[0]),
                )
            )

    return items, warnings


def collect_unstaged_changes(repo: GitRepository) -> list[ChangeItem]:
    """Collect every unstaged change unit in the working tree.

    Hunk items come first, in diff order (file by file, top to bottom),
    followed by one file item per untracked path in listing order. An
    empty list means there is nothing left to commit.

    Raises:
        RepositoryCommandError: If git cannot list the changes.
    """
    taken_ids: set[str] = set()

    untracked = repo.list_untracked()
    items, warnings = parse_zero_context_diff(repo.unstaged_diff(), taken_ids)

    for warning in warnings:
        typer.echo(f"Warning: {warning}", err=True)

    for path in untracked:
        items.append(
            ChangeItem(
                id=new_change_id("u-", taken_ids),
                file=path,
                kind=ChangeKind.FILE,
                preview=untracked_preview(path),
            )
        )

    return items
