"""Data models for committy change handling.

Contains:
- ChangeKind: Whether a change unit is a diff hunk or an untracked file
- HunkRange: Line ranges of one hunk, rebased for standalone application
- ChangeItem: One addressable unit of change
- TopicGroup: A named subset of change ids intended to become one commit
- GroupingResponse / PickResponse: Shapes of the oracle's JSON replies
- new_change_id: Process-local id generator
"""

import re
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel


UNKNOWN_FILE = "(unknown)"
UNTRACKED_PREVIEW_PREFIX = "(untracked file)"


_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(.*)$")


@dataclass(frozen=True)
class HunkRange:
    """Line ranges from a hunk's @@ header.

    Zero-context hunks are positioned by git from their new-side start, so
    a hunk that must apply on its own derives that start from the old side
    (see ``isolated``).
    """

    old_start: int
    old_len: int
    new_start: int
    new_len: int
    section: str = ""  # text after the closing @@

    @classmethod
    def from_header(cls, header: str) -> Optional["HunkRange"]:
        """Parse an @@ line; returns None if it is not one."""
        match = _HUNK_HEADER_RE.match(header)
        if not match:
            return None
        return cls(
            old_start=int(match.group(1)),
            old_len=int(match.group(2)) if match.group(2) is not None else 1,
            new_start=int(match.group(3)),
            new_len=int(match.group(4)) if match.group(4) is not None else 1,
            section=match.group(5),
        )

    @property
    def delta(self) -> int:
        """Net change in line count once applied."""
        return self.new_len - self.old_len

    @property
    def position(self) -> int:
        """Sort key on the old side; an insertion sits between two lines."""
        return self.old_start * 2 + (1 if self.old_len == 0 else 0)

    def isolated(self, offset: int = 0) -> "HunkRange":
        """This hunk as if no other hunk of the file were applied.

        ``offset`` moves it by the net line change of hunks already applied
        above it.
        """
        old_start = self.old_start + offset
        new_start = old_start + 1 if self.old_len == 0 else old_start
        return HunkRange(old_start, self.old_len, new_start, self.new_len, self.section)

    def header(self) -> str:
        """Format as an @@ line, leaving out counts of one as git does."""
        old = f"{self.old_start}" if self.old_len == 1 else f"{self.old_start},{self.old_len}"
        new = f"{self.new_start}" if self.new_len == 1 else f"{self.new_start},{self.new_len}"
        return f"@@ -{old} +{new} @@{self.section}"


class ChangeKind(str, Enum):
    """Kind of change unit."""

    HUNK = "hunk"
    FILE = "file"


@dataclass
class ChangeItem:
    """One addressable unit of change.

    Hunk items carry a standalone single-hunk patch; file items (untracked
    files) carry none and are always staged whole.
    """

    id: str
    file: str
    kind: ChangeKind
    preview: str
    patch: Optional[str] = None
    hunk: Optional[HunkRange] = None


class TopicGroup(BaseModel):
    """A topic label plus the ordered ids of the change items it covers."""

    topic: str
    items: list[str]


class GroupingResponse(BaseModel):
    """Oracle reply to a clustering request."""

    groups: list[TopicGroup]


class PickResponse(BaseModel):
    """Oracle reply to a single-group picking request."""

    topic: str = ""
    items: list[str]


def untracked_preview(path: str) -> str:
    """Fixed preview text for an untracked file."""
    return f"{UNTRACKED_PREVIEW_PREFIX} {path}"


def new_change_id(prefix: str, taken: set[str]) -> str:
    """Generate an id that is not already in ``taken`` and record it there.

    Ids only need to be unique within one collection pass; they are random so
    that an id from an earlier pass is never mistaken for a current one.
    """
    while True:
        candidate = f"{prefix}{uuid.uuid4().hex[:8]}"
        if candidate not in taken:
            taken.add(candidate)
            return candidate
