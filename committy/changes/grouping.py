"""Oracle-backed grouping of change items with strict validation.

The oracle is untrusted: its replies are parsed into Accepted or Rejected
before anything downstream sees them, and every public entry point returns
a well-formed grouping even when the oracle is unreachable or misbehaves.

Contains:
- Accepted / Rejected: Validation verdicts for an oracle reply
- GroupingSource / GroupingOutcome / PickOutcome: Tagged results
- validate_grouping / validate_pick: Check a raw reply against the input ids
- group_by_file: Deterministic one-group-per-file fallback
- cluster_changes: Group all items by topic
- pick_independent_group: Choose one self-contained subset
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

import typer
from pydantic import ValidationError

from committy.changes.models import (
    ChangeItem,
    GroupingResponse,
    PickResponse,
    TopicGroup,
)
from committy.changes.prompt import (
    CLUSTER_SYSTEM_PROMPT,
    PICK_SYSTEM_PROMPT,
    build_cluster_prompt,
    build_pick_prompt,
)
from committy.config import CommittyConfig
from committy.llm.base import BaseLLMProvider, ChatMessage
from committy.llm.exceptions import JSONParseError, OracleRequestError
from committy.llm.parsing import parse_json_response


GENERIC_TOPIC = "Selected changes"


@dataclass
class Accepted:
    """The reply passed validation."""

    groups: list[TopicGroup]


@dataclass
class Rejected:
    """The reply failed validation and must not be used."""

    reason: str


ValidationResult = Union[Accepted, Rejected]


class GroupingSource(str, Enum):
    """Which branch produced a grouping."""

    ORACLE = "oracle"  # first reply accepted
    RETRY = "retry"  # second reply accepted
    FALLBACK = "fallback"  # deterministic grouping, no oracle involvement


@dataclass
class GroupingOutcome:
    """Groups covering every input item, plus how they were obtained."""

    groups: list[TopicGroup]
    source: GroupingSource
    rejections: list[str] = field(default_factory=list)

    @property
    def via_fallback(self) -> bool:
        return self.source == GroupingSource.FALLBACK


@dataclass
class PickOutcome:
    """One self-contained group, plus how it was obtained."""

    group: TopicGroup
    source: GroupingSource
    rejections: list[str] = field(default_factory=list)

    @property
    def via_fallback(self) -> bool:
        return self.source == GroupingSource.FALLBACK


def _topic_for_file(path: str) -> str:
    return f"changes in {path}"


def group_by_file(items: list[ChangeItem]) -> list[TopicGroup]:
    """Group items by file path, in order of first appearance.

    Deterministic: the same item list always produces the same topics and
    membership.
    """
    by_file: dict[str, list[str]] = {}
    for item in items:
        by_file.setdefault(item.file, []).append(item.id)
    return [
        TopicGroup(topic=_topic_for_file(path), items=ids)
        for path, ids in by_file.items()
    ]


def _normalize_groups(groups: list[TopicGroup], items: list[ChangeItem]) -> list[TopicGroup]:
    """Make validated groups cover every item exactly once.

    An id listed in several groups stays only in the first one, groups left
    empty are dropped, blank topics are named after their first file, and
    items the oracle left out are appended as per-file groups.
    """
    by_id = {item.id: item for item in items}
    seen: set[str] = set()
    normalized: list[TopicGroup] = []

    for group in groups:
        ids = []
        for item_id in group.items:
            if item_id not in seen:
                seen.add(item_id)
                ids.append(item_id)
        if not ids:
            continue
        topic = group.topic.strip() or _topic_for_file(by_id[ids[0]].file)
        normalized.append(TopicGroup(topic=topic, items=ids))

    leftovers = [item for item in items if item.id not in seen]
    normalized.extend(group_by_file(leftovers))
    return normalized


def validate_grouping(raw_response: str, items: list[ChangeItem]) -> ValidationResult:
    """Validate a clustering reply against the input items.

    A reply referencing any id outside the input set is rejected as a
    whole; there is no partial acceptance.

    Args:
        raw_response: Raw oracle reply text.
        items: The items that were sent for grouping.

    Returns:
        Accepted with groups covering every item once, or Rejected.
    """
    try:
        parsed = parse_json_response(raw_response)
        response = GroupingResponse.model_validate(parsed)
    except JSONParseError as e:
        return Rejected(f"Unparseable grouping: {e}")
    except ValidationError as e:
        return Rejected(f"Grouping does not match expected schema: {e}")

    if not response.groups:
        return Rejected("Grouping contains no groups")

    known_ids = {item.id for item in items}
    unknown = [
        item_id
        for group in response.groups
        for item_id in group.items
        if item_id not in known_ids
    ]
    if unknown:
        return Rejected(f"Invalid grouping (unknown ids: {', '.join(unknown)})")

    return Accepted(_normalize_groups(response.groups, items))


def validate_pick(raw_response: str, items: list[ChangeItem]) -> ValidationResult:
    """Validate a single-group reply against the input items.

    Unknown ids are dropped instead of rejecting the reply. The accepted
    group may therefore be empty; callers treat that as a fallback case.
    """
    try:
        parsed = parse_json_response(raw_response)
        response = PickResponse.model_validate(parsed)
    except JSONParseError as e:
        return Rejected(f"Unparseable selection: {e}")
    except ValidationError as e:
        return Rejected(f"Selection does not match expected schema: {e}")

    known_ids = {item.id for item in items}
    ids = [item_id for item_id in dict.fromkeys(response.items) if item_id in known_ids]
    topic = response.topic.strip() or GENERIC_TOPIC
    return Accepted([TopicGroup(topic=topic, items=ids)])


def _request_json(
    provider: BaseLLMProvider, config: CommittyConfig, system_prompt: str, user_prompt: str
) -> str:
    messages: list[ChatMessage] = [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]
    result = provider.chat(
        messages,
        model=config.model,
        temperature=config.temperature,
        json_mode=True,
    )
    return result.raw_response


def cluster_changes(
    provider: BaseLLMProvider, config: CommittyConfig, items: list[ChangeItem]
) -> GroupingOutcome:
    """Group change items by topic using the oracle.

    An invalid reply is retried once with the same request. A second invalid
    reply, or a failed request, falls back to one group per file. Failures
    are reported as warnings and never raised.

    Args:
        provider: Oracle provider.
        config: Resolved configuration (model, temperature).
        items: Items to group.

    Returns:
        A GroupingOutcome whose groups reference every item exactly once.
    """
    if not items:
        return GroupingOutcome(groups=[], source=GroupingSource.FALLBACK)

    user_prompt = build_cluster_prompt(items)
    rejections: list[str] = []

    for source in (GroupingSource.ORACLE, GroupingSource.RETRY):
        try:
            raw_response = _request_json(provider, config, CLUSTER_SYSTEM_PROMPT, user_prompt)
        except OracleRequestError as e:
            rejections.append(str(e))
            typer.echo(f"Warning: Clustering request failed: {e}", err=True)
            break

        validation = validate_grouping(raw_response, items)
        if isinstance(validation, Accepted):
            return GroupingOutcome(groups=validation.groups, source=source, rejections=rejections)

        rejections.append(validation.reason)
        next_step = "retrying" if source == GroupingSource.ORACLE else "giving up"
        typer.echo(f"Warning: {validation.reason.splitlines()[0]}; {next_step}.", err=True)

    typer.echo("Warning: Clustering failed, falling back to per-file grouping.", err=True)
    return GroupingOutcome(
        groups=group_by_file(items),
        source=GroupingSource.FALLBACK,
        rejections=rejections,
    )


def pick_independent_group(
    provider: BaseLLMProvider, config: CommittyConfig, items: list[ChangeItem]
) -> PickOutcome:
    """Ask the oracle for one self-contained subset of the items.

    Same discipline as cluster_changes: one retry on an unusable reply, and
    a fallback of all items under a generic topic when the oracle fails or
    selects nothing that exists.
    """
    fallback = TopicGroup(topic=GENERIC_TOPIC, items=[item.id for item in items])
    if not items:
        return PickOutcome(group=fallback, source=GroupingSource.FALLBACK)

    user_prompt = build_pick_prompt(items)
    rejections: list[str] = []

    for source in (GroupingSource.ORACLE, GroupingSource.RETRY):
        try:
            raw_response = _request_json(provider, config, PICK_SYSTEM_PROMPT, user_prompt)
        except OracleRequestError as e:
            rejections.append(str(e))
            typer.echo(f"Warning: Selection request failed: {e}", err=True)
            break

        validation = validate_pick(raw_response, items)
        if isinstance(validation, Rejected):
            rejections.append(validation.reason)
            typer.echo(f"Warning: {validation.reason.splitlines()[0]}", err=True)
            continue

        group = validation.groups[0]
        if group.items:
            return PickOutcome(group=group, source=source, rejections=rejections)
        rejections.append("Selection references no known items")
        break

    return PickOutcome(group=fallback, source=GroupingSource.FALLBACK, rejections=rejections)
