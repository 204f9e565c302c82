"""Grouping prompt utilities for committy.

Contains:
- CLUSTER_SYSTEM_PROMPT: System prompt for grouping items into topics
- PICK_SYSTEM_PROMPT: System prompt for picking one self-contained group
- format_items_for_llm: Serialize change items for the oracle
- suggested_max_groups / suggested_max_singletons: Advisory grouping caps
- build_cluster_prompt / build_pick_prompt: User prompts
"""

import math

from committy.changes.models import ChangeItem


MAX_PREVIEW_CHARS = 800


CLUSTER_SYSTEM_PROMPT = """You are an assistant that groups code changes into topics for commit staging.
Return a JSON object with a "groups" key containing an array: { "groups": [{ "topic": "<short topic title>", "items": ["id1","id2", ...] }, ...] }.
All ids must be from the provided list. Group by intent: changes that serve the same purpose belong together even when they touch different files.
If a change doesn't fit any multi-change topic, put it in its own group. Keep topics short (<=6 words)."""


PICK_SYSTEM_PROMPT = """You are an assistant that selects code changes for a single commit.
Return a JSON object of the form { "topic": "<short topic title>", "items": ["id1","id2", ...] }.
Pick exactly one self-contained subset of the provided changes that can be committed on its own without breaking anything; it may be all of them.
All ids must be from the provided list. Keep the topic short (<=6 words)."""


def format_items_for_llm(items: list[ChangeItem], max_preview_chars: int = MAX_PREVIEW_CHARS) -> str:
    """Serialize change items for inclusion in an oracle prompt.

    Args:
        items: Change items to describe.
        max_preview_chars: Maximum preview characters per item.

    Returns:
        One block per item with its id, file, kind and preview.
    """
    blocks = []
    for item in items:
        preview = (item.preview or item.patch or "")[:max_preview_chars]
        blocks.append(
            f"ID: {item.id}\nFILE: {item.file}\nKIND: {item.kind.value}\nPREVIEW:\n{preview}\n---"
        )
    return "\n".join(blocks)


def suggested_max_groups(item_count: int) -> int:
    """Soft cap on the number of groups; grows with the item count."""
    if item_count <= 0:
        return 1
    return min(item_count, math.ceil(math.sqrt(item_count)) + 1)


def suggested_max_singletons(item_count: int) -> int:
    """Soft cap on single-item groups; grows with the item count."""
    return min(suggested_max_groups(item_count), max(1, item_count // 4))


def build_cluster_prompt(items: list[ChangeItem]) -> str:
    """Build the user prompt asking the oracle to group items by topic."""
    count = len(items)
    return f"""Here are unstaged change items:

{format_items_for_llm(items)}

Group them by topic and return the JSON object as described.
Prefer fewer, intent-based groups: aim for at most {suggested_max_groups(count)} groups in total and at most {suggested_max_singletons(count)} groups with a single item."""


def build_pick_prompt(items: list[ChangeItem]) -> str:
    """Build the user prompt asking the oracle for one independent group."""
    return f"""Here are unstaged change items:

{format_items_for_llm(items)}

Choose one self-contained group of these changes to commit next and return the JSON object as described."""
