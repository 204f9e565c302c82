"""Change units for committy - collect, group and stage them.

This package provides modular change handling with:
- models: ChangeKind, HunkRange, ChangeItem, TopicGroup, GroupingResponse, PickResponse
- collector: collect_unstaged_changes, parse_zero_context_diff, build_hunk_patch
- applier: StageMethod, StageResult, StagingLedger, stage_items, unstage_files
- prompt: CLUSTER_SYSTEM_PROMPT, PICK_SYSTEM_PROMPT, build_cluster_prompt,
          build_pick_prompt, format_items_for_llm
- grouping: Accepted, Rejected, GroupingSource, GroupingOutcome, PickOutcome,
            validate_grouping, validate_pick, group_by_file, cluster_changes,
            pick_independent_group
"""

# Models
from committy.changes.models import (
    ChangeItem,
    ChangeKind,
    GroupingResponse,
    HunkRange,
    PickResponse,
    TopicGroup,
    new_change_id,
    untracked_preview,
)

# Collector
from committy.changes.collector import (
    build_hunk_patch,
    collect_unstaged_changes,
    parse_zero_context_diff,
)

# Applier
from committy.changes.applier import (
    StageMethod,
    StageResult,
    StagingLedger,
    stage_items,
    unstage_files,
)

# Prompt
from committy.changes.prompt import (
    CLUSTER_SYSTEM_PROMPT,
    PICK_SYSTEM_PROMPT,
    build_cluster_prompt,
    build_pick_prompt,
    format_items_for_llm,
    suggested_max_groups,
    suggested_max_singletons,
)

# Grouping
from committy.changes.grouping import (
    GENERIC_TOPIC,
    Accepted,
    GroupingOutcome,
    GroupingSource,
    PickOutcome,
    Rejected,
    cluster_changes,
    group_by_file,
    pick_independent_group,
    validate_grouping,
    validate_pick,
)


__all__ = [
    # Models
    "ChangeKind",
    "ChangeItem",
    "HunkRange",
    "TopicGroup",
    "GroupingResponse",
    "PickResponse",
    "new_change_id",
    "untracked_preview",
    # Collector
    "collect_unstaged_changes",
    "parse_zero_context_diff",
    "build_hunk_patch",
    # Applier
    "StageMethod",
    "StageResult",
    "StagingLedger",
    "stage_items",
    "unstage_files",
    # Prompt
    "CLUSTER_SYSTEM_PROMPT",
    "PICK_SYSTEM_PROMPT",
    "build_cluster_prompt",
    "build_pick_prompt",
    "format_items_for_llm",
    "suggested_max_groups",
    "suggested_max_singletons",
    # Grouping
    "GENERIC_TOPIC",
    "Accepted",
    "Rejected",
    "GroupingSource",
    "GroupingOutcome",
    "PickOutcome",
    "validate_grouping",
    "validate_pick",
    "group_by_file",
    "cluster_changes",
    "pick_independent_group",
]
