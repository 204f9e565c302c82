"""Prompt templates for commit message drafting.

- system: The system prompt shared by both message forms
- message: One-line and full message user prompts
"""

from committy.llm.prompts.system import SYSTEM_PROMPT
from committy.llm.prompts.message import (
    FULL_MESSAGE_INSTRUCTION,
    ONE_LINE_INSTRUCTION,
    USER_PROMPT_TEMPLATE,
    build_message_prompt,
)


__all__ = [
    "SYSTEM_PROMPT",
    "ONE_LINE_INSTRUCTION",
    "FULL_MESSAGE_INSTRUCTION",
    "USER_PROMPT_TEMPLATE",
    "build_message_prompt",
]
