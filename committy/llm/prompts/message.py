"""User prompt templates for commit message drafting.

Two forms are supported:
- one-line: a single subject line, used for each staged topic group
- full: subject plus optional body, used for changes staged before startup
"""

ONE_LINE_INSTRUCTION = (
    "Produce a concise (<=72 chars) one-line commit subject describing the changes."
)

FULL_MESSAGE_INSTRUCTION = (
    "Produce a well-formed git commit message: a short subject (<=72 chars) and an "
    "optional body separated by a blank line. Return only the commit message text "
    "(no JSON)."
)

USER_PROMPT_TEMPLATE = """Patch:
{patch}

{instruction}
If the patch is large, focus on main intent / key changes."""


def build_message_prompt(patch: str, one_line: bool) -> str:
    """Build the user prompt for drafting a commit message.

    Args:
        patch: The staged diff to describe.
        one_line: Request only a subject line instead of a full message.

    Returns:
        The formatted user prompt.
    """
    instruction = ONE_LINE_INSTRUCTION if one_line else FULL_MESSAGE_INSTRUCTION
    return USER_PROMPT_TEMPLATE.format(patch=patch, instruction=instruction)
