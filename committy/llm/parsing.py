"""JSON parsing utilities for oracle responses.

Contains:
- parse_json_response: Parse raw oracle response text as a JSON object
- strip_code_fences: Remove a surrounding markdown fence from free text
"""

import json

from committy.llm.exceptions import JSONParseError


def strip_code_fences(text: str) -> str:
    """Remove a markdown code fence wrapped around the whole text, if any."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        # Remove first line (```json or ```)
        lines = lines[1:]
        # Remove last line if it's ```
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines).strip()
    return cleaned


def parse_json_response(raw_response: str) -> dict:
    """Parse the oracle response as a JSON object.

    Args:
        raw_response: The raw text response from the oracle.

    Returns:
        The parsed JSON object.

    Raises:
        JSONParseError: If parsing fails or the top level is not an object.
    """
    cleaned = strip_code_fences(raw_response)

    # Try to extract JSON object if there's extra content
    # Find the first { and last }
    first_brace = cleaned.find("{")
    last_brace = cleaned.rfind("}")

    if first_brace != -1 and last_brace != -1 and last_brace > first_brace:
        cleaned = cleaned[first_brace:last_brace + 1]

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise JSONParseError(
            f"Failed to parse oracle response as JSON.\n"
            f"Error: {e}\n"
            f"Raw response:\n{raw_response}"
        )

    if not isinstance(parsed, dict):
        raise JSONParseError(
            f"Expected a JSON object, got {type(parsed).__name__}.\n"
            f"Raw response:\n{raw_response}"
        )
    return parsed
