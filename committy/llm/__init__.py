"""Oracle access for committy.

This module wraps the external text-generation service used for drafting
commit messages and grouping changes.
"""

from dotenv import load_dotenv

from committy.config import CommittyConfig
from committy.llm.base import BaseLLMProvider, ChatMessage, RawLLMResult
from committy.llm.exceptions import (
    JSONParseError,
    LLMError,
    MissingAPIKeyError,
    OracleRequestError,
    OracleResponseError,
)
from committy.llm.parsing import parse_json_response, strip_code_fences
from committy.llm.prompts import SYSTEM_PROMPT, build_message_prompt

# Load environment variables from .env file
load_dotenv()


def get_provider(config: CommittyConfig) -> BaseLLMProvider:
    """Get the oracle provider for the given configuration.

    Args:
        config: Resolved configuration.

    Returns:
        An OpenAI-compatible provider bound to the configured endpoint.
    """
    from committy.llm.openai_provider import OpenAIProvider

    return OpenAIProvider(config)


def generate_commit_message(
    provider: BaseLLMProvider,
    config: CommittyConfig,
    patch: str,
    one_line: bool = False,
) -> str:
    """Draft a commit message for a staged patch.

    Args:
        provider: Oracle provider.
        config: Resolved configuration (model, temperature).
        patch: The staged diff to describe.
        one_line: Request only a subject line.

    Returns:
        The drafted message text, without surrounding code fences.

    Raises:
        OracleRequestError: If the oracle call fails.
    """
    messages: list[ChatMessage] = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_message_prompt(patch, one_line)},
    ]
    result = provider.chat(messages, model=config.model, temperature=config.temperature)
    message = strip_code_fences(result.raw_response)
    if one_line:
        # Keep only the subject if the model added a body anyway
        message = message.split("\n", 1)[0].strip()
    if not message:
        raise OracleRequestError("No message from OpenAI")
    return message


# Export commonly used items
__all__ = [
    "BaseLLMProvider",
    "ChatMessage",
    "RawLLMResult",
    "LLMError",
    "MissingAPIKeyError",
    "OracleRequestError",
    "OracleResponseError",
    "JSONParseError",
    "parse_json_response",
    "strip_code_fences",
    "get_provider",
    "generate_commit_message",
]
