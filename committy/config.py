"""Configuration for committy.

Configuration comes from the environment only and is resolved once, at
process start, into a CommittyConfig value that is passed to every
component needing it.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional


class ConfigError(Exception):
    """Raised when a configuration value cannot be interpreted."""

    pass


# ============================================================
# DEFAULT VALUES
# ============================================================

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.2
DEFAULT_MAX_TOKENS = 500
DEFAULT_MAX_COMPLETION_TOKENS = 2000

# Models that only accept the default temperature and count reasoning
# tokens against max_completion_tokens instead of max_tokens
REASONING_MODELS = ("gpt-5", "gpt-5-mini", "o4-mini")


# ============================================================
# ENVIRONMENT VARIABLES (first match wins)
# ============================================================

API_KEY_ENV_VARS = ("COMMITTY_OPENAI_API_KEY", "OPENAI_API_KEY")
BASE_URL_ENV_VARS = ("COMMITTY_OPENAI_BASE_URL", "OPENAI_BASE_URL")
MODEL_ENV_VAR = "COMMITTY_MODEL"
TEMPERATURE_ENV_VAR = "COMMITTY_TEMPERATURE"


@dataclass(frozen=True)
class CommittyConfig:
    """Resolved runtime configuration."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    max_completion_tokens: int = DEFAULT_MAX_COMPLETION_TOKENS


def _first_set(environ: Mapping[str, str], names: tuple[str, ...]) -> Optional[str]:
    for name in names:
        value = environ.get(name)
        if value:
            return value
    return None


def load_config(environ: Optional[Mapping[str, str]] = None) -> CommittyConfig:
    """Resolve configuration from environment variables.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        The resolved CommittyConfig.

    Raises:
        MissingAPIKeyError: If no API key variable is set.
        ConfigError: If an override cannot be parsed.
    """
    from committy.llm.exceptions import MissingAPIKeyError

    if environ is None:
        environ = os.environ

    api_key = _first_set(environ, API_KEY_ENV_VARS)
    if not api_key:
        raise MissingAPIKeyError(
            "Missing OpenAI API key. Set it using:\n"
            f"  export {API_KEY_ENV_VARS[0]}=your_key_here\n"
            f"  (or {API_KEY_ENV_VARS[1]})"
        )

    base_url = _first_set(environ, BASE_URL_ENV_VARS) or DEFAULT_BASE_URL
    model = environ.get(MODEL_ENV_VAR) or DEFAULT_MODEL

    temperature = DEFAULT_TEMPERATURE
    raw_temperature = environ.get(TEMPERATURE_ENV_VAR)
    if raw_temperature:
        try:
            temperature = float(raw_temperature)
        except ValueError:
            raise ConfigError(
                f"{TEMPERATURE_ENV_VAR} must be a number, got: {raw_temperature!r}"
            )

    return CommittyConfig(
        api_key=api_key,
        base_url=base_url.rstrip("/"),
        model=model,
        temperature=temperature,
    )
