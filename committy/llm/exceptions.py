"""LLM-related exception classes.

Contains all exception classes for oracle operations:
- LLMError: Base exception for LLM-related errors
- MissingAPIKeyError: Raised when API key is not set
- OracleRequestError: Raised when the request itself fails
- OracleResponseError: Raised when the response cannot be used
"""

from typing import Optional


class LLMError(Exception):
    """Base exception for LLM-related errors."""

    pass


class MissingAPIKeyError(LLMError):
    """Raised when the required API key is not set."""

    pass


class OracleRequestError(LLMError):
    """Raised when the oracle call fails at the transport level.

    ``status_code`` is None when no HTTP response was received.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class OracleResponseError(LLMError):
    """Raised when the oracle response is malformed or references unknown ids."""

    pass


# Name used by the shared JSON parsing helpers
JSONParseError = OracleResponseError
