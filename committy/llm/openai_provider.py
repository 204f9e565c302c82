"""OpenAI-compatible chat completions provider."""

from typing import Optional

import openai
from openai import OpenAI

from committy.config import REASONING_MODELS, CommittyConfig
from committy.llm.base import BaseLLMProvider, ChatMessage, RawLLMResult
from committy.llm.exceptions import OracleRequestError


class OpenAIProvider(BaseLLMProvider):
    """Chat completions against OpenAI or any endpoint speaking its API."""

    def __init__(self, config: CommittyConfig, client: Optional[OpenAI] = None):
        """Initialize the OpenAI provider.

        Args:
            config: Resolved configuration (API key, base URL, token limits).
            client: Pre-built client, mainly for tests.
        """
        self.config = config
        # Retries are decided by the callers, never by the SDK
        self.client = client or OpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            max_retries=0,
        )

    def _request_options(self, model: str, temperature: float) -> dict:
        """Build the sampling options the given model accepts."""
        if model in REASONING_MODELS:
            return {
                "temperature": 1,
                "max_completion_tokens": self.config.max_completion_tokens,
            }
        return {
            "temperature": temperature,
            "max_tokens": self.config.max_tokens,
        }

    def chat(
        self,
        messages: list[ChatMessage],
        model: str,
        temperature: float,
        json_mode: bool = False,
    ) -> RawLLMResult:
        """Call the chat completions endpoint.

        Raises:
            OracleRequestError: On a non-success status, a connection
                failure, or a reply without message content.
        """
        kwargs = self._request_options(model, temperature)
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                **kwargs,
            )
        except openai.APIStatusError as e:
            body = e.response.text if e.response is not None else str(e)
            raise OracleRequestError(
                f"OpenAI request failed ({e.status_code}): {body}",
                status_code=e.status_code,
                body=body,
            )
        except openai.APIError as e:
            raise OracleRequestError(f"OpenAI request failed: {e}", body=str(e))

        content = None
        if response.choices:
            content = response.choices[0].message.content
        if not content or not content.strip():
            raise OracleRequestError("No message from OpenAI")

        return RawLLMResult(
            raw_response=content.strip(),
            model=response.model or model,
            input_tokens=response.usage.prompt_tokens if response.usage else 0,
            output_tokens=response.usage.completion_tokens if response.usage else 0,
        )
