"""Completion exchange with an OpenAI compatible chat endpoint."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import openai
from openai import OpenAI  # type: ignore

from .errors import (
    APIRequestError,
    NetworkError,
    RequestTimeoutError,
    ResponseFormatError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class CompletionClient:
    """Anything that turns a message list into an assistant reply."""

    def complete(self, messages: List[Dict[str, str]]) -> str:
        raise NotImplementedError


class OpenAICompletionClient(CompletionClient):
    """Single request/response chat completion through the OpenAI SDK.

    The raw HTTP response is parsed here rather than by the SDK so that every
    way the reply can be wrong maps onto one of the ivycli errors.
    """

    def __init__(self, client: OpenAI, model: str, timeout: float = DEFAULT_TIMEOUT):
        self.client = client
        self.model = model
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Helper methods
    # ------------------------------------------------------------------

    @staticmethod
    def _extract_error_message(exc: "openai.APIStatusError") -> str:
        """Return ``error.message`` from the error envelope if there is one."""
        body = exc.body
        if isinstance(body, dict):
            envelope = body.get("error", body)
            if isinstance(envelope, dict):
                message = envelope.get("message")
                if isinstance(message, str) and message:
                    return message
        return f"Received non-200 response status: {exc.status_code}"

    @staticmethod
    def _extract_reply(payload: Any) -> str:
        """Return the stripped content of the first completion choice."""
        try:
            content = payload["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise ResponseFormatError("Unexpected response format.") from None
        if not isinstance(content, str):
            raise ResponseFormatError("Unexpected response format.")
        return content.strip()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def complete(self, messages: List[Dict[str, str]]) -> str:
        logger.debug(
            "Sending %d messages to model %s (timeout=%ss)",
            len(messages),
            self.model,
            self.timeout,
        )
        try:
            raw = self.client.chat.completions.with_raw_response.create(
                model=self.model,
                messages=messages,  # type: ignore[arg-type]
                timeout=self.timeout,
            )
        except openai.APITimeoutError:
            raise RequestTimeoutError(
                f"Request timed out after {self.timeout:g} seconds."
            ) from None
        except openai.APIConnectionError as e:
            raise NetworkError(f"Error sending request: {e}") from None
        except openai.APIStatusError as e:
            raise APIRequestError(
                self._extract_error_message(e), status_code=e.status_code
            ) from None

        try:
            payload = raw.http_response.json()
        except ValueError as e:
            raise ResponseFormatError(f"Error decoding response: {e}") from None

        return self._extract_reply(payload)
