from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

import httpx


class OpenAIError(Exception):
    """Base error for OpenAI client failures (safe to map to 502)."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class OpenAIUpstreamError(OpenAIError):
    """Raised when OpenAI API fails or returns an unexpected response."""


class OpenAIEmptyResponseError(OpenAIUpstreamError):
    """Raised when a successful completion carries no text."""


class OpenAITimeoutError(OpenAIError):
    """Raised when a completion does not finish within the configured deadline."""


@dataclass(frozen=True)
class OpenAIConfig:
    api_key: str
    base_url: str
    model: str
    timeout_seconds: float


@dataclass(frozen=True)
class Completion:
    text: str
    total_tokens: int


def _extract_error_message(resp: httpx.Response) -> str:
    """Return the provider's `error.message` when present, else a status-based message."""

    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str) and error["message"]:
            return error["message"]
        if isinstance(error, str) and error:
            return error
    return f"upstream returned status {resp.status_code}"


def _first_choice_text(data: dict[str, Any]) -> str | None:
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


class OpenAIClient:
    """
    Minimal chat-completions client.

    Design notes:
    - No logging in this module (prompts/outputs are user content).
    - One attempt per call; no retries.
    - The whole call (connect, send, read) is bounded by `timeout_seconds`. On expiry
      the in-flight request is cancelled and the underlying connection closed.
    """

    def __init__(
        self,
        *,
        config: OpenAIConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = config
        self._transport = transport

    async def complete(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> Completion:
        payload: dict[str, Any] = {
            "model": self._config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        try:
            resp = await asyncio.wait_for(
                self._post(path="/chat/completions", payload=payload),
                timeout=self._config.timeout_seconds,
            )
        except (TimeoutError, httpx.TimeoutException) as exc:
            raise OpenAITimeoutError("LLM request timed out") from exc
        except httpx.HTTPError as exc:
            raise OpenAIUpstreamError("LLM request failed") from exc

        if not resp.is_success:
            raise OpenAIUpstreamError(
                _extract_error_message(resp), status_code=resp.status_code
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise OpenAIUpstreamError("LLM response was not valid JSON") from exc
        if not isinstance(data, dict):
            raise OpenAIUpstreamError("LLM response JSON must be an object")

        content = _first_choice_text(data)
        if not content or not content.strip():
            raise OpenAIEmptyResponseError("empty response")

        usage = data.get("usage")
        total_tokens = usage.get("total_tokens") if isinstance(usage, dict) else None
        return Completion(
            text=content,
            total_tokens=int(total_tokens) if isinstance(total_tokens, int) else 0,
        )

    async def _post(self, *, path: str, payload: dict[str, Any]) -> httpx.Response:
        url = f"{self._config.base_url.rstrip('/')}{path}"
        headers = {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
        }
        async with httpx.AsyncClient(
            timeout=self._config.timeout_seconds, transport=self._transport
        ) as client:
            return await client.post(url, headers=headers, json=payload)
