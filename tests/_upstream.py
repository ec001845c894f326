"""Mock chat-completion upstream for tests."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from typing import Any

import httpx

from app.core.llm.openai_client import OpenAIClient, OpenAIConfig


def completion_payload(text: str | None, *, total_tokens: int | None = 42) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": text}}],
    }
    if total_tokens is not None:
        payload["usage"] = {
            "prompt_tokens": 10,
            "completion_tokens": total_tokens - 10,
            "total_tokens": total_tokens,
        }
    return payload


class RecordingUpstream:
    """An httpx handler that records requests and replies with a canned response."""

    def __init__(self, *, status_code: int = 200, body: Any = None):
        self.status_code = status_code
        self.body = body if body is not None else completion_payload("Respuesta de prueba")
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, content=self.body)

    def sent_json(self, index: int = -1) -> dict[str, Any]:
        return json.loads(self.requests[index].content)


class HangingUpstream:
    """An async httpx handler that never answers; records whether it was cancelled."""

    def __init__(self) -> None:
        self.started = False
        self.cancelled = False

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.started = True
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return httpx.Response(200, json=completion_payload("too late"))


def make_client(
    handler: Callable[[httpx.Request], Any],
    *,
    timeout_seconds: float = 5.0,
) -> OpenAIClient:
    config = OpenAIConfig(
        api_key="sk-test",
        base_url="https://llm.test/v1",
        model="gpt-test",
        timeout_seconds=timeout_seconds,
    )
    return OpenAIClient(config=config, transport=httpx.MockTransport(handler))
