from __future__ import annotations

from fastapi import Request

from app.core.llm.openai_client import OpenAIClient, OpenAIConfig


def get_openai_client(request: Request) -> OpenAIClient | None:
    """
    Dependency provider for OpenAIClient.

    Uses the settings the app was built with (`app.state.settings`), so an app
    created with injected settings talks to the provider those settings name.
    Returns None when no API key is configured so the route can fail with a
    configuration error before any network call. Resolved per request.
    """

    settings = request.app.state.settings
    if not settings.openai_api_key:
        return None

    config = OpenAIConfig(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        model=settings.openai_model,
        timeout_seconds=float(settings.openai_timeout_seconds),
    )
    return OpenAIClient(config=config, transport=getattr(request.app.state, "llm_transport", None))
