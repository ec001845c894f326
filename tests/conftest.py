from __future__ import annotations

import pytest

_RELAY_ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "OPENAI_MODEL",
    "OPENAI_TIMEOUT_SECONDS",
    "FRONTEND_URL",
    "ALLOWED_ORIGIN",
    "RATE_LIMIT_WINDOW_MINUTES",
    "RATE_LIMIT_MAX_REQUESTS",
    "TRUST_PROXY",
    "MAX_BODY_BYTES",
    "APP_ENV",
    "NODE_ENV",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _RELAY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("FRONTEND_URL", "http://localhost:5173")
    # Settings are cached via @lru_cache; clear so each test sees its own environment.
    from app.core.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from app.main import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c
