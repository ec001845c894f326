from __future__ import annotations

from pydantic import BaseModel, Field


class LivenessOut(BaseModel):
    """Liveness probe response."""

    status: str = Field(
        description="`success` means the API process is up and responding.",
        examples=["success"],
    )
    message: str = Field(examples=["Server is running"])
    timestamp: str = Field(
        description="Server time (ISO-8601, UTC).",
        examples=["2026-10-19T12:00:00+00:00"],
    )
    version: str = Field(examples=["1.0.0"])


class ErrorOut(BaseModel):
    """Failure envelope shared by every error path."""

    success: bool = Field(default=False, examples=[False])
    error: str = Field(examples=["question must not exceed 500 characters"])
    code: int | None = Field(default=None, examples=[400])
    retryAfter: str | None = Field(
        default=None,
        description="Only present on 429 responses: when the client may retry (ISO-8601, UTC).",
    )
