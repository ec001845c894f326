from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class AskIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Left untyped on purpose: `validate_question` owns the type check so that
    # non-text values get the same error envelope as every other rejection.
    pregunta: Any = Field(
        default=None,
        description="Free-text question (1-500 characters).",
        examples=["¿Qué modelo matemático describe la propagación del Ébola?"],
    )


class AskOut(BaseModel):
    success: Literal[True] = True
    respuesta: str = Field(
        description="Sanitized answer text.",
        examples=["El modelo SIR describe..."],
    )
    tokens: int = Field(
        ge=0,
        description="Total tokens reported by the upstream provider (0 if not reported).",
        examples=[187],
    )


@dataclass(frozen=True)
class Answer:
    text: str
    tokens: int
