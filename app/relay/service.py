from __future__ import annotations

import re
from typing import Protocol

from app.core.llm.openai_client import Completion
from app.relay.prompt import MAX_ANSWER_TOKENS, SYSTEM_PROMPT, TEMPERATURE, build_user_prompt
from app.relay.schemas import Answer
from app.relay.validation import FORBIDDEN_CHARS_PATTERN

_REPEATED_SPACES = re.compile(r"[ \t]{2,}")


class LLMClient(Protocol):
    async def complete(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> Completion: ...


def sanitize_answer(text: str) -> str:
    """Strip the characters refused on input and tidy the gaps they leave."""

    stripped = FORBIDDEN_CHARS_PATTERN.sub("", text)
    stripped = _REPEATED_SPACES.sub(" ", stripped)
    return "\n".join(line.strip() for line in stripped.strip().splitlines())


class QuestionRelayService:
    """Forward one validated question upstream and shape the answer.

    Upstream failures propagate as the client's own exceptions; mapping them to
    HTTP statuses is the router's job.
    """

    def __init__(self, *, llm_client: LLMClient):
        self._llm = llm_client

    async def ask(self, *, question: str) -> Answer:
        completion = await self._llm.complete(
            system_prompt=SYSTEM_PROMPT,
            user_prompt=build_user_prompt(question),
            max_tokens=MAX_ANSWER_TOKENS,
            temperature=TEMPERATURE,
        )
        return Answer(text=sanitize_answer(completion.text), tokens=completion.total_tokens)
