"""Question validation and content-policy checks.

Applied before any upstream call. Every check is a pure function of the input;
the first violation rejects the whole question.

The keyword denylists are blunt and will reject some legitimate technical
questions (e.g. anything mentioning "script" or "update"). That is the accepted
behavior of this service.
"""

from __future__ import annotations

import re
from typing import Any

from app.domain.exceptions import QuestionValidationError

MAX_QUESTION_CHARS = 500

# Characters stripped from answers and refused in questions.
FORBIDDEN_CHARS_PATTERN = re.compile(r"[<>{}\[\]\\]")

_OPERATIONAL_PATTERN = re.compile(
    r"\b(?:delete|drop|truncate|insert|update|alter|exec|execute|eval|union)\b"
    r"|\bselect\b.+\bfrom\b",
    re.IGNORECASE,
)
_SCRIPTING_PATTERN = re.compile(
    r"\bscript\b|\b(?:javascript|vbscript|data|file)\s*:"
    # Inline DOM event handlers only; ordinary words such as "ondas" must pass.
    r"|\bon(?:error|load|unload|abort|click|dblclick|contextmenu"
    r"|mouse(?:over|out|down|up|move|enter|leave)|key(?:down|up|press)"
    r"|focus|blur|submit|change|input|select|reset|resize|scroll|wheel"
    r"|copy|cut|paste|drag\w*|drop|pointer\w*|animation\w*|transition\w*|toggle)\s*=",
    re.IGNORECASE,
)
_CREDENTIAL_PATTERN = re.compile(
    r"\b(?:password|passwd|secret|api[\s_-]?key|apikey|token|credentials?)\b",
    re.IGNORECASE,
)

_FORBIDDEN_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (_OPERATIONAL_PATTERN, "question contains forbidden keywords"),
    (_SCRIPTING_PATTERN, "question contains forbidden keywords"),
    (_CREDENTIAL_PATTERN, "question asks for sensitive information"),
    (FORBIDDEN_CHARS_PATTERN, "question contains forbidden characters"),
)


def validate_question(value: Any) -> str:
    """Return the trimmed question or raise QuestionValidationError with the reason."""

    if value is None:
        raise QuestionValidationError("question is required")
    if not isinstance(value, str):
        raise QuestionValidationError("question must be text")

    question = value.strip()
    if not question:
        raise QuestionValidationError("question must not be empty")
    if len(value) > MAX_QUESTION_CHARS:
        raise QuestionValidationError(
            f"question must not exceed {MAX_QUESTION_CHARS} characters"
        )

    for pattern, reason in _FORBIDDEN_PATTERNS:
        if pattern.search(question):
            raise QuestionValidationError(reason)

    return question
