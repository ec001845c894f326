from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from app.api.schemas import ErrorOut
from app.core.llm.deps import get_openai_client
from app.core.llm.openai_client import (
    OpenAIEmptyResponseError,
    OpenAIError,
    OpenAITimeoutError,
)
from app.core.metrics import upstream_completions_total
from app.domain.exceptions import MissingCredentialError, UpstreamError, UpstreamTimeoutError
from app.relay.schemas import AskIn, AskOut
from app.relay.service import QuestionRelayService
from app.relay.validation import validate_question

router = APIRouter(prefix="/api", tags=["relay"])
logger = logging.getLogger("app.relay")


@router.post(
    "/ask",
    response_model=AskOut,
    summary="Ask a question",
    responses={
        400: {"model": ErrorOut, "description": "Invalid or forbidden question."},
        413: {"model": ErrorOut, "description": "Request body larger than 10 KB."},
        429: {"model": ErrorOut, "description": "Rate limit exceeded."},
        500: {"model": ErrorOut, "description": "Upstream API key not configured."},
        502: {"model": ErrorOut, "description": "Upstream provider failed."},
        504: {"model": ErrorOut, "description": "Upstream provider timed out."},
    },
)
async def ask(
    payload: AskIn,
    request: Request,
    openai_client=Depends(get_openai_client),
) -> AskOut:
    """
    Relay one question to the completion provider and return the sanitized answer.

    Nothing is stored; neither the question nor the answer is logged.
    """

    question = validate_question(payload.pregunta)
    request_id = getattr(request.state, "request_id", None)

    if openai_client is None:
        upstream_completions_total.labels(outcome="missing_credential").inc()
        logger.error(
            "Question relay failed (upstream API key not configured)",
            extra={"request_id": request_id, "success": False, "error": "missing_credential"},
        )
        raise MissingCredentialError()

    svc = QuestionRelayService(llm_client=openai_client)
    try:
        answer = await svc.ask(question=question)
    except OpenAITimeoutError:
        upstream_completions_total.labels(outcome="timeout").inc()
        raise UpstreamTimeoutError() from None
    except OpenAIError as exc:
        upstream_completions_total.labels(outcome="upstream_error").inc()
        logger.warning(
            "Question relay failed",
            extra={
                "request_id": request_id,
                "success": False,
                "error": exc.message,
                "upstream_status": exc.status_code,
            },
        )
        message = (
            "empty response from upstream"
            if isinstance(exc, OpenAIEmptyResponseError)
            else "upstream service error"
        )
        raise UpstreamError(message) from None

    upstream_completions_total.labels(outcome="success").inc()
    logger.info(
        "Question relayed",
        extra={"request_id": request_id, "success": True, "tokens": answer.tokens},
    )
    return AskOut(respuesta=answer.text, tokens=answer.tokens)
