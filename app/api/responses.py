from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse


def error_response(
    *,
    status_code: int,
    message: str,
    include_code: bool = True,
    **extra: Any,
) -> JSONResponse:
    """Render the uniform failure envelope `{success: false, error, code}`."""

    content: dict[str, Any] = {"success": False, "error": message}
    if include_code:
        content["code"] = status_code
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)
