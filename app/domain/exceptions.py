from __future__ import annotations

from datetime import datetime


class RelayError(Exception):
    """Base class for failures rendered as `{success: false, error, code}`."""

    status_code: int = 500
    error_kind: str = "relay_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class QuestionValidationError(RelayError):
    """Raised when a question is malformed or violates the content policy."""

    status_code = 400
    error_kind = "question_validation"


class PayloadTooLargeError(RelayError):
    status_code = 413
    error_kind = "payload_too_large"

    def __init__(self, message: str = "payload too large"):
        super().__init__(message)


class RateLimitExceededError(RelayError):
    """Raised when a client exhausts its request budget for the current window."""

    status_code = 429
    error_kind = "rate_limited"

    def __init__(self, *, retry_after: datetime, message: str | None = None):
        super().__init__(message or "Too many requests, please try again later.")
        self.retry_after = retry_after


class MissingCredentialError(RelayError):
    status_code = 500
    error_kind = "missing_credential"

    def __init__(self, message: str = "server misconfiguration: upstream API key is not set"):
        super().__init__(message)


class UpstreamError(RelayError):
    """Raised when the completion provider fails or returns an unusable payload."""

    status_code = 502
    error_kind = "upstream_error"


class UpstreamTimeoutError(RelayError):
    status_code = 504
    error_kind = "upstream_timeout"

    def __init__(self, message: str = "upstream request timed out"):
        super().__init__(message)
