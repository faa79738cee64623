from __future__ import annotations


class ATSMatchError(RuntimeError):
    """Base class for engine errors; ``code`` is a stable machine-readable tag."""

    code = "internal_error"

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        if code:
            self.code = code


class InputInvalid(ATSMatchError):
    code = "input_invalid"


class ReasoningServiceError(ATSMatchError):
    code = "llm_error"


class ServiceUnavailable(ReasoningServiceError):
    code = "llm_unavailable"


class QuotaExceeded(ReasoningServiceError):
    code = "llm_quota_exceeded"


class MalformedResponse(ReasoningServiceError):
    code = "llm_invalid"


class InternalComputeError(ATSMatchError):
    code = "internal_compute_error"


def require_text(value: str | None, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise InputInvalid(f"Missing required field: {field_name}")
    return str(value)
