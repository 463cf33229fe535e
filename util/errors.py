# util/errors.py
import asyncio
from typing import Optional
from fastapi import HTTPException, status


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    def __init__(
        self,
        message: str,
        http_status: int = status.HTTP_400_BAD_REQUEST,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(status_code=http_status, detail=message)
        self.details = details


class PipelineError(Exception):
    """Base of the pipeline failure taxonomy. `kind` tags the failure for callers."""

    kind: str = "UnknownError"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.kind)
        self.message = message or self.kind


class StageTimeoutError(PipelineError, TimeoutError):
    kind = "TimeoutError"

    def __init__(self, stage: str, timeout_ms: Optional[int] = None) -> None:
        if timeout_ms is None:
            super().__init__(f"Stage '{stage}' timed out")
        else:
            super().__init__(f"Stage '{stage}' exceeded {timeout_ms}ms")
        self.stage = stage
        self.timeout_ms = timeout_ms


class ParseError(PipelineError):
    kind = "ParseError"


class SearchTransportError(PipelineError):
    # Absorbed by evidence search; never surfaces as a pipeline failure.
    kind = "SearchTransportError"


class GenerationFormatError(PipelineError):
    kind = "GenerationFormatError"


class UnknownError(PipelineError):
    kind = "UnknownError"


def classify(exc: BaseException) -> PipelineError:
    """
    Map any exception onto the taxonomy. Timeouts stay timeouts (including a raw
    asyncio/builtin TimeoutError); anything outside the taxonomy becomes UnknownError.
    """
    if isinstance(exc, PipelineError):
        return exc
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return StageTimeoutError("unknown")
    return UnknownError(str(exc) or type(exc).__name__)
