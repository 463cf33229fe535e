# core/response_validator.py
import json
import logging
import re
from pydantic import ValidationError
from model.scholarship import GenerationPayload, ValidationResult

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"```(?:json)?\n?|\n?```", re.IGNORECASE)


def strip_code_fences(raw: str) -> str:
    """Remove Markdown code-fence markers (```json / ```) and trim."""
    return _FENCE.sub("", raw or "").strip()


def validate_response(raw: str) -> ValidationResult:
    """
    Single strict parse of model output into a GenerationPayload.
    Total: any decode or schema failure yields isValid=False with no data.
    """
    cleaned = strip_code_fences(raw if isinstance(raw, str) else "")
    try:
        payload = GenerationPayload.model_validate(json.loads(cleaned))
    except (ValueError, ValidationError, TypeError, RecursionError) as e:
        logger.warning("validate.invalid err=%s chars=%d", type(e).__name__, len(cleaned))
        return ValidationResult(isValid=False, data=None)

    logger.info(
        "validate.ok scholarships=%d recs=%d resources=%d",
        len(payload.scholarships),
        len(payload.recommendations or []),
        len(payload.additionalResources or []),
    )
    return ValidationResult(isValid=True, data=payload)
