# core/anthropic_client.py
from typing import Dict, Any, Optional
import httpx
from config.settings import settings
import logging
from util.timing import timed

logger = logging.getLogger(__name__)


async def _post_json(
    url: str, headers: Dict[str, str], payload: Dict[str, Any], timeout: float = 60.0
) -> Dict[str, Any]:
    """
    Make a JSON POST to `url`. Raises for non-2xx. Returns parsed JSON dict or {} on parse failure.
    """
    async with httpx.AsyncClient(timeout=timeout) as client:
        r = await client.post(url, headers=headers, json=payload)
        r.raise_for_status()
        try:
            return r.json()
        except ValueError:
            return {}


def _first_text(data: Dict[str, Any]) -> str:
    content = data.get("content") or []
    if content and isinstance(content, list):
        node = content[0]
        if isinstance(node, dict) and node.get("type") == "text":
            return node.get("text") or ""
    return ""


async def generate(
    prompt: str,
    *,
    system: Optional[str] = None,
    max_tokens: int = settings.GENERATE_MAX_TOKENS,
    temperature: float = settings.GENERATE_TEMPERATURE,
    timeout: float = 60.0,
) -> str:
    """
    Text completion over the Anthropic Messages API.
    Returns the first text block ("" when the response carries none); raises on transport/HTTP errors.
    """
    headers = {
        "x-api-key": settings.ANTHROPIC_API_KEY,
        "anthropic-version": settings.ANTHROPIC_VERSION,
        "content-type": "application/json",
    }
    payload: Dict[str, Any] = {
        "model": settings.ANTHROPIC_MODEL,
        "max_tokens": max_tokens,
        "messages": [{"role": "user", "content": prompt}],
        "temperature": temperature,
    }
    if system:
        payload["system"] = system

    with timed(logger, "ai.generate", model=settings.ANTHROPIC_MODEL):
        data = await _post_json(
            settings.ANTHROPIC_API_URL, headers, payload, timeout=timeout
        )

    text = _first_text(data) if isinstance(data, dict) else ""
    logger.info("ai.generate.result chars=%d", len(text))
    return text
