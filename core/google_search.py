# core/google_search.py
from typing import Any, Dict, List
import httpx
from config.settings import settings
import logging
from util.errors import SearchTransportError
from util.timing import timed

logger = logging.getLogger(__name__)


async def search(query: str, *, num: int = 10, timeout: float = 15.0) -> List[Dict[str, Any]]:
    """
    Query Google Custom Search and return the raw `items` list.
    Raises SearchTransportError for missing credentials, transport errors, non-2xx or bad bodies.
    """
    if not settings.GOOGLE_SEARCH_API_KEY or not settings.GOOGLE_CSE_ID:
        raise SearchTransportError("Missing Google API key or Search Engine ID")

    params = {
        "key": settings.GOOGLE_SEARCH_API_KEY,
        "cx": settings.GOOGLE_CSE_ID,
        "q": query,
        "num": str(max(1, min(num, 10))),
        "safe": "active",
        "gl": "in",
        "cr": "countryIN",
        "lr": "lang_en",
        "sort": "date",
    }
    try:
        with timed(logger, "google.search", num=params["num"]):
            async with httpx.AsyncClient(timeout=timeout) as client:
                res = await client.get(settings.GOOGLE_SEARCH_URL, params=params)
    except httpx.RequestError as e:
        raise SearchTransportError(f"Search request failed: {type(e).__name__}") from e

    if res.status_code // 100 != 2:
        reason = ""
        try:
            reason = (res.json().get("error") or {}).get("message") or ""
        except (ValueError, AttributeError):
            pass
        raise SearchTransportError(
            f"Search API returned {res.status_code}" + (f": {reason}" if reason else "")
        )

    try:
        body = res.json()
    except ValueError as e:
        raise SearchTransportError("Search API returned a non-JSON body") from e

    items = body.get("items") if isinstance(body, dict) else None
    if not items:
        logger.info("google.search.empty")
        return []
    return [i for i in items if isinstance(i, dict)]
