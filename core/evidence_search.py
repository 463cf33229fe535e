# core/evidence_search.py
import logging
from typing import Any, Dict, Iterable, List, Optional
from config.settings import settings
from core import google_search
from model.search import EvidenceItem, SearchParameters
from util.functions import normalize_whitespace
from util.timing import timed
from util.types import SearchFn

logger = logging.getLogger(__name__)

MAX_EVIDENCE = 10


def clean_items(raw_items: Iterable[Dict[str, Any]], limit: int = MAX_EVIDENCE) -> List[EvidenceItem]:
    """
    Normalize whitespace in title/snippet, drop items lacking a title or link,
    keep relevance order and cap at `limit`.
    """
    out: List[EvidenceItem] = []
    for item in raw_items:
        if len(out) >= limit:
            break
        if not isinstance(item, dict):
            continue
        raw_title, raw_link, raw_snippet = item.get("title"), item.get("link"), item.get("snippet")
        if not isinstance(raw_title, str) or not isinstance(raw_link, str):
            continue
        title = normalize_whitespace(raw_title)
        link = raw_link.strip()
        if not title or not link:
            continue
        snippet = normalize_whitespace(raw_snippet) if isinstance(raw_snippet, str) else ""
        out.append(EvidenceItem(title=title, link=link, snippet=snippet or None))
    return out


async def _default_search(query: str) -> List[Dict[str, Any]]:
    return await google_search.search(query, num=settings.SEARCH_MAX_RESULTS)


async def search_evidence(
    params: SearchParameters, *, search: Optional[SearchFn] = None
) -> List[EvidenceItem]:
    """
    Fetch grounding evidence for `params`. Never raises: any failure of the
    underlying search is logged and degrades to an empty list.
    """
    query = params.search_query()
    run = search or _default_search
    try:
        with timed(logger, "search.evidence"):
            raw = await run(query)
        items = clean_items(raw or [], limit=min(MAX_EVIDENCE, settings.SEARCH_MAX_RESULTS))
    except Exception as e:
        logger.error("search.error kind=%s err=%s", type(e).__name__, e)
        return []
    logger.info("search.result count=%d", len(items))
    return items
