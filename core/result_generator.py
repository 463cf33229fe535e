# core/result_generator.py
import logging
from typing import List, Optional, Sequence
from config.settings import settings
from core import anthropic_client
from model.search import EvidenceItem, SearchParameters
from util.functions import clip_words
from util.timing import timed
from util.types import GenerateFn

logger = logging.getLogger(__name__)


def _evidence_lines(evidence: Sequence[EvidenceItem]) -> List[str]:
    lines: List[str] = []
    for item in evidence:
        line = f"- {item.title}: {item.link}"
        if item.snippet:
            line += f"\n  {clip_words(item.snippet, max_words=40)}"
        lines.append(line)
    return lines


def build_prompt(params: SearchParameters, evidence: Sequence[EvidenceItem]) -> str:
    """
    User message for generation: the student background followed by the
    evidence list and the expected response shape.
    """
    lines = _evidence_lines(evidence) or ["(no search results available)"]
    return (
        "Student Background:\n"
        f"Caste: {params.caste}\n"
        f"Religion: {params.religion}\n"
        f"State: {params.state}\n"
        f"Education Level: {params.educationLevel}\n"
        "\n"
        "Recent Search Results:\n"
        + "\n".join(lines)
        + "\n\nInclude relevant links from the search results above.\n\n"
        + settings.GENERATE_RESPONSE_FORMAT
    )


async def _default_generate(prompt: str) -> str:
    return await anthropic_client.generate(
        prompt,
        system=settings.GENERATE_SYSTEM_PROMPT,
        max_tokens=settings.GENERATE_MAX_TOKENS,
        temperature=settings.GENERATE_TEMPERATURE,
    )


async def generate_results(
    params: SearchParameters,
    evidence: Sequence[EvidenceItem],
    *,
    generate: Optional[GenerateFn] = None,
) -> str:
    """Single generation call; the raw text is returned unvalidated."""
    gen = generate or _default_generate
    with timed(logger, "generate.results", evidence=len(evidence)):
        raw = await gen(build_prompt(params, evidence))
    return raw
