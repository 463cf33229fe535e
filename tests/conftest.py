from __future__ import annotations

import json

import pytest

from core.streaming import StreamConfig, StreamDispatcher


def scholarship(title: str, **extra) -> dict:
    item = {
        "title": title,
        "institution": f"{title} Trust",
        "description": f"{title} description",
        "eligibility": "SC students",
    }
    item.update(extra)
    return item


def payload_text(titles=("A", "B", "C", "D", "E"), **extra) -> str:
    body = {
        "scholarships": [scholarship(t) for t in titles],
        "summary": "Five matching scholarships.",
        "recommendations": ["Apply early", "Keep caste certificate ready"],
        "additionalResources": [
            {
                "title": "National Scholarship Portal",
                "description": "Central schemes",
                "link": "https://scholarships.gov.in",
            }
        ],
    }
    body.update(extra)
    return json.dumps(body)


def parse_text(**fields) -> str:
    base = {"caste": "", "religion": "", "state": "", "educationLevel": ""}
    base.update(fields)
    return json.dumps(base)


def google_items() -> list[dict]:
    return [
        {"title": "  SC   Scholarship\n2024 ", "link": "https://a.example", "snippet": "Post  matric\tscheme"},
        {"title": "", "link": "https://b.example"},
        {"title": "No link"},
        {"title": "Karnataka scheme", "link": "https://c.example"},
    ]


def make_dispatcher(*, generate=None, parse_generate=None, search=None, **config) -> StreamDispatcher:
    cfg = {"batch_delay_ms": 0}
    cfg.update(config)
    return StreamDispatcher(
        generate=generate,
        parse_generate=parse_generate,
        search=search,
        config=StreamConfig(**cfg),
    )


async def collect(dispatcher: StreamDispatcher, params, evidence=None) -> list:
    return [event async for event in dispatcher.events(params, evidence)]


@pytest.fixture
def complete_params():
    from model.search import SearchParameters

    return SearchParameters(
        caste="SC", religion="Hindu", state="Karnataka", educationLevel="Engineering"
    )
