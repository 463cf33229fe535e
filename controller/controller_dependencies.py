# controller/controller_dependencies.py
from typing import List
from fastapi import Depends, Request
from fastapi_limiter.depends import RateLimiter
from config.settings import settings
from core.streaming import StreamDispatcher
from service.scholarship_service import ScholarshipService


def get_stream_dispatcher() -> StreamDispatcher:
    return StreamDispatcher()


def get_scholarship_service(
    dispatcher: StreamDispatcher = Depends(get_stream_dispatcher),
) -> ScholarshipService:
    return ScholarshipService(dispatcher)


def rate_limit_dependencies() -> List:
    """Attach the Redis-backed limiter only when Redis is configured."""
    if not settings.REDIS_URL:
        return []
    return [
        Depends(
            RateLimiter(
                times=settings.RATE_LIMIT_TIMES, seconds=settings.RATE_LIMIT_SECONDS
            )
        )
    ]


async def real_ip(request: Request) -> str:
    if settings.TRUST_PROXY:
        fwd = request.headers.get("x-forwarded-for")
        if fwd:
            return fwd.split(",")[0].strip()
    return request.client.host if request.client else "unknown"
