# main.py
from fastapi_limiter import FastAPILimiter
import routes
import logging
from contextlib import asynccontextmanager
from util.enums import Environment, Color, ErrorMessage
from util.errors import AppError
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.middleware.cors import CORSMiddleware
from config.settings import settings
from config.cache import close_redis, get_redis
from controller.controller_dependencies import real_ip
from fastapi.responses import JSONResponse
from model.api import ErrorResponse
from util.constants import InternalURIs
from util.logger import init_logger

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(fastApi: FastAPI):
    init_logger()
    print(f"{Color.GREEN}Initializing...{Color.RESET}")
    if settings.REDIS_URL:
        try:
            redis = await get_redis()
            await FastAPILimiter.init(redis, identifier=real_ip)
        except Exception as e:
            print("Failed to connect to Redis:", e)
            raise
    else:
        logger.warning("ratelimit.disabled reason=no_redis_url")
    print(f"{Color.BLUE}Server Started{Color.RESET}")

    try:
        yield
    finally:
        if settings.REDIS_URL:
            try:
                await close_redis()
            except Exception as e:
                print("Error closing Redis:", e)

        print(f"{Color.RED}Server Shutdown{Color.RESET}")


app: FastAPI = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.ALLOWED_ORIGIN],
    allow_credentials=True,  # Allow cookies and other credentials
    allow_methods=["GET", "POST"],  # Allowed HTTP Methods
    allow_headers=["Authorization", "Content-Type", "Accept"],  # Allowed HTTP Headers
)


@app.get(InternalURIs.HEALTHZ)
async def healthz():
    return {"ok": True}


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    body = ErrorResponse(error=str(exc.detail), details=exc.details)
    return JSONResponse(
        status_code=exc.status_code, content=body.model_dump(exclude_none=True)
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    bad_tag = any(
        e.get("type") in ("union_tag_invalid", "union_tag_not_found") for e in errors
    )
    info = (
        ErrorMessage.INVALID_SEARCH_TYPE.value
        if bad_tag
        else ErrorMessage.INVALID_REQUEST.value
    )
    details = "; ".join(
        f"{'.'.join(str(x) for x in e.get('loc', []))}: {e.get('msg', '')}"
        for e in errors
    )
    body = ErrorResponse(error=info.message, details=details or None)
    return JSONResponse(
        status_code=info.http_status, content=body.model_dump(exclude_none=True)
    )


@app.exception_handler(429)
async def ratelimit_handler(request: Request, exc):
    return JSONResponse(
        status_code=429,
        content={
            "ok": False,
            "error": "rate_limited",
            "message": f"Too many requests. Try again in {settings.RATE_LIMIT_SECONDS}s.",
        },
        headers={"Retry-After": str(settings.RATE_LIMIT_SECONDS)},
    )


routes.register_routes(app)

if __name__ == "__main__":
    import uvicorn

    reload = settings.APP_ENV == Environment.DEV
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=reload)
