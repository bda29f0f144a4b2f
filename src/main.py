"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.pe_account.api.router import router as account_router
from src.pe_common.database import check_database, engine
from src.pe_common.errors import AppError
from src.pe_common.redis_client import close_redis, ping_redis
from src.pe_common.response import error_response
from src.pe_gateway.middleware.rate_limit import RateLimitMiddleware
from src.pe_gateway.middleware.request_log import RequestLogMiddleware
from src.pe_listing.api.router import router as listing_router
from src.pe_matching.api.router import router as matching_router
from src.pe_platform.api.router import router as platform_router
from src.pe_reputation.api.router import router as reputation_router
from src.pe_trade.api.router import router as trade_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB (required) and Redis (optional). Shutdown: dispose."""
    await check_database()
    await ping_redis()
    yield
    # Shutdown
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# Starlette runs the last-added middleware first: request log wraps rate limit
app.add_middleware(
    RateLimitMiddleware,
    limit_per_minute=settings.RATE_LIMIT_PER_MINUTE,
    enabled=settings.RATE_LIMIT_ENABLED,
)
app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, exc.kind)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(listing_router, prefix="/api/v1")
app.include_router(trade_router, prefix="/api/v1")
app.include_router(matching_router, prefix="/api/v1")
app.include_router(reputation_router, prefix="/api/v1")
app.include_router(account_router, prefix="/api/v1")
app.include_router(platform_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
