"""Fixed-window rate limiting for mutating requests.

Only POST requests are counted. Key pattern:
    "ratelimit:{subject}:{minute_window}"
where subject is the bearer token's `sub` when it decodes, otherwise the
client IP (first X-Forwarded-For hop when behind a proxy).

Redis logic:
    count = INCR key
    if count == 1: EXPIRE key 60
    if count > limit: 429 + Retry-After

If Redis is unreachable the request goes through and a warning is logged.
"""

import logging
import time
from collections.abc import Awaitable, Callable

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from src.pe_common.errors import InvalidCredentialsError, RateLimitError
from src.pe_common.redis_client import get_redis
from src.pe_common.response import error_response
from src.pe_gateway.auth.jwt_handler import caller_from_token

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60
_LIMITED_METHODS = frozenset({"POST"})


def _client_subject(request: Request) -> str:
    auth = request.headers.get("authorization", "")
    if auth.lower().startswith("bearer "):
        try:
            return f"user:{caller_from_token(auth[7:].strip())}"
        except InvalidCredentialsError:
            pass
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    return f"ip:{request.client.host if request.client else 'unknown'}"


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        limit_per_minute: int,
        enabled: bool = True,
        redis_factory: Callable[[], Awaitable[aioredis.Redis]] = get_redis,
    ) -> None:
        super().__init__(app)
        self._limit = limit_per_minute
        self._enabled = enabled
        self._redis_factory = redis_factory

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self._enabled or request.method not in _LIMITED_METHODS:
            return await call_next(request)

        now = int(time.time())
        key = f"ratelimit:{_client_subject(request)}:{now // WINDOW_SECONDS}"
        try:
            redis = await self._redis_factory()
            count = await redis.incr(key)
            if count == 1:
                await redis.expire(key, WINDOW_SECONDS)
        except (RedisError, OSError) as exc:
            logger.warning("Rate limiter unavailable, allowing request: %s", exc)
            return await call_next(request)

        if count > self._limit:
            err = RateLimitError()
            retry_after = WINDOW_SECONDS - now % WINDOW_SECONDS
            return JSONResponse(
                status_code=err.http_status,
                content=error_response(err.code, err.message, err.kind).model_dump(),
                headers={"Retry-After": str(retry_after)},
            )
        return await call_next(request)
