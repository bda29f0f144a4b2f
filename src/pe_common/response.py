"""Response envelope shared by every /api/v1 route.

A successful purchase, for example, comes back as

    {"code": 0, "message": "success",
     "data": {"trade_id": 7, "escrow_amount": 250000, ...},
     "error": null, "timestamp": "2026-10-18T09:30:00+00:00",
     "request_id": "req_a1b2c3d4e5f6"}

and a rejected one as code 2001 with data null and error "InsufficientFunds".
`error` carries the failure kind callers branch on; `code` is the numeric
AppError code. Routers overwrite request_id with the one RequestLogMiddleware
assigned, so the body matches the X-Request-ID header.
"""

import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


def _new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    error: str | None = None
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    request_id: str = Field(default_factory=_new_request_id)


def success_response(data: Any = None) -> ApiResponse:
    return ApiResponse(data=data)


def error_response(code: int, message: str, kind: str | None = None) -> ApiResponse:
    """Failure envelope: data is always null, error is the kind (e.g. "TradeExpired")."""
    return ApiResponse(code=code, message=message, error=kind)
