"""FastAPI dependencies: get_caller_id, require_platform_owner.

Usage in any protected router:
    from src.pe_gateway.auth.dependencies import get_caller_id

    @router.post("/protected")
    async def protected(caller: Annotated[str, Depends(get_caller_id)]):
        ...
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config.settings import settings
from src.pe_common.errors import InvalidCredentialsError, OwnerOnlyError
from src.pe_gateway.auth.jwt_handler import caller_from_token

bearer_scheme = HTTPBearer(auto_error=False)

# Reusable 401 exception with WWW-Authenticate header
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_caller_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str:
    """Extract the caller identity from the Bearer token.

    Raises HTTP 401 if the token is missing, invalid, or expired.
    """
    if credentials is None:
        raise _CREDENTIALS_EXCEPTION
    try:
        return caller_from_token(credentials.credentials)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None


async def require_platform_owner(
    caller: Annotated[str, Depends(get_caller_id)],
) -> str:
    """Verify the caller is the configured platform owner (OwnerOnly otherwise)."""
    if caller != settings.PLATFORM_OWNER_ID:
        raise OwnerOnlyError()
    return caller
