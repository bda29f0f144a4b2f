"""JWT access token creation and verification.

The caller identity is the token's `sub` claim. The exchange never
authenticates identities itself: tokens are issued by an external identity
provider sharing JWT_SECRET (or by `create_access_token` for tooling/tests)
and the core only compares identities for equality.

NOTE: Using HS256 (symmetric HMAC). For a multi-service deployment, switch
to RS256 so only the issuer holds the signing key.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.pe_account.domain.constants import MAX_IDENTITY_LENGTH
from src.pe_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def create_access_token(identity: str) -> str:
    """Issue a short-lived access token for `identity` (default: 30 min)."""
    now = datetime.now(UTC)
    payload = {
        "sub": identity,
        "type": "access",
        "iat": now,
        "exp": now + _ACCESS_EXPIRE,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_token(token: str) -> dict[str, str]:
    """Decode and validate an access token.

    Raises:
        InvalidCredentialsError: signature invalid, token expired, or not an
            access token.
    """
    try:
        payload: dict[str, str] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != "access":
        raise InvalidCredentialsError()
    return payload


def caller_from_token(token: str) -> str:
    """Return the caller identity carried by a valid access token.

    The subject must fit the identity columns (MAX_IDENTITY_LENGTH chars).
    """
    identity = decode_token(token).get("sub")
    if not isinstance(identity, str) or not 0 < len(identity) <= MAX_IDENTITY_LENGTH:
        raise InvalidCredentialsError()
    return identity
