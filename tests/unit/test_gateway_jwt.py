"""Unit tests for JWT handler."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from jose import jwt

from config.settings import settings
from src.pe_account.domain.constants import MAX_IDENTITY_LENGTH
from src.pe_common.errors import InvalidCredentialsError
from src.pe_gateway.auth.jwt_handler import caller_from_token, create_access_token, decode_token


def test_access_token_contains_correct_claims() -> None:
    token = create_access_token("seller-123")
    payload = jwt.get_unverified_claims(token)
    assert payload["sub"] == "seller-123"
    assert payload["type"] == "access"


def test_caller_from_token() -> None:
    assert caller_from_token(create_access_token("buyer-9")) == "buyer-9"


def test_expired_token_raises() -> None:
    with patch("src.pe_gateway.auth.jwt_handler._ACCESS_EXPIRE", timedelta(seconds=-1)):
        token = create_access_token("buyer-9")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_wrong_secret_raises() -> None:
    token = jwt.encode({"sub": "mallory", "type": "access"}, "not-the-secret", algorithm="HS256")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_non_access_token_raises() -> None:
    token = jwt.encode({"sub": "buyer-9", "type": "refresh"}, settings.JWT_SECRET, algorithm="HS256")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_missing_subject_raises() -> None:
    token = jwt.encode({"type": "access"}, settings.JWT_SECRET, algorithm="HS256")
    with pytest.raises(InvalidCredentialsError):
        caller_from_token(token)


def test_subject_at_identity_limit_accepted() -> None:
    identity = "u" * MAX_IDENTITY_LENGTH
    assert caller_from_token(create_access_token(identity)) == identity


def test_subject_longer_than_identity_columns_raises() -> None:
    token = create_access_token("u" * (MAX_IDENTITY_LENGTH + 1))
    with pytest.raises(InvalidCredentialsError):
        caller_from_token(token)


def test_garbage_token_raises() -> None:
    with pytest.raises(InvalidCredentialsError):
        decode_token("not.a.jwt")
