"""
Tests for password hashing and token issuing.
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from app.core.config import settings
from app.core.errors import InvalidToken
from app.core.security import create_access_token, decode_token, hash_password, verify_password


def test_hash_is_salted():
    a = hash_password("s3nha-forte")
    b = hash_password("s3nha-forte")
    assert a != b
    assert verify_password("s3nha-forte", a)
    assert verify_password("s3nha-forte", b)


def test_verify_rejects_wrong_password():
    assert verify_password("wrong", hash_password("right")) is False


def test_verify_rejects_garbage_hash():
    assert verify_password("anything", "not-a-hash") is False


def test_token_round_trip():
    token = create_access_token(subject="user-1", role="MOTORISTA")
    payload = decode_token(token)
    assert payload["sub"] == "user-1"
    assert payload["role"] == "MOTORISTA"


def test_expired_token_rejected():
    expired = jwt.encode(
        {"sub": "user-1", "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALG,
    )
    with pytest.raises(InvalidToken):
        decode_token(expired)


def test_foreign_signature_rejected():
    forged = jwt.encode({"sub": "user-1"}, "another-secret-that-is-long-enough-xxxx", algorithm="HS256")
    with pytest.raises(InvalidToken):
        decode_token(forged)


def test_token_without_subject_rejected():
    token = jwt.encode({"role": "ADMIN"}, settings.JWT_SECRET, algorithm=settings.JWT_ALG)
    with pytest.raises(InvalidToken):
        decode_token(token)
