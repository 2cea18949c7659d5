# ABOUTME: Unit tests for auth: password hashing, credential validation, JWT create/decode.
# ABOUTME: Does not call the API; tests core.auth and config.

import pytest
from uuid import uuid4

from core.auth import (
    create_access_token,
    decode_access_token,
    hash_password,
    normalize_email,
    validate_email,
    validate_password_length,
    validate_username,
    verify_password,
)


def test_hash_password_returns_different_each_time():
    """Hashing the same password twice yields different salts."""
    h1 = hash_password("samepassword")
    h2 = hash_password("samepassword")
    assert h1 != h2
    assert verify_password("samepassword", h1)
    assert verify_password("samepassword", h2)


def test_verify_password_rejects_wrong_password():
    hashed = hash_password("correct-horse")
    assert verify_password("correct-horse", hashed) is True
    assert verify_password("wrong", hashed) is False


def test_long_passwords_are_truncated_consistently():
    """bcrypt only sees the first 72 bytes; hashing must not fail on longer input."""
    long_pw = "p" * 100
    hashed = hash_password(long_pw)
    assert verify_password(long_pw, hashed)
    assert verify_password("p" * 72, hashed)


def test_validate_password_length():
    validate_password_length("a" * 8)
    with pytest.raises(ValueError, match="at least"):
        validate_password_length("short")
    with pytest.raises(ValueError):
        validate_password_length("")


def test_validate_username_raises_empty():
    validate_username("alice")
    with pytest.raises(ValueError, match="cannot be empty"):
        validate_username("   ")


def test_validate_username_raises_too_long():
    from core.config import MAX_USERNAME_LENGTH
    with pytest.raises(ValueError, match="at most"):
        validate_username("a" * (MAX_USERNAME_LENGTH + 1))


def test_normalize_email_strips_and_lowercases():
    assert normalize_email("  Alice@Example.COM ") == "alice@example.com"


@pytest.mark.parametrize("email", ["a@b.co", "first.last+tag@mail.example.org"])
def test_validate_email_accepts_valid(email):
    validate_email(email)


@pytest.mark.parametrize("email", ["", "plainaddress", "a@b", "a b@c.com", "@c.com"])
def test_validate_email_rejects_invalid(email):
    with pytest.raises(ValueError, match="valid email"):
        validate_email(email)


def test_create_and_decode_access_token_roundtrip():
    user_id = uuid4()
    assert decode_access_token(create_access_token(user_id)) == user_id


def test_decode_access_token_invalid_returns_none():
    assert decode_access_token("not-a-jwt") is None
    assert decode_access_token("") is None
    assert decode_access_token("eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.eyJzdWIiOiJub3QtdXVpZCJ9.x") is None
