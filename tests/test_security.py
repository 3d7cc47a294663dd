"""Password hashing, auth tokens, CSRF and card checks."""

import pytest
from fastapi import HTTPException
from starlette.requests import Request

import common.security as security
from common.helpers import is_valid_card_number, is_valid_cc_expiration, mask_card
from common.security import create_token, decode_token, hash_password, verify_password


def test_password_hash_verifies_only_the_original_password():
    encoded = hash_password("password")

    assert encoded != "password"
    assert verify_password("password", encoded)
    assert not verify_password("Password", encoded)


def test_same_password_hashes_differently_each_time():
    assert hash_password("password") != hash_password("password")


def test_hash_records_its_iteration_count():
    encoded = hash_password("password", iterations=1200)

    scheme, iterations, salt_hex, digest = encoded.split("$")
    assert scheme == "pbkdf2_sha256"
    assert iterations == "1200"
    assert len(salt_hex) == 32
    # verification uses the stored count, not the configured default
    assert verify_password("password", encoded)


def test_default_work_factor_comes_from_settings():
    assert hash_password("password").split("$")[1] == str(security.PASSWORD_HASH_ITERATIONS)


def test_garbage_hash_never_verifies():
    assert not verify_password("password", "not-a-hash")
    assert not verify_password("password", "md5$1000$00$00")


def test_token_round_trip():
    token = create_token({"sub": "habuma", "roles": ["ROLE_USER"]})
    payload = decode_token(token)

    assert payload["sub"] == "habuma"
    assert payload["roles"] == ["ROLE_USER"]


def test_tampered_token_is_rejected():
    token = create_token({"sub": "habuma"})
    assert decode_token(token[:-2] + "xx") is None


def _request(cookie_token=None):
    headers = []
    if cookie_token:
        headers.append((b"cookie", f"csrf_token={cookie_token}".encode()))
    return Request({"type": "http", "method": "POST", "path": "/design", "headers": headers, "query_string": b""})


def test_csrf_mismatch_is_forbidden(monkeypatch):
    monkeypatch.setattr(security, "CSRF_ENABLED", True)

    with pytest.raises(HTTPException) as exc_info:
        security.csrf_check(_request("abc"), "xyz")
    assert exc_info.value.status_code == 403

    security.csrf_check(_request("abc"), "abc")


@pytest.mark.parametrize(
    "number,valid",
    [
        ("4111111111111111", True),
        ("4111 1111 1111 1111", True),
        ("378282246310005", True),
        ("4111111111111112", False),
        ("abcd", False),
        ("", False),
    ],
)
def test_card_number_luhn_check(number, valid):
    assert is_valid_card_number(number) is valid


@pytest.mark.parametrize(
    "value,valid",
    [("04/27", True), ("12/30", True), ("13/27", False), ("4/27", False), ("04/2027", False)],
)
def test_cc_expiration_format(value, valid):
    assert is_valid_cc_expiration(value) is valid


def test_mask_card_keeps_last_four_digits():
    assert mask_card("4111111111111111") == "**** 1111"
