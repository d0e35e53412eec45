"""Tests for session-token minting and validation."""

from datetime import timedelta
from types import SimpleNamespace

import jwt
import pytest

from care4u.services.result import InvalidTokenError
from care4u.services.token_issuer import TokenIssuer, TokenKind

SECRET = "test-secret-key-for-session-tokens-0001"
USER = SimpleNamespace(id=7, email="a@x.com")


def test_incomplete_profile_gets_temporary_token(token_issuer: TokenIssuer, clock):
    session = token_issuer.issue_token(USER, complete=False)

    assert session.kind is TokenKind.TEMPORARY
    assert session.expires_at == clock() + timedelta(hours=1)


def test_complete_profile_gets_permanent_token(token_issuer: TokenIssuer, clock):
    session = token_issuer.issue_token(USER, complete=True)

    assert session.kind is TokenKind.PERMANENT
    assert session.expires_at == clock() + timedelta(days=30)


def test_claims_are_exactly_identity_and_expiry(token_issuer: TokenIssuer):
    session = token_issuer.issue_token(USER, complete=True)

    payload = jwt.decode(
        session.token, SECRET, algorithms=["HS256"], options={"verify_exp": False}
    )
    assert set(payload) == {"userId", "email", "exp"}


def test_both_token_classes_validate_to_same_claims(token_issuer: TokenIssuer):
    temporary = token_issuer.issue_token(USER, complete=False)
    permanent = token_issuer.issue_token(USER, complete=True)

    assert token_issuer.validate_token(temporary.token) == token_issuer.validate_token(
        permanent.token
    )
    claims = token_issuer.validate_token(temporary.token)
    assert claims.user_id == 7
    assert claims.email == "a@x.com"


def test_temporary_token_expires(token_issuer: TokenIssuer, clock):
    session = token_issuer.issue_token(USER, complete=False)

    clock.advance(timedelta(minutes=59))
    token_issuer.validate_token(session.token)

    clock.advance(timedelta(minutes=1))
    with pytest.raises(InvalidTokenError):
        token_issuer.validate_token(session.token)


def test_permanent_token_outlives_temporary(token_issuer: TokenIssuer, clock):
    session = token_issuer.issue_token(USER, complete=True)
    clock.advance(timedelta(days=29))

    assert token_issuer.validate_token(session.token).user_id == 7


def test_wrong_secret_rejected(token_issuer: TokenIssuer, clock):
    other = TokenIssuer(secret="another-secret-key-for-session-tokens-02", clock=clock)
    session = other.issue_token(USER, complete=True)

    with pytest.raises(InvalidTokenError):
        token_issuer.validate_token(session.token)


def test_tampered_payload_rejected(token_issuer: TokenIssuer):
    header, _, signature = token_issuer.issue_token(USER, complete=True).token.split(".")
    forged = jwt.encode(
        {"userId": 1, "email": "admin@x.com", "exp": 9999999999},
        "forger-secret-key-for-session-tokens-03",
    )
    forged_payload = forged.split(".")[1]

    with pytest.raises(InvalidTokenError):
        token_issuer.validate_token(f"{header}.{forged_payload}.{signature}")


@pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b.c", "Bearer xyz"])
def test_malformed_token_rejected(token_issuer: TokenIssuer, garbage):
    with pytest.raises(InvalidTokenError):
        token_issuer.validate_token(garbage)


def test_token_without_expiry_rejected(token_issuer: TokenIssuer):
    token = jwt.encode({"userId": 7, "email": "a@x.com"}, SECRET, algorithm="HS256")
    with pytest.raises(InvalidTokenError):
        token_issuer.validate_token(token)


def test_token_without_identity_rejected(token_issuer: TokenIssuer, clock):
    exp = clock() + timedelta(hours=1)
    token = jwt.encode({"sub": "7", "exp": exp}, SECRET, algorithm="HS256")
    with pytest.raises(InvalidTokenError):
        token_issuer.validate_token(token)


def test_unsigned_token_rejected(token_issuer: TokenIssuer, clock):
    exp = clock() + timedelta(hours=1)
    token = jwt.encode({"userId": 7, "email": "a@x.com", "exp": exp}, None, algorithm="none")
    with pytest.raises(InvalidTokenError):
        token_issuer.validate_token(token)
