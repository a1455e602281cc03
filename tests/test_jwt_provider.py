from datetime import datetime, timedelta, timezone

import jwt
import pytest

from helpers import ACCESS_SECRET, REFRESH_SECRET, FakeClock
from korsvagen_api.config.auth_config import AuthConfig
from korsvagen_api.core.exceptions import TokenVerificationError
from korsvagen_api.infrastructure.security.jwt_provider import ACCESS, REFRESH, JwtProvider, TokenIdentity

IDENTITY = TokenIdentity(user_id="user-1", email="admin@korsvagen.test", role="admin", username="admin")


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 1, 9, 0, 0))


@pytest.fixture
def config():
    return AuthConfig(access_secret=ACCESS_SECRET, refresh_secret=REFRESH_SECRET)


@pytest.fixture
def provider(config, clock):
    return JwtProvider(config, clock=clock)


def test_access_token_claims(provider, clock):
    token = provider.issue_access_token(IDENTITY)
    claims = provider.verify(token, ACCESS)

    assert claims["sub"] == "user-1"
    assert claims["email"] == "admin@korsvagen.test"
    assert claims["role"] == "admin"
    assert claims["iss"] == "korsvagen-web"
    assert claims["aud"] == "korsvagen-users"
    assert "type" not in claims
    issued = int(clock().replace(tzinfo=timezone.utc).timestamp())
    assert claims["exp"] - claims["iat"] == 3600
    assert claims["iat"] == issued


def test_refresh_token_claims(provider):
    token = provider.issue_refresh_token(IDENTITY)
    claims = provider.verify(token, REFRESH)

    assert claims["sub"] == "user-1"
    assert claims["type"] == "refresh"
    assert "email" not in claims
    assert claims["exp"] - claims["iat"] == int(timedelta(days=7).total_seconds())


def test_remember_me_extends_refresh_ttl(provider):
    token = provider.issue_refresh_token(IDENTITY, remember_me=True)
    claims = provider.verify(token, REFRESH)

    assert claims["exp"] - claims["iat"] == int(timedelta(days=30).total_seconds())


def test_refresh_token_is_none_without_refresh_secret(clock):
    provider = JwtProvider(AuthConfig(access_secret=ACCESS_SECRET, refresh_secret=None), clock=clock)

    assert provider.issue_refresh_token(IDENTITY) is None


def test_tokens_differ_between_calls(provider):
    assert provider.issue_access_token(IDENTITY) != provider.issue_access_token(IDENTITY)
    assert provider.issue_refresh_token(IDENTITY) != provider.issue_refresh_token(IDENTITY)


def test_expiry_boundary(provider, clock):
    token = provider.issue_access_token(IDENTITY)

    clock.advance(seconds=3599)
    assert provider.verify(token, ACCESS)["sub"] == "user-1"

    clock.advance(seconds=1)
    with pytest.raises(TokenVerificationError) as exc:
        provider.verify(token, ACCESS)
    assert exc.value.kind == TokenVerificationError.EXPIRED

    clock.advance(hours=2)
    with pytest.raises(TokenVerificationError) as exc:
        provider.verify(token, ACCESS)
    assert exc.value.kind == TokenVerificationError.EXPIRED


def test_refresh_token_rejected_as_access_with_shared_secret(clock):
    shared = AuthConfig(access_secret=ACCESS_SECRET, refresh_secret=ACCESS_SECRET)
    provider = JwtProvider(shared, clock=clock)

    with pytest.raises(TokenVerificationError) as exc:
        provider.verify(provider.issue_refresh_token(IDENTITY), ACCESS)
    assert exc.value.kind == TokenVerificationError.WRONG_TYPE

    with pytest.raises(TokenVerificationError) as exc:
        provider.verify(provider.issue_access_token(IDENTITY), REFRESH)
    assert exc.value.kind == TokenVerificationError.WRONG_TYPE


def test_token_signed_with_other_secret_is_malformed(provider):
    forged = jwt.encode(
        {
            "sub": "user-1",
            "type": "refresh",
            "iat": 1,
            "exp": 4102444800,
            "iss": "korsvagen-web",
            "aud": "korsvagen-users",
        },
        "another-secret-that-is-long-enough-0000",
        algorithm="HS256",
    )

    with pytest.raises(TokenVerificationError) as exc:
        provider.verify(forged, REFRESH)
    assert exc.value.kind == TokenVerificationError.MALFORMED


@pytest.mark.parametrize("claim,value", [("iss", "someone-else"), ("aud", "other-audience")])
def test_issuer_and_audience_mismatch_is_malformed(provider, claim, value):
    claims = {
        "sub": "user-1",
        "iat": 1,
        "exp": 4102444800,
        "iss": "korsvagen-web",
        "aud": "korsvagen-users",
    }
    claims[claim] = value
    token = jwt.encode(claims, ACCESS_SECRET, algorithm="HS256")

    with pytest.raises(TokenVerificationError) as exc:
        provider.verify(token, ACCESS)
    assert exc.value.kind == TokenVerificationError.MALFORMED


@pytest.mark.parametrize("token", ["", "not.a.jwt", "garbage"])
def test_garbage_is_malformed(provider, token):
    with pytest.raises(TokenVerificationError) as exc:
        provider.verify(token, ACCESS)
    assert exc.value.kind == TokenVerificationError.MALFORMED
