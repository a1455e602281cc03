# korsvagen_api/infrastructure/security/jwt_provider.py

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

import jwt

from korsvagen_api.config.auth_config import AuthConfig
from korsvagen_api.core.clock import Clock
from korsvagen_api.core.exceptions import TokenVerificationError
from korsvagen_api.core.logging import get_logger

logger = get_logger(__name__)

ACCESS = "access"
REFRESH = "refresh"


def _aware_utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(frozen=True)
class TokenIdentity:
    user_id: str
    email: str | None = None
    role: str | None = None
    username: str | None = None


class JwtProvider:
    def __init__(self, config: AuthConfig, *, clock: Clock = _aware_utcnow) -> None:
        self._config = config
        self._clock = clock

    def _now(self) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now

    def _sign(self, claims: dict[str, Any], *, secret: str, ttl: timedelta) -> str:
        now = self._now()
        claims = {
            **claims,
            "iss": self._config.issuer,
            "aud": self._config.audience,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            "jti": uuid4().hex,
        }
        return jwt.encode(claims, secret, algorithm=self._config.algorithm)

    def issue_access_token(self, identity: TokenIdentity) -> str:
        claims = {
            "sub": str(identity.user_id),
            "email": identity.email,
            "role": identity.role,
            "username": identity.username,
        }
        token = self._sign(claims, secret=self._config.access_secret, ttl=self._config.access_ttl)
        logger.debug("access_token_issued", user_id=identity.user_id)
        return token

    def issue_refresh_token(self, identity: TokenIdentity, *, remember_me: bool = False) -> str | None:
        if self._config.refresh_secret is None:
            logger.warning("refresh_token_not_issued", reason="refresh_secret_missing")
            return None

        ttl = self.refresh_ttl(remember_me=remember_me)
        claims = {"sub": str(identity.user_id), "type": REFRESH}
        token = self._sign(claims, secret=self._config.refresh_secret, ttl=ttl)
        logger.debug("refresh_token_issued", user_id=identity.user_id, remember_me=remember_me)
        return token

    def refresh_ttl(self, *, remember_me: bool = False) -> timedelta:
        return self._config.remember_me_ttl if remember_me else self._config.refresh_ttl

    def verify(self, token: str, expected_type: str = ACCESS) -> dict[str, Any]:
        secret = self._config.refresh_secret if expected_type == REFRESH else self._config.access_secret
        if not secret:
            raise TokenVerificationError(TokenVerificationError.MALFORMED, "Refresh tokens are not enabled")

        if not isinstance(token, str) or not token:
            raise TokenVerificationError(TokenVerificationError.MALFORMED, "Invalid token")

        try:
            # expiry is checked below against the injected clock
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self._config.algorithm],
                audience=self._config.audience,
                issuer=self._config.issuer,
                options={
                    "require": ["exp", "iat", "sub"],
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.InvalidTokenError as e:
            logger.info("token_verification_failed", kind="MALFORMED", error=e.__class__.__name__, expected=expected_type)
            raise TokenVerificationError(TokenVerificationError.MALFORMED, "Invalid token") from e

        try:
            exp = int(claims["exp"])
        except (TypeError, ValueError) as e:
            raise TokenVerificationError(TokenVerificationError.MALFORMED, "Invalid token") from e

        if self._now().timestamp() >= exp:
            logger.info("token_verification_failed", kind="EXPIRED", expected=expected_type)
            raise TokenVerificationError(TokenVerificationError.EXPIRED, "Token expired")

        token_type = claims.get("type") or ACCESS
        if token_type != expected_type:
            logger.info("token_verification_failed", kind="WRONG_TYPE", expected=expected_type, actual=token_type)
            raise TokenVerificationError(TokenVerificationError.WRONG_TYPE, "Invalid token type")

        return claims
