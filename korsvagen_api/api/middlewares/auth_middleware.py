from functools import wraps
from typing import Any, Callable, TypeVar

from flask import g, request

from korsvagen_api.config.flask_config import get_auth_components
from korsvagen_api.core.exceptions import AuthenticationError, AuthorizationError, TokenVerificationError
from korsvagen_api.core.logging import get_logger
from korsvagen_api.entities.auth_context import AuthContext
from korsvagen_api.infrastructure.security.jwt_provider import ACCESS

F = TypeVar("F", bound=Callable[..., Any])

ACCESS_TOKEN_COOKIE = "accessToken"

logger = get_logger(__name__)


def _extract_token() -> str | None:
    auth = request.headers.get("Authorization", "")
    parts = auth.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]

    return request.cookies.get(ACCESS_TOKEN_COOKIE) or None


def _authenticate(token: str) -> AuthContext:
    claims = get_auth_components().jwt_provider.verify(token, expected_type=ACCESS)
    return AuthContext.from_claims(claims)


def current_user() -> AuthContext | None:
    return g.get("current_user")


def require_auth(fn: F) -> F:
    @wraps(fn)
    def wrapper(*args, **kwargs):
        token = _extract_token()
        if not token:
            logger.warning("auth_token_missing", path=request.path, method=request.method)
            raise AuthenticationError("Access token required", code="AUTH_TOKEN_REQUIRED")

        try:
            g.current_user = _authenticate(token)
        except TokenVerificationError as e:
            logger.warning("auth_token_rejected", kind=e.kind, path=request.path, ip=request.remote_addr)
            raise AuthenticationError(e.message, code="AUTH_TOKEN_INVALID") from e

        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def optional_auth(fn: F) -> F:
    @wraps(fn)
    def wrapper(*args, **kwargs):
        token = _extract_token()
        g.current_user = None
        if token:
            try:
                g.current_user = _authenticate(token)
            except TokenVerificationError as e:
                logger.debug("optional_auth_ignored", kind=e.kind)

        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_role(*allowed_roles: str):
    allowed = {str(r.value if hasattr(r, "value") else r) for r in allowed_roles}

    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = current_user()
            if user is None:
                raise AuthenticationError("Authentication required", code="AUTH_REQUIRED")

            if user.role not in allowed:
                logger.warning(
                    "insufficient_privileges",
                    user_id=user.id,
                    role=user.role,
                    required=sorted(allowed),
                )
                raise AuthorizationError(
                    "Insufficient privileges for this operation",
                    code="INSUFFICIENT_PRIVILEGES",
                )

            return fn(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
