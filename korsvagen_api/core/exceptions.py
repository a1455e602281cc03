# korsvagen_api/core/exceptions.py
from datetime import datetime, timezone
from typing import Any


class AppError(Exception):
    default_code = "APP_ERROR"

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 400,
        code: str | None = None,
        extra: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code or self.default_code
        self.extra = extra or {}
        self.headers = headers or {}

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"success": False, "message": self.message, "code": self.code}
        body.update(self.extra)
        return body


class ValidationError(AppError):
    default_code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str = "Invalid input data",
        *,
        errors: list[dict[str, Any]] | None = None,
        code: str | None = None,
    ) -> None:
        extra = {"errors": errors} if errors is not None else None
        super().__init__(message, status_code=400, code=code, extra=extra)
        self.errors = errors or []


class AuthenticationError(AppError):
    default_code = "AUTHENTICATION_FAILED"

    def __init__(self, message: str = "Unauthorized", *, code: str | None = None, extra: dict | None = None) -> None:
        super().__init__(message, status_code=401, code=code, extra=extra)


class AuthorizationError(AppError):
    default_code = "INSUFFICIENT_PRIVILEGES"

    def __init__(self, message: str = "Forbidden", *, code: str | None = None) -> None:
        super().__init__(message, status_code=403, code=code)


class NotFoundError(AppError):
    default_code = "NOT_FOUND"

    def __init__(self, message: str = "Resource not found", *, code: str | None = None) -> None:
        super().__init__(message, status_code=404, code=code)


class AccountLockedError(AppError):
    default_code = "ACCOUNT_LOCKED"

    def __init__(self, locked_until: datetime, message: str = "Account temporarily locked after too many failed attempts") -> None:
        stamp = locked_until if locked_until.tzinfo else locked_until.replace(tzinfo=timezone.utc)
        super().__init__(message, status_code=423, extra={"locked_until": stamp.isoformat()})
        self.locked_until = locked_until


class RateLimitError(AppError):
    default_code = "RATE_LIMIT_EXCEEDED"

    def __init__(self, message: str, *, retry_after: int, code: str | None = None) -> None:
        super().__init__(
            message,
            status_code=429,
            code=code,
            headers={"Retry-After": str(retry_after)},
        )
        self.retry_after = retry_after


class InternalError(AppError):
    default_code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message, status_code=500)


class PasswordHashingError(InternalError):
    def __init__(self, message: str = "Password could not be processed") -> None:
        super().__init__(message)


class TokenVerificationError(AuthenticationError):
    EXPIRED = "EXPIRED"
    MALFORMED = "MALFORMED"
    WRONG_TYPE = "WRONG_TYPE"

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(message, code="AUTH_TOKEN_INVALID")
        self.kind = kind


class ConfigurationError(Exception):
    """Raised at startup when the environment cannot produce a usable configuration."""
