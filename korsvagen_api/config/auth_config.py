# korsvagen_api/config/auth_config.py
import re
from dataclasses import dataclass
from datetime import timedelta

from korsvagen_api.config.settings import Settings
from korsvagen_api.core.exceptions import ConfigurationError
from korsvagen_api.core.logging import get_logger

logger = get_logger(__name__)

MIN_SECRET_LENGTH = 32

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}


def parse_duration(value: str | int) -> timedelta:
    """Parse "30s", "15m", "1h", "7d", "2w" or a bare number of seconds."""
    if isinstance(value, int):
        return timedelta(seconds=value)

    match = _DURATION_RE.match(value or "")
    if not match:
        raise ConfigurationError(f"Invalid duration: {value!r}")

    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit.lower()]: int(amount)})


@dataclass(frozen=True)
class AuthConfig:
    access_secret: str
    refresh_secret: str | None
    access_ttl: timedelta = timedelta(hours=1)
    refresh_ttl: timedelta = timedelta(days=7)
    remember_me_ttl: timedelta = timedelta(days=30)
    issuer: str = "korsvagen-web"
    audience: str = "korsvagen-users"
    algorithm: str = "HS256"

    max_login_attempts: int = 5
    lockout_duration: timedelta = timedelta(minutes=30)

    rate_limit_max: int = 5
    rate_limit_window: timedelta = timedelta(minutes=15)

    bcrypt_rounds: int = 12

    @property
    def refresh_enabled(self) -> bool:
        return self.refresh_secret is not None

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthConfig":
        if settings.jwt_secret:
            source = "JWT_SECRET"
            access_secret = settings.jwt_secret
        elif settings.supabase_jwt_secret:
            source = "SUPABASE_JWT_SECRET"
            access_secret = settings.supabase_jwt_secret
        else:
            raise ConfigurationError("JWT_SECRET (or SUPABASE_JWT_SECRET) must be configured.")

        if len(access_secret) < MIN_SECRET_LENGTH:
            raise ConfigurationError(f"{source} must be at least {MIN_SECRET_LENGTH} characters long.")

        refresh_secret = settings.jwt_refresh_secret
        if refresh_secret is not None and len(refresh_secret) < MIN_SECRET_LENGTH:
            raise ConfigurationError(f"JWT_REFRESH_SECRET must be at least {MIN_SECRET_LENGTH} characters long.")

        if refresh_secret is None:
            if settings.jwt_refresh_secret_fallback:
                logger.warning("jwt_refresh_secret_fallback", source=source)
                refresh_secret = access_secret
            else:
                logger.warning("jwt_refresh_disabled", reason="JWT_REFRESH_SECRET not configured")

        if settings.auth_rate_limit_max < 1:
            raise ConfigurationError("AUTH_RATE_LIMIT_MAX must be a positive integer.")

        config = cls(
            access_secret=access_secret,
            refresh_secret=refresh_secret,
            access_ttl=parse_duration(settings.jwt_expires_in),
            refresh_ttl=parse_duration(settings.jwt_refresh_expires_in),
            remember_me_ttl=parse_duration(settings.jwt_remember_me_expires_in),
            rate_limit_max=settings.auth_rate_limit_max,
            rate_limit_window=timedelta(minutes=settings.auth_rate_limit_window_minutes),
            bcrypt_rounds=settings.bcrypt_rounds,
        )

        logger.info(
            "jwt_config_resolved",
            source=source,
            refresh_enabled=config.refresh_enabled,
            access_ttl_seconds=int(config.access_ttl.total_seconds()),
            refresh_ttl_seconds=int(config.refresh_ttl.total_seconds()),
        )
        return config
