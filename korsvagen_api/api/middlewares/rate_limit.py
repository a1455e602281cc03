import time

from flask import Flask, request
from flask_limiter import Limiter
from flask_limiter.errors import RateLimitExceeded
from flask_limiter.util import get_remote_address

from korsvagen_api.config.flask_config import get_auth_components
from korsvagen_api.core.exceptions import RateLimitError
from korsvagen_api.core.logging import get_logger

logger = get_logger(__name__)

limiter = Limiter(key_func=get_remote_address, strategy="fixed-window", storage_uri="memory://")


def login_rate_limit() -> str:
    config = get_auth_components().config
    minutes = int(config.rate_limit_window.total_seconds() // 60)
    return f"{config.rate_limit_max} per {minutes} minutes"


login_rate_limited = limiter.limit(login_rate_limit)


def _retry_after() -> int:
    current = limiter.current_limit
    if current is None:
        return 1
    return max(1, int(current.reset_at - time.time()))


def rate_limit_error(err: RateLimitExceeded) -> RateLimitError:
    retry_after = _retry_after()
    logger.warning("rate_limit_exceeded", path=request.path, ip=get_remote_address(), limit=err.description)
    return RateLimitError(
        "Too many login attempts, try again later",
        retry_after=retry_after,
        code="LOGIN_RATE_LIMIT_EXCEEDED",
    )


def init_rate_limiter(app: Flask) -> None:
    limiter.init_app(app)
