# korsvagen_api/main.py
from __future__ import annotations

from flask import Flask
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from korsvagen_api.api.middlewares.error_handler import register_error_handlers
from korsvagen_api.api.middlewares.rate_limit import init_rate_limiter
from korsvagen_api.api.middlewares.request_context import register_request_context
from korsvagen_api.api.routes import register_routes
from korsvagen_api.cli import register_cli
from korsvagen_api.config.flask_config import configure_app
from korsvagen_api.config.settings import Settings, get_settings
from korsvagen_api.core.clock import Clock, utcnow
from korsvagen_api.core.logging import configure_logging, get_logger
from korsvagen_api.infrastructure.database.session import init_database

API_PREFIX = "/api"

logger = get_logger(__name__)


def create_app(settings: Settings | None = None, *, clock: Clock = utcnow) -> Flask:
    settings = settings or get_settings()

    log_json = settings.log_json if settings.log_json is not None else settings.is_production
    configure_logging(level=settings.log_level, json=log_json)

    app = Flask(__name__)

    if settings.trust_proxy:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1)

    CORS(
        app,
        resources={rf"{API_PREFIX}/*": {"origins": settings.allowed_origins}},
        supports_credentials=True,
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    )

    # fails fast on a missing or weak JWT secret
    configure_app(app, settings, clock=clock)
    init_database(app, settings.sqlalchemy_url, echo=settings.debug)
    init_rate_limiter(app)

    register_request_context(app)
    register_routes(app, api_prefix=API_PREFIX)
    register_error_handlers(app)
    register_cli(app)

    logger.info("app_created", environment=settings.environment)
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000)
