# korsvagen_api/api/routes/__init__.py

from flask import Flask

from korsvagen_api.api.routes.auth_routes import bp_auth
from korsvagen_api.api.routes.health_routes import bp_health


def register_routes(app: Flask, *, api_prefix: str) -> None:
    app.register_blueprint(bp_health, url_prefix=f"{api_prefix}/health")
    app.register_blueprint(bp_auth, url_prefix=f"{api_prefix}/auth")
