from datetime import datetime, timezone

from flask import Blueprint, jsonify
from sqlalchemy import text

from korsvagen_api.config.flask_config import get_app_settings
from korsvagen_api.infrastructure.database.session import db_session

bp_health = Blueprint("health", __name__, url_prefix="/health")


@bp_health.get("")
def health():
    settings = get_app_settings()
    return jsonify(
        {
            "success": True,
            "data": {
                "status": "healthy",
                "timestamp": datetime.now(tz=timezone.utc).isoformat(),
                "environment": settings.environment,
            },
        }
    ), 200


@bp_health.get("/db")
def health_db():
    with db_session() as session:
        session.execute(text("select 1"))
    return jsonify({"success": True, "data": {"db": "ok"}}), 200
