# korsvagen_api/api/middlewares/error_handler.py
import re
import traceback

from flask import Flask, jsonify, request
from flask_limiter.errors import RateLimitExceeded
from werkzeug.exceptions import HTTPException

from korsvagen_api.api.middlewares.rate_limit import rate_limit_error
from korsvagen_api.config.flask_config import get_app_settings
from korsvagen_api.core.exceptions import AppError
from korsvagen_api.core.logging import get_logger

logger = get_logger(__name__)


def _code_from_name(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9]+", "_", name).strip("_").upper()


def _app_error_response(err: AppError):
    response = jsonify(err.to_dict())
    for key, value in err.headers.items():
        response.headers[key] = value
    return response, err.status_code


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        if err.status_code >= 500:
            logger.error("app_error", code=err.code, path=request.path, error=err.message)
        return _app_error_response(err)

    @app.errorhandler(RateLimitExceeded)
    def handle_rate_limit(err: RateLimitExceeded):
        return _app_error_response(rate_limit_error(err))

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        code = "NOT_FOUND" if err.code == 404 else _code_from_name(err.name)
        body = {"success": False, "message": err.description, "code": code}
        if err.code == 404:
            body["path"] = request.path
        return jsonify(body), err.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        logger.error(
            "unhandled_exception",
            path=request.path,
            method=request.method,
            error=err.__class__.__name__,
            exc_info=err,
        )

        body = {"success": False, "message": "Internal server error", "code": "INTERNAL_SERVER_ERROR"}
        if not get_app_settings().is_production:
            body["error"] = str(err)
            body["stack"] = traceback.format_exception(err)
        return jsonify(body), 500
