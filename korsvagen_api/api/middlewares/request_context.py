from uuid import uuid4

import structlog
from flask import Flask, g, request

from korsvagen_api.entities.auth_context import ClientInfo

REQUEST_ID_HEADER = "X-Request-ID"


def client_info() -> ClientInfo:
    return ClientInfo(
        ip_address=request.remote_addr,
        user_agent=request.headers.get("User-Agent"),
    )


def register_request_context(app: Flask) -> None:
    @app.before_request
    def bind_request_id():
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        g.request_id = request_id
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

    @app.after_request
    def echo_request_id(response):
        request_id = g.get("request_id")
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @app.teardown_request
    def clear_request_id(exc):
        structlog.contextvars.clear_contextvars()
