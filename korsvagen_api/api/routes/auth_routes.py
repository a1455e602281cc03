from typing import Any, TypeVar

import pydantic
from flask import Blueprint, jsonify, request
from sqlalchemy.orm import Session

from korsvagen_api.api.middlewares.auth_middleware import current_user, require_auth
from korsvagen_api.api.middlewares.rate_limit import login_rate_limited
from korsvagen_api.api.middlewares.request_context import client_info
from korsvagen_api.api.schemas.auth_schema import (
    ActivityQuery,
    ActivityResponse,
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    SessionResponse,
    TokenPair,
    UserResponse,
)
from korsvagen_api.config.flask_config import get_auth_components
from korsvagen_api.core.exceptions import ValidationError
from korsvagen_api.infrastructure.database.session import db_session
from korsvagen_api.services.auth_service import AuthResult, AuthService

bp_auth = Blueprint("auth", __name__, url_prefix="/auth")

TSchema = TypeVar("TSchema", bound=pydantic.BaseModel)


def _parse(schema: type[TSchema], *, source: str = "json") -> TSchema:
    if source == "args":
        payload = request.args.to_dict()
    else:
        payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}

    try:
        return schema.model_validate(payload)
    except pydantic.ValidationError as e:
        errors = [
            {
                "field": ".".join(str(p) for p in err["loc"]) or "body",
                "message": err["msg"],
                "type": err["type"],
            }
            for err in e.errors()
        ]
        raise ValidationError("Invalid input data", errors=errors) from e


def _auth_service(session: Session) -> AuthService:
    components = get_auth_components()
    return AuthService(
        session=session,
        config=components.config,
        jwt_provider=components.jwt_provider,
        password_hasher=components.password_hasher,
        clock=components.clock,
    )


def _auth_payload(result: AuthResult) -> dict[str, Any]:
    return {
        "user": UserResponse.model_validate(result.user).to_json(),
        "tokens": TokenPair(access=result.access_token, refresh=result.refresh_token).model_dump(),
    }


@bp_auth.post("/login")
@login_rate_limited
def login():
    payload = _parse(LoginRequest)

    with db_session() as session:
        result = _auth_service(session).login(
            username=payload.username,
            password=payload.password,
            remember_me=payload.remember_me,
            client=client_info(),
        )
        data = _auth_payload(result)

    return jsonify({"success": True, "message": "Login successful", "data": data}), 200


@bp_auth.post("/refresh")
def refresh():
    payload = _parse(RefreshRequest)
    if not payload.refresh_token:
        raise ValidationError("Refresh token missing", code="MISSING_REFRESH_TOKEN")

    with db_session() as session:
        result = _auth_service(session).refresh(refresh_token=payload.refresh_token, client=client_info())
        data = _auth_payload(result)

    return jsonify({"success": True, "message": "Token refreshed", "data": data}), 200


@bp_auth.post("/logout")
@require_auth
def logout():
    payload = _parse(LogoutRequest)

    with db_session() as session:
        _auth_service(session).logout(
            auth=current_user(),
            refresh_token=payload.refresh_token,
            client=client_info(),
        )

    return jsonify({"success": True, "message": "Logout successful"}), 200


@bp_auth.get("/me")
@require_auth
def me():
    with db_session() as session:
        user = _auth_service(session).get_current_user(current_user().id)
        data = {"user": UserResponse.model_validate(user).to_json()}

    return jsonify({"success": True, "data": data}), 200


@bp_auth.get("/sessions")
@require_auth
def list_sessions():
    with db_session() as session:
        sessions = _auth_service(session).list_sessions(current_user().id)
        items = [SessionResponse.model_validate(s).to_json() for s in sessions]

    return jsonify({"success": True, "data": {"sessions": items}}), 200


@bp_auth.delete("/sessions/<session_id>")
@require_auth
def revoke_session(session_id: str):
    with db_session() as session:
        _auth_service(session).revoke_session(auth=current_user(), session_id=session_id, client=client_info())

    return jsonify({"success": True, "message": "Session revoked"}), 200


@bp_auth.get("/activity")
@require_auth
def list_activity():
    query = _parse(ActivityQuery, source="args")

    with db_session() as session:
        entries = _auth_service(session).list_activity(current_user().id, limit=query.limit)
        items = [ActivityResponse.model_validate(e).to_json() for e in entries]

    return jsonify({"success": True, "data": {"activities": items}}), 200
