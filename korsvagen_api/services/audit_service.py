# korsvagen_api/services/audit_service.py

from enum import Enum
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from korsvagen_api.core.clock import Clock, utcnow
from korsvagen_api.core.logging import get_logger
from korsvagen_api.entities.auth_context import ClientInfo
from korsvagen_api.infrastructure.database.models.activity_log_model import ActivityLogModel
from korsvagen_api.repositories.activity_log_repository import ActivityLogRepository

logger = get_logger(__name__)


class AuditAction(str, Enum):
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"
    LOGIN_BLOCKED = "LOGIN_BLOCKED"
    LOGOUT = "LOGOUT"
    TOKEN_REFRESH = "TOKEN_REFRESH"
    TOKEN_REFRESH_FAILED = "TOKEN_REFRESH_FAILED"
    SESSION_REVOKED = "SESSION_REVOKED"


class AuditService:
    def __init__(
        self,
        session: Session,
        repo: ActivityLogRepository | None = None,
        *,
        clock: Clock = utcnow,
    ) -> None:
        self._session = session
        self._now = clock
        self._repo = repo or ActivityLogRepository(session, clock=clock)

    def log(
        self,
        *,
        action: AuditAction,
        user_id: str | None,
        client: ClientInfo | None = None,
        success: bool = True,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Best-effort audit trail write.
        Runs in a SAVEPOINT so a failing insert never poisons the caller's transaction.
        """
        model = ActivityLogModel(
            user_id=str(user_id) if user_id is not None else None,
            action=action.value,
            success=success,
            details=details or {},
            ip_address=client.ip_address if client else None,
            user_agent=client.user_agent if client else None,
            created_at=self._now(),
        )
        try:
            with self._session.begin_nested():
                self._repo.add(model)
        except SQLAlchemyError as exc:
            logger.warning(
                "activity_log_write_failed",
                action=action.value,
                error=exc.__class__.__name__,
            )
