# korsvagen_api/services/auth_service.py

from dataclasses import dataclass

from sqlalchemy.orm import Session

from korsvagen_api.config.auth_config import AuthConfig
from korsvagen_api.core.clock import Clock, to_naive_utc, utcnow
from korsvagen_api.core.exceptions import (
    AccountLockedError,
    AuthenticationError,
    NotFoundError,
    TokenVerificationError,
)
from korsvagen_api.core.logging import get_logger
from korsvagen_api.entities.auth_context import AuthContext, ClientInfo
from korsvagen_api.infrastructure.database.models.activity_log_model import ActivityLogModel
from korsvagen_api.infrastructure.database.models.admin_session_model import AdminSessionModel
from korsvagen_api.infrastructure.database.models.admin_user_model import AdminUserModel
from korsvagen_api.infrastructure.security.jwt_provider import REFRESH, JwtProvider, TokenIdentity
from korsvagen_api.infrastructure.security.password_hasher import PasswordHasher
from korsvagen_api.repositories.activity_log_repository import ActivityLogRepository
from korsvagen_api.repositories.admin_session_repository import AdminSessionRepository
from korsvagen_api.repositories.admin_user_repository import AdminUserRepository
from korsvagen_api.services.audit_service import AuditAction, AuditService

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthResult:
    user: AdminUserModel
    access_token: str
    refresh_token: str | None


def _identity(user: AdminUserModel) -> TokenIdentity:
    return TokenIdentity(user_id=user.id, email=user.email, role=user.role, username=user.username)


class AuthService:
    def __init__(
        self,
        *,
        session: Session,
        config: AuthConfig,
        jwt_provider: JwtProvider,
        password_hasher: PasswordHasher,
        clock: Clock = utcnow,
    ) -> None:
        self._config = config
        self._jwt = jwt_provider
        self._hasher = password_hasher
        self._now = clock
        self._users = AdminUserRepository(session, clock=clock)
        self._sessions = AdminSessionRepository(session, clock=clock)
        self._activity = ActivityLogRepository(session, clock=clock)
        self._audit = AuditService(session, repo=self._activity, clock=clock)

    # -------------------------
    # Login
    # -------------------------

    def login(self, *, username: str, password: str, remember_me: bool, client: ClientInfo) -> AuthResult:
        user = self._users.get_active_by_username(username)
        if user is None:
            self._audit.log(
                action=AuditAction.LOGIN_FAILED,
                user_id=None,
                client=client,
                success=False,
                details={"reason": "user_not_found", "username": username},
            )
            logger.warning("login_failed", reason="user_not_found", ip=client.ip_address)
            raise AuthenticationError("Invalid credentials", code="INVALID_CREDENTIALS")

        now = self._now()
        if user.locked_until is not None and to_naive_utc(user.locked_until) > now:
            self._audit.log(
                action=AuditAction.LOGIN_BLOCKED,
                user_id=user.id,
                client=client,
                success=False,
                details={"reason": "account_locked", "locked_until": user.locked_until.isoformat()},
            )
            logger.warning("login_blocked", user_id=user.id, locked_until=user.locked_until.isoformat())
            raise AccountLockedError(user.locked_until)

        if not self._hasher.verify_password(password, user.password_hash):
            attempts, locked_until = self._users.register_failed_attempt(
                user_id=user.id,
                max_attempts=self._config.max_login_attempts,
                lock_until=now + self._config.lockout_duration,
            )
            details = {"reason": "invalid_password", "attempts": attempts}
            if locked_until is not None:
                details["locked_until"] = locked_until.isoformat()
            self._audit.log(
                action=AuditAction.LOGIN_FAILED,
                user_id=user.id,
                client=client,
                success=False,
                details=details,
            )
            logger.warning("login_failed", reason="invalid_password", user_id=user.id, attempts=attempts)
            raise AuthenticationError(
                "Invalid credentials",
                code="INVALID_CREDENTIALS",
                extra={"attemptsRemaining": max(0, self._config.max_login_attempts - attempts)},
            )

        self._users.register_successful_login(user)

        identity = _identity(user)
        access = self._jwt.issue_access_token(identity)
        refresh = self._jwt.issue_refresh_token(identity, remember_me=remember_me)

        if refresh is not None:
            self._sessions.create(
                user_id=user.id,
                refresh_token=refresh,
                expires_at=now + self._jwt.refresh_ttl(remember_me=remember_me),
                user_agent=client.user_agent,
                ip_address=client.ip_address,
            )

        self._audit.log(
            action=AuditAction.LOGIN_SUCCESS,
            user_id=user.id,
            client=client,
            details={"remember_me": remember_me},
        )
        logger.info("login_success", user_id=user.id, role=user.role, ip=client.ip_address)
        return AuthResult(user=user, access_token=access, refresh_token=refresh)

    # -------------------------
    # Refresh
    # -------------------------

    def refresh(self, *, refresh_token: str, client: ClientInfo) -> AuthResult:
        try:
            claims = self._jwt.verify(refresh_token, expected_type=REFRESH)
        except TokenVerificationError as e:
            self._refresh_failed(client, reason=e.kind.lower())
            if e.kind == TokenVerificationError.WRONG_TYPE:
                raise AuthenticationError("Token not valid for refresh", code="INVALID_TOKEN_TYPE") from e
            raise AuthenticationError("Invalid or expired refresh token", code="INVALID_REFRESH_TOKEN") from e

        user_id = str(claims["sub"])

        stored = self._sessions.get_valid_by_token(refresh_token)
        if stored is None or stored.user_id != user_id:
            self._refresh_failed(client, reason="invalid_session", user_id=user_id)
            raise AuthenticationError("Invalid or expired session", code="INVALID_SESSION")

        user = self._users.get_active_by_id(user_id)
        if user is None:
            self._refresh_failed(client, reason="user_not_found", user_id=None)
            raise AuthenticationError("User not found or deactivated", code="USER_NOT_FOUND")

        access = self._jwt.issue_access_token(_identity(user))
        self._sessions.touch(stored.id)

        self._audit.log(action=AuditAction.TOKEN_REFRESH, user_id=user.id, client=client)
        logger.info("token_refreshed", user_id=user.id, session_id=stored.id)
        return AuthResult(user=user, access_token=access, refresh_token=refresh_token)

    def _refresh_failed(self, client: ClientInfo, *, reason: str, user_id: str | None = None) -> None:
        self._audit.log(
            action=AuditAction.TOKEN_REFRESH_FAILED,
            user_id=user_id,
            client=client,
            success=False,
            details={"reason": reason},
        )
        logger.warning("token_refresh_failed", reason=reason, ip=client.ip_address)

    # -------------------------
    # Logout / sessions
    # -------------------------

    def logout(self, *, auth: AuthContext, refresh_token: str | None, client: ClientInfo) -> int:
        if refresh_token:
            affected = self._sessions.deactivate_by_token(user_id=auth.id, refresh_token=refresh_token)
        else:
            affected = self._sessions.deactivate_all_for_user(auth.id)

        self._audit.log(
            action=AuditAction.LOGOUT,
            user_id=auth.id,
            client=client,
            details={"all_sessions": not refresh_token, "sessions_revoked": affected},
        )
        logger.info("logout", user_id=auth.id, all_sessions=not refresh_token, sessions_revoked=affected)
        return affected

    def get_current_user(self, user_id: str) -> AdminUserModel:
        user = self._users.get_active_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        return user

    def list_sessions(self, user_id: str) -> list[AdminSessionModel]:
        return self._sessions.list_valid_for_user(user_id)

    def revoke_session(self, *, auth: AuthContext, session_id: str, client: ClientInfo) -> int:
        affected = self._sessions.deactivate_by_id(user_id=auth.id, session_id=session_id)
        self._audit.log(
            action=AuditAction.SESSION_REVOKED,
            user_id=auth.id,
            client=client,
            details={"session_id": session_id, "sessions_revoked": affected},
        )
        logger.info("session_revoked", user_id=auth.id, session_id=session_id, sessions_revoked=affected)
        return affected

    def list_activity(self, user_id: str, *, limit: int = 50) -> list[ActivityLogModel]:
        return self._activity.list_for_user(user_id, limit=limit)
