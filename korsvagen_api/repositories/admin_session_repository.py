# korsvagen_api/repositories/admin_session_repository.py

from datetime import datetime

from sqlalchemy import delete, or_, select, update

from korsvagen_api.core.base_repository import BaseRepository
from korsvagen_api.infrastructure.database.models.admin_session_model import AdminSessionModel


class AdminSessionRepository(BaseRepository[AdminSessionModel]):
    def create(
        self,
        *,
        user_id: str,
        refresh_token: str,
        expires_at: datetime,
        user_agent: str | None,
        ip_address: str | None,
    ) -> AdminSessionModel:
        now = self._now()
        model = AdminSessionModel(
            user_id=str(user_id),
            refresh_token=refresh_token,
            user_agent=user_agent,
            ip_address=ip_address,
            created_at=now,
            last_used_at=now,
            expires_at=expires_at,
            is_active=True,
        )
        return self.add(model)

    def get_valid_by_token(self, refresh_token: str) -> AdminSessionModel | None:
        stmt = select(AdminSessionModel).where(
            AdminSessionModel.refresh_token == refresh_token,
            AdminSessionModel.is_active.is_(True),
            AdminSessionModel.expires_at > self._now(),
        )
        return self._session.execute(stmt).scalar_one_or_none()

    def list_valid_for_user(self, user_id: str) -> list[AdminSessionModel]:
        stmt = (
            select(AdminSessionModel)
            .where(
                AdminSessionModel.user_id == str(user_id),
                AdminSessionModel.is_active.is_(True),
                AdminSessionModel.expires_at > self._now(),
            )
            .order_by(AdminSessionModel.last_used_at.desc())
        )
        return list(self._session.execute(stmt).scalars().all())

    def touch(self, session_id: str) -> None:
        stmt = (
            update(AdminSessionModel)
            .where(AdminSessionModel.id == session_id)
            .values(last_used_at=self._now())
            .execution_options(synchronize_session=False)
        )
        self._session.execute(stmt)

    def deactivate_by_token(self, *, user_id: str, refresh_token: str) -> int:
        stmt = (
            update(AdminSessionModel)
            .where(
                AdminSessionModel.user_id == str(user_id),
                AdminSessionModel.refresh_token == refresh_token,
                AdminSessionModel.is_active.is_(True),
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        return int(self._session.execute(stmt).rowcount or 0)

    def deactivate_by_id(self, *, user_id: str, session_id: str) -> int:
        stmt = (
            update(AdminSessionModel)
            .where(
                AdminSessionModel.user_id == str(user_id),
                AdminSessionModel.id == session_id,
                AdminSessionModel.is_active.is_(True),
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        return int(self._session.execute(stmt).rowcount or 0)

    def deactivate_all_for_user(self, user_id: str) -> int:
        stmt = (
            update(AdminSessionModel)
            .where(AdminSessionModel.user_id == str(user_id), AdminSessionModel.is_active.is_(True))
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        return int(self._session.execute(stmt).rowcount or 0)

    def purge_stale(self, *, older_than: datetime) -> int:
        """Hard-delete revoked or expired sessions whose last activity predates ``older_than``."""
        stmt = (
            delete(AdminSessionModel)
            .where(
                or_(AdminSessionModel.is_active.is_(False), AdminSessionModel.expires_at <= self._now()),
                AdminSessionModel.last_used_at < older_than,
            )
            .execution_options(synchronize_session=False)
        )
        return int(self._session.execute(stmt).rowcount or 0)
