# korsvagen_api/repositories/admin_user_repository.py

from datetime import datetime

from sqlalchemy import case, select, update

from korsvagen_api.core.base_repository import BaseRepository
from korsvagen_api.infrastructure.database.models.admin_user_model import AdminUserModel


class AdminUserRepository(BaseRepository[AdminUserModel]):
    def get_active_by_username(self, username: str) -> AdminUserModel | None:
        stmt = select(AdminUserModel).where(
            AdminUserModel.username == username,
            AdminUserModel.is_active.is_(True),
        )
        return self._session.execute(stmt).scalar_one_or_none()

    def get_by_username(self, username: str) -> AdminUserModel | None:
        stmt = select(AdminUserModel).where(AdminUserModel.username == username)
        return self._session.execute(stmt).scalar_one_or_none()

    def get_active_by_id(self, user_id: str) -> AdminUserModel | None:
        stmt = select(AdminUserModel).where(
            AdminUserModel.id == str(user_id),
            AdminUserModel.is_active.is_(True),
        )
        return self._session.execute(stmt).scalar_one_or_none()

    def register_failed_attempt(
        self, *, user_id: str, max_attempts: int, lock_until: datetime
    ) -> tuple[int, datetime | None]:
        # single UPDATE ... RETURNING; SET expressions see the pre-update row
        new_attempts = AdminUserModel.login_attempts + 1
        stmt = (
            update(AdminUserModel)
            .where(AdminUserModel.id == str(user_id))
            .values(
                login_attempts=new_attempts,
                locked_until=case((new_attempts >= max_attempts, lock_until), else_=None),
            )
            .returning(AdminUserModel.login_attempts, AdminUserModel.locked_until)
            .execution_options(synchronize_session=False)
        )
        row = self._session.execute(stmt).one()
        return int(row.login_attempts), row.locked_until

    def register_successful_login(self, user: AdminUserModel) -> AdminUserModel:
        user.login_attempts = 0
        user.locked_until = None
        user.last_login = self._now()
        self._session.flush()
        return user
