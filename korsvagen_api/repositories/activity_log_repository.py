# korsvagen_api/repositories/activity_log_repository.py

from sqlalchemy import select

from korsvagen_api.core.base_repository import BaseRepository
from korsvagen_api.infrastructure.database.models.activity_log_model import ActivityLogModel


class ActivityLogRepository(BaseRepository[ActivityLogModel]):
    def list_for_user(self, user_id: str | None, *, limit: int = 50) -> list[ActivityLogModel]:
        stmt = select(ActivityLogModel)
        if user_id is None:
            stmt = stmt.where(ActivityLogModel.user_id.is_(None))
        else:
            stmt = stmt.where(ActivityLogModel.user_id == str(user_id))

        stmt = stmt.order_by(ActivityLogModel.id.desc()).limit(limit)
        return list(self._session.execute(stmt).scalars().all())
