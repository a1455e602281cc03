# korsvagen_api/infrastructure/database/models/activity_log_model.py

from datetime import datetime

from sqlalchemy import JSON, BigInteger, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from korsvagen_api.core.clock import utcnow
from korsvagen_api.infrastructure.database.base_model import BaseModel


class ActivityLogModel(BaseModel):
    __tablename__ = "admin_activity_logs"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )

    user_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("admin_users.id"), nullable=True)

    action: Mapped[str] = mapped_column(String(40), nullable=False)
    success: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    details: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
