# korsvagen_api/infrastructure/database/models/admin_session_model.py

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from korsvagen_api.core.clock import utcnow
from korsvagen_api.infrastructure.database.base_model import BaseModel


class AdminSessionModel(BaseModel):
    __tablename__ = "admin_sessions"
    __table_args__ = (Index("ix_admin_sessions_user_active", "user_id", "is_active"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))

    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("admin_users.id"), nullable=False)

    refresh_token: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    last_used_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
