# korsvagen_api/api/schemas/auth_schema.py
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from korsvagen_api.api.schemas._datetime_serializer import serialize_dt


class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6)
    remember_me: bool = Field(default=False, alias="rememberMe")

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class RefreshRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str | None = Field(default=None, alias="refreshToken")


class LogoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # omitted: every session of the caller is closed
    refresh_token: str | None = Field(default=None, alias="refreshToken")


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    role: str
    profile_data: dict[str, Any] | None = None
    last_login: datetime | None = None
    created_at: datetime | None = None

    def to_json(self) -> dict[str, Any]:
        data = self.model_dump()
        data["last_login"] = serialize_dt(self.last_login)
        data["created_at"] = serialize_dt(self.created_at)
        return data


class SessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_agent: str | None = None
    ip_address: str | None = None
    created_at: datetime
    last_used_at: datetime
    expires_at: datetime

    def to_json(self) -> dict[str, Any]:
        data = self.model_dump()
        for key in ("created_at", "last_used_at", "expires_at"):
            data[key] = serialize_dt(getattr(self, key))
        return data


class TokenPair(BaseModel):
    access: str
    refresh: str | None = None


class ActivityQuery(BaseModel):
    limit: int = Field(default=50, ge=1, le=100)


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    action: str
    success: bool
    details: dict[str, Any] | None = None
    ip_address: str | None = None
    created_at: datetime

    def to_json(self) -> dict[str, Any]:
        data = self.model_dump()
        data["created_at"] = serialize_dt(self.created_at)
        return data
