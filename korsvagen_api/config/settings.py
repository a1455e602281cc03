# korsvagen_api/config/settings.py
from functools import lru_cache
from urllib.parse import quote_plus

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from korsvagen_api.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    # Supabase Postgres: either a full URL or the individual parts
    database_url: str | None = None
    db_host: str | None = None
    db_port: int = 5432
    db_name: str = "postgres"
    db_user: str | None = None
    db_password: str | None = None
    db_ssl: bool = True

    environment: str = "development"
    debug: bool = False

    log_level: str = "INFO"
    log_json: bool | None = None

    jwt_secret: str | None = None
    supabase_jwt_secret: str | None = None
    jwt_refresh_secret: str | None = None
    jwt_refresh_secret_fallback: bool = False
    jwt_expires_in: str = "1h"
    jwt_refresh_expires_in: str = "7d"
    jwt_remember_me_expires_in: str = "30d"

    auth_rate_limit_max: int = 5
    auth_rate_limit_window_minutes: int = 15

    bcrypt_rounds: int = 12

    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    trust_proxy: bool = False

    session_retention_days: int = 30

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "database_url",
        "db_host",
        "db_user",
        "db_password",
        "jwt_secret",
        "supabase_jwt_secret",
        "jwt_refresh_secret",
        mode="before",
    )
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            v = v.strip().strip('"').strip("'")
            return v or None
        return v

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url

        if not self.db_host or not self.db_user:
            raise ConfigurationError("DATABASE_URL or DB_HOST/DB_USER must be configured.")

        user = quote_plus(self.db_user)
        password = quote_plus(self.db_password or "")
        url = f"postgresql+psycopg2://{user}:{password}@{self.db_host}:{self.db_port}/{self.db_name}"
        if self.db_ssl:
            url += "?sslmode=require"
        return url


@lru_cache
def get_settings() -> Settings:
    return Settings()
