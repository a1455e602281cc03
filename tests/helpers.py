"""Test helpers shared by the suites."""
from datetime import datetime, timedelta

from korsvagen_api.config.flask_config import get_auth_components
from korsvagen_api.config.settings import Settings
from korsvagen_api.infrastructure.database.models import ActivityLogModel, AdminSessionModel, AdminUserModel
from korsvagen_api.infrastructure.database.session import db_session

ACCESS_SECRET = "test-access-secret-0123456789abcdef"
REFRESH_SECRET = "test-refresh-secret-0123456789abcdef"

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct-horse"


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def make_settings(**overrides) -> Settings:
    values = {
        "database_url": "sqlite://",
        "environment": "test",
        "jwt_secret": ACCESS_SECRET,
        "jwt_refresh_secret": REFRESH_SECRET,
        "bcrypt_rounds": 4,
        "auth_rate_limit_max": 1000,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def create_user(
    app,
    *,
    username: str = ADMIN_USERNAME,
    password: str = ADMIN_PASSWORD,
    role: str = "admin",
    is_active: bool = True,
    email: str | None = None,
) -> str:
    with app.app_context():
        hasher = get_auth_components().password_hasher
        with db_session() as session:
            user = AdminUserModel(
                username=username,
                email=email or f"{username}@korsvagen.test",
                password_hash=hasher.hash_password(password),
                role=role,
                is_active=is_active,
            )
            session.add(user)
            session.flush()
            return user.id


def fetch_user(app, user_id: str) -> AdminUserModel:
    with app.app_context():
        with db_session() as session:
            return session.get(AdminUserModel, user_id)


def update_user(app, user_id: str, **values) -> None:
    with app.app_context():
        with db_session() as session:
            user = session.get(AdminUserModel, user_id)
            for key, value in values.items():
                setattr(user, key, value)


def fetch_sessions(app, user_id: str) -> list[AdminSessionModel]:
    with app.app_context():
        with db_session() as session:
            return list(session.query(AdminSessionModel).filter_by(user_id=user_id).all())


def fetch_activity(app, action: str | None = None) -> list[ActivityLogModel]:
    with app.app_context():
        with db_session() as session:
            query = session.query(ActivityLogModel)
            if action is not None:
                query = query.filter_by(action=action)
            return list(query.order_by(ActivityLogModel.id).all())


def login(client, username: str = ADMIN_USERNAME, password: str = ADMIN_PASSWORD, **extra):
    return client.post("/api/auth/login", json={"username": username, "password": password, **extra})


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def jwt_provider(app):
    with app.app_context():
        return get_auth_components().jwt_provider
