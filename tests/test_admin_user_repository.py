import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta

import pytest

from korsvagen_api.infrastructure.database.models import AdminUserModel
from korsvagen_api.infrastructure.database.session import Database
from korsvagen_api.repositories.admin_user_repository import AdminUserRepository

NOW = datetime(2026, 1, 15, 12, 0, 0)
LOCK_UNTIL = NOW + timedelta(minutes=30)


@pytest.fixture
def database(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'auth.db'}")
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def user_id(database):
    with database.session() as session:
        user = AdminUserRepository(session).add(
            AdminUserModel(username="admin", email="admin@korsvagen.test", password_hash="x", role="admin")
        )
        return user.id


def _fail_once(database, user_id, barrier):
    barrier.wait()
    with database.session() as session:
        return AdminUserRepository(session).register_failed_attempt(
            user_id=user_id, max_attempts=5, lock_until=LOCK_UNTIL
        )


@pytest.mark.parametrize("workers", [3, 8])
def test_concurrent_failures_are_counted_once_each(database, user_id, workers):
    barrier = threading.Barrier(workers)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(_fail_once, database, user_id, barrier) for _ in range(workers)]
        results = [f.result() for f in futures]

    assert sorted(attempts for attempts, _ in results) == list(range(1, workers + 1))
    for attempts, locked_until in results:
        assert locked_until == (LOCK_UNTIL if attempts >= 5 else None)

    with database.session() as session:
        user = session.get(AdminUserModel, user_id)
        assert user.login_attempts == workers
        assert user.locked_until == (LOCK_UNTIL if workers >= 5 else None)


def test_success_resets_counters(database, user_id):
    for _ in range(5):
        with database.session() as session:
            AdminUserRepository(session).register_failed_attempt(
                user_id=user_id, max_attempts=5, lock_until=LOCK_UNTIL
            )

    with database.session() as session:
        repo = AdminUserRepository(session, clock=lambda: NOW)
        repo.register_successful_login(session.get(AdminUserModel, user_id))

    with database.session() as session:
        user = session.get(AdminUserModel, user_id)
        assert (user.login_attempts, user.locked_until, user.last_login) == (0, None, NOW)
