from datetime import datetime

import pytest

from helpers import FakeClock, create_user, make_settings
from korsvagen_api.infrastructure.database.session import get_database
from korsvagen_api.main import create_app


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 15, 12, 0, 0))


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def app(settings, clock):
    app = create_app(settings, clock=clock)
    app.config["TESTING"] = True
    with app.app_context():
        get_database().create_all()

    yield app

    with app.app_context():
        get_database().dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_id(app):
    return create_user(app)
