import pytest
from sqlalchemy.exc import OperationalError

from korsvagen_api.entities.auth_context import ClientInfo
from korsvagen_api.infrastructure.database.models import AdminUserModel
from korsvagen_api.infrastructure.database.session import db_session
from korsvagen_api.repositories.activity_log_repository import ActivityLogRepository
from korsvagen_api.services.audit_service import AuditAction, AuditService

CLIENT = ClientInfo(ip_address="203.0.113.7", user_agent="pytest")


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


class BrokenRepository:
    def add(self, model):
        raise OperationalError("INSERT INTO admin_activity_logs", {}, Exception("disk full"))


def test_entries_are_listed_newest_first(app_ctx, admin_id):
    with db_session() as session:
        audit = AuditService(session)
        audit.log(action=AuditAction.LOGIN_SUCCESS, user_id=admin_id, client=CLIENT)
        audit.log(action=AuditAction.LOGOUT, user_id=admin_id, client=CLIENT, details={"all_sessions": True})
        audit.log(action=AuditAction.LOGIN_FAILED, user_id=None, client=CLIENT, success=False)

    with db_session() as session:
        repo = ActivityLogRepository(session)
        mine = repo.list_for_user(admin_id)
        anonymous = repo.list_for_user(None)

    assert [e.action for e in mine] == ["LOGOUT", "LOGIN_SUCCESS"]
    assert mine[0].details == {"all_sessions": True}
    assert mine[0].ip_address == "203.0.113.7"
    assert [e.success for e in anonymous] == [False]


def test_failed_write_does_not_break_the_transaction(app_ctx, admin_id):
    with db_session() as session:
        AuditService(session, repo=BrokenRepository()).log(action=AuditAction.LOGIN_SUCCESS, user_id=admin_id)
        session.get(AdminUserModel, admin_id).profile_data = {"theme": "dark"}

    with db_session() as session:
        assert session.get(AdminUserModel, admin_id).profile_data == {"theme": "dark"}
        assert ActivityLogRepository(session).list_for_user(admin_id) == []
