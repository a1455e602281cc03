from korsvagen_api.infrastructure.database.models.activity_log_model import ActivityLogModel
from korsvagen_api.infrastructure.database.models.admin_session_model import AdminSessionModel
from korsvagen_api.infrastructure.database.models.admin_user_model import AdminRole, AdminUserModel

__all__ = ["ActivityLogModel", "AdminSessionModel", "AdminRole", "AdminUserModel"]
