from fastapi import Request

from app.services.notification.notifier import NotificationSink
from app.services.student.roster import RosterEngine


def get_roster(request: Request) -> RosterEngine:
    """
    Dependency để lấy RosterEngine của ứng dụng.
    Mỗi app (create_app) sở hữu một danh sách riêng.
    """
    return request.app.state.roster


def get_notifier(request: Request) -> NotificationSink:
    """Dependency để lấy khung thông báo của ứng dụng."""
    return request.app.state.notifier
