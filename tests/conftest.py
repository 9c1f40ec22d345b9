"""
Pytest configuration and fixtures
"""
import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.services.notification.notifier import NotificationSink
from app.services.student.roster import RosterEngine


class FakeClock:
    """Manually advanced clock for notification expiry tests"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def roster():
    return RosterEngine()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier(clock):
    return NotificationSink(timeout=5.0, clock=clock)


@pytest.fixture
def app(notifier):
    """Fresh app per test so rosters never leak between tests"""
    application = create_app()
    application.state.notifier = notifier
    return application


@pytest.fixture
def client(app):
    return TestClient(app)
