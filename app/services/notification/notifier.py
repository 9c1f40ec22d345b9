import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

NOTIFICATION_KINDS = ("success", "error")


@dataclass(frozen=True)
class Notification:
    message: str
    kind: str
    issued_at: float
    expires_at: float
    highlight: Optional[int] = None

    def remaining(self, now: float) -> float:
        return max(0.0, self.expires_at - now)


class NotificationSink:
    """
    Holds the single transient result message shown to the user.

    A new notification supersedes the previous one and restarts the
    auto-dismiss deadline. Expiry is checked against the injected clock on
    read, so no background timer thread is needed.
    """

    def __init__(self, timeout: float = 5.0, clock: Callable[[], float] = time.monotonic):
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.timeout = timeout
        self._clock = clock
        self._lock = threading.RLock()
        self._current: Optional[Notification] = None

    def notify(self, message: str, kind: str = "success", highlight: Optional[int] = None) -> Notification:
        if kind not in NOTIFICATION_KINDS:
            raise ValueError(f"Unknown notification kind: {kind}")

        with self._lock:
            now = self._clock()
            self._current = Notification(
                message=message,
                kind=kind,
                issued_at=now,
                expires_at=now + self.timeout,
                highlight=highlight,
            )
            return self._current

    def current(self) -> Optional[Notification]:
        with self._lock:
            if self._current is not None and self._clock() >= self._current.expires_at:
                logger.debug(f"Notification expired: {self._current.message}")
                self._current = None
            return self._current

    def dismiss(self) -> bool:
        with self._lock:
            active = self.current() is not None
            self._current = None
            return active

    def remaining(self) -> Optional[float]:
        notification = self.current()
        return notification.remaining(self._clock()) if notification else None
