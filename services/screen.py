# services/screen.py
from typing import List

from services.notification import Notification, build_notification


class CancellationToken:
    """Set once when a screen is torn down; late results check it and are dropped."""

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class Screen:
    """Per-screen state shared by every dashboard screen."""

    def __init__(self):
        self.token = CancellationToken()
        self.notifications: List[Notification] = []
        self.load_failed = False

    def close(self) -> None:
        self.token.cancel()

    @property
    def closed(self) -> bool:
        return self.token.cancelled

    def notify(self, kind: str) -> Notification:
        notification = build_notification(kind)
        if not self.closed:
            self.notifications.append(notification)
        return notification

    def dismiss(self, kind: str) -> None:
        self.notifications = [n for n in self.notifications if n.kind != kind]

    def render(self) -> dict:
        raise NotImplementedError
