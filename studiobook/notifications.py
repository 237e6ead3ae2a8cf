"""
User-facing notification channel
Stands in for the toast UI: every message is logged and forwarded to the
subscribed presenters. The presenters themselves live outside this package.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Notification:
    level: NotificationLevel
    message: str
    timestamp: datetime = field(default_factory=datetime.now)


Presenter = Callable[[Notification], None]

_LOG_LEVELS = {
    NotificationLevel.SUCCESS: logging.INFO,
    NotificationLevel.INFO: logging.INFO,
    NotificationLevel.WARNING: logging.WARNING,
    NotificationLevel.ERROR: logging.ERROR,
}


class Notifier:
    """Fans messages out to presenters and keeps the recent history"""

    def __init__(self, history_size: int = 50):
        self.history: List[Notification] = []
        self.history_size = history_size
        self._presenters: List[Presenter] = []

    def subscribe(self, presenter: Presenter) -> None:
        self._presenters.append(presenter)

    def notify(self, level: NotificationLevel, message: str) -> Notification:
        notification = Notification(level=level, message=message)
        logger.log(_LOG_LEVELS[level], f"[{level.value}] {message}")

        self.history.append(notification)
        if len(self.history) > self.history_size:
            self.history = self.history[-self.history_size :]

        for presenter in list(self._presenters):
            try:
                presenter(notification)
            except Exception as e:
                logger.error(f"❌ Notification presenter failed: {e}")
        return notification

    def success(self, message: str) -> Notification:
        return self.notify(NotificationLevel.SUCCESS, message)

    def info(self, message: str) -> Notification:
        return self.notify(NotificationLevel.INFO, message)

    def warning(self, message: str) -> Notification:
        return self.notify(NotificationLevel.WARNING, message)

    def error(self, message: str) -> Notification:
        return self.notify(NotificationLevel.ERROR, message)

    @property
    def last(self):
        return self.history[-1] if self.history else None
