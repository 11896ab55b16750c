"""Outbound notification hook for user-visible outcomes."""

from collections import deque
from datetime import datetime, timezone
from enum import Enum
from typing import Deque, List

from pydantic import BaseModel, Field

from .logging import logger


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    message: str
    level: NotificationLevel
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationFeed:
    """
    Keeps the most recent notifications for a presentation layer to render.

    Every notification is also written to the structured log so headless
    deployments keep a trace of user-visible outcomes.
    """

    def __init__(self, history_size: int = 100):
        self._items: Deque[Notification] = deque(maxlen=history_size)

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> Notification:
        notification = Notification(message=message, level=NotificationLevel(level))
        self._items.append(notification)

        data = {"message": message, "level": notification.level.value}
        if notification.level is NotificationLevel.ERROR:
            logger.log_error("notification", data)
        elif notification.level is NotificationLevel.WARNING:
            logger.log_warning("notification", data)
        else:
            logger.log_step("notification", data)
        return notification

    def history(self) -> List[Notification]:
        return list(self._items)

    def messages(self) -> List[str]:
        return [item.message for item in self._items]

    def clear(self) -> None:
        self._items.clear()
