# media_gallery/services/notification_service.py
"""
User-visible notifications.

Pipelines report outcomes through a ``NotificationSink``. The default sink
keeps a bounded history that the admin API exposes and mirrors every
notification into the log.
"""

from collections import deque
from typing import Deque, List, Optional

from ..enums import LoggerName, LogSource, NotificationSeverity
from ..models.notification_model import Notification
from .logger import get_service_logger

logger = get_service_logger(LoggerName.NOTIFICATIONS, LogSource.SYSTEM)


class NotificationCenter:
    def __init__(self, history_size: int = 50):
        self._history: Deque[Notification] = deque(maxlen=history_size)

    def notify(
        self,
        message: str,
        severity: NotificationSeverity = NotificationSeverity.INFO,
    ) -> None:
        self._history.append(Notification(message=message, severity=severity))
        if severity is NotificationSeverity.ERROR:
            logger.error(f"Notification: {message}")
        elif severity is NotificationSeverity.WARNING:
            logger.warning(f"Notification: {message}")
        else:
            logger.info(f"Notification: {message}")

    def recent(self, limit: Optional[int] = None) -> List[Notification]:
        """Newest first."""
        items = list(reversed(self._history))
        return items[:limit] if limit is not None else items

    def clear(self) -> None:
        self._history.clear()

    def __len__(self) -> int:
        return len(self._history)
