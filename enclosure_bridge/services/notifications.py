"""
In-memory notification feed.
The UI polls it to show errors and warnings raised by fire-and-forget calls.
"""
import logging
import time
from collections import deque
from typing import Deque, List, Optional

from enclosure_bridge.core.config import settings
from enclosure_bridge.models.notification import Notification, NotificationType

log = logging.getLogger("enclosure_bridge.notifications")

_LOG_LEVELS = {
    NotificationType.error: logging.ERROR,
    NotificationType.warning: logging.WARNING,
    NotificationType.info: logging.INFO,
}


class NotificationService:
    def __init__(self, history: int = settings.NOTIFICATION_HISTORY):
        self._items: Deque[Notification] = deque(maxlen=max(1, history))

    def _push(self, kind: NotificationType, message: str, detail: Optional[str], code: Optional[str]) -> Notification:
        note = Notification(type=kind, message=message, detail=detail, code=code, timestamp=time.time())
        self._items.append(note)
        log.log(_LOG_LEVELS[kind], "%s: %s (%s)", kind.value, message, detail)
        return note

    def set_error(self, message: str, detail: Optional[str] = None, code: Optional[str] = None) -> Notification:
        return self._push(NotificationType.error, message, detail, code)

    def set_warning(self, message: str, detail: Optional[str] = None, code: Optional[str] = None) -> Notification:
        return self._push(NotificationType.warning, message, detail, code)

    def set_info(self, message: str, detail: Optional[str] = None, code: Optional[str] = None) -> Notification:
        return self._push(NotificationType.info, message, detail, code)

    def list(self) -> List[Notification]:
        return list(self._items)

    def clear(self) -> int:
        n = len(self._items)
        self._items.clear()
        return n

    def __len__(self) -> int:
        return len(self._items)
