from enum import Enum
from typing import List, Optional
from pydantic import BaseModel

class NotificationType(str, Enum):
    error = "error"
    warning = "warning"
    info = "info"

class Notification(BaseModel):
    type: NotificationType
    message: str
    detail: Optional[str] = None
    code: Optional[str] = None
    timestamp: float

class NotificationList(BaseModel):
    notifications: List[Notification] = []
    count: int = 0

class ClearResult(BaseModel):
    ok: bool = True
    cleared: int = 0
