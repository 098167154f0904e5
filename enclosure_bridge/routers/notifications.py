from typing import Annotated
from fastapi import APIRouter, Depends
from enclosure_bridge.models.notification import ClearResult, NotificationList
from enclosure_bridge.services.notifications import NotificationService
from enclosure_bridge.dependencies import get_notification_service

router = APIRouter(tags=["notifications"])

NotificationsDep = Annotated[NotificationService, Depends(get_notification_service)]

@router.get("", response_model=NotificationList)
async def list_notifications(notifications: NotificationsDep):
    items = notifications.list()
    return NotificationList(notifications=items, count=len(items))

@router.delete("", response_model=ClearResult)
async def clear_notifications(notifications: NotificationsDep):
    return ClearResult(cleared=notifications.clear())
