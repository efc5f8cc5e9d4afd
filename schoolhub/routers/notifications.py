# schoolhub/routers/notifications.py
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth_dependencies import get_current_caller
from ..core.caller import Caller
from ..core.database import get_db
from ..services.notification_service import NotificationService
from ..utils.formatting import notification_to_dict

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("")
async def get_notifications(
    unread_only: bool = Query(False, alias="unreadOnly"),
    caller: Caller = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db)
):
    """Newest notifications of the caller"""
    service = NotificationService(db)
    notifications, unread_count = await service.list_for_user(caller.user_id, unread_only)
    return {
        "notifications": [notification_to_dict(n) for n in notifications],
        "unreadCount": unread_count,
    }


@router.put("/read-all")
async def mark_all_as_read(caller: Caller = Depends(get_current_caller), db: AsyncSession = Depends(get_db)):
    service = NotificationService(db)
    await service.mark_all_read(caller.user_id)
    return {"message": "All notifications marked as read"}


@router.put("/{id}/read")
async def mark_as_read(id: UUID, caller: Caller = Depends(get_current_caller), db: AsyncSession = Depends(get_db)):
    service = NotificationService(db)
    notification = await service.mark_read(id, caller.user_id)
    return notification_to_dict(notification)


@router.delete("/{id}")
async def delete_notification(id: UUID, caller: Caller = Depends(get_current_caller),
                              db: AsyncSession = Depends(get_db)):
    service = NotificationService(db)
    await service.delete_for_user(id, caller.user_id)
    return {"message": "Notification deleted"}
