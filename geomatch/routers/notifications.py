from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..models.notification import MarkNotificationAsReadRequest, NotificationsResponse
from ..services.notification_service import NotificationService, get_notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationsResponse)
async def list_notifications(
    telegram_id: int = Query(..., alias="telegramId"),
    unread_only: bool = Query(False, alias="unreadOnly"),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationsResponse:
    notifications = await service.list_notifications(telegram_id, unread_only=unread_only)
    return NotificationsResponse(notifications=notifications)


@router.post("/read")
async def mark_notification_as_read(
    payload: MarkNotificationAsReadRequest,
    service: NotificationService = Depends(get_notification_service),
):
    updated = await service.mark_as_read(payload.notification_id, payload.telegram_id)
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="notification not found")
    return {"success": True}


__all__ = ["router"]
