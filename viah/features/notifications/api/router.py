"""
Notification routes.

Usage:
    GET /api/notifications/couple/{wedding_id} - Unread vendor messages per conversation
"""

from fastapi import APIRouter, Depends

from viah.auth.access import ensure_wedding_access
from viah.auth.verify import auth_dependency
from viah.features.notifications.models import NotificationSummary
from viah.features.notifications.service import get_couple_notifications

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("/couple/{wedding_id}", response_model=NotificationSummary)
async def couple_notifications(wedding_id: str, claims: dict = Depends(auth_dependency)):
    await ensure_wedding_access(claims, wedding_id)
    return await get_couple_notifications(wedding_id)
