"""
Seller notification inbox.
"""
from fastapi import APIRouter, Depends

from ..core.exceptions import NotFoundError
from ..repositories import UserRepository
from ..schemas.common import MessageResponse
from ..utils.dependencies import CurrentUser, get_user_repository, require_seller, validate_object_id
from ..utils.serializers import serialize_docs

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("")
async def list_notifications(seller: CurrentUser = Depends(require_seller), users: UserRepository = Depends(get_user_repository)):
    user = await users.find_by_id(seller.id)
    if not user:
        raise NotFoundError("User not found")

    notifications = (user.get("seller_info") or {}).get("notifications", [])
    notifications = sorted(notifications, key=lambda n: n["created_at"], reverse=True)
    return {
        "success": True,
        "notifications": serialize_docs(notifications),
        "unread_count": sum(1 for n in notifications if not n.get("is_read", False)),
    }


@router.put("/read-all", response_model=MessageResponse)
async def mark_all_read(seller: CurrentUser = Depends(require_seller), users: UserRepository = Depends(get_user_repository)):
    user = await users.find_by_id(seller.id)
    if not user:
        raise NotFoundError("User not found")
    if (user.get("seller_info") or {}).get("notifications"):
        await users.mark_all_notifications_read(seller.id)
    return {"success": True, "message": "All notifications marked as read"}


@router.put("/{notification_id}/read", response_model=MessageResponse)
async def mark_read(
    notification_id: str,
    seller: CurrentUser = Depends(require_seller),
    users: UserRepository = Depends(get_user_repository),
):
    validate_object_id(notification_id, "notification")
    if not await users.mark_notification_read(seller.id, notification_id):
        raise NotFoundError("Notification not found")
    return {"success": True, "message": "Notification marked as read"}
