from fastapi import APIRouter, Depends

from ..services.quick_actions import quick_actions_for
from ..utils.dependencies import CurrentUser, get_current_user

router = APIRouter(prefix="/quick-actions", tags=["Quick Actions"])


@router.get("")
async def list_quick_actions(current: CurrentUser = Depends(get_current_user)):
    return {"success": True, "quick_actions": quick_actions_for(current.role)}
