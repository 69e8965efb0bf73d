from fastapi import APIRouter

router = APIRouter(prefix="/categories", tags=["Categories"])

CATEGORIES = [
    {"_id": "1", "name": "Jewelry", "slug": "jewelry"},
    {"_id": "2", "name": "Textiles", "slug": "textiles"},
    {"_id": "3", "name": "Pottery", "slug": "pottery"},
    {"_id": "4", "name": "Handicrafts", "slug": "handicrafts"},
]


@router.get("")
async def list_categories():
    return {"success": True, "categories": CATEGORIES}
