"""
Shared base for document models.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class MongoModel(BaseModel):
    """
    Base for documents stored in MongoDB.
    References are kept as ObjectId so they round-trip through the driver unchanged.
    """
    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    id: Optional[ObjectId] = Field(None, alias="_id")
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def to_document(self) -> Dict[str, Any]:
        """Dump to a dict ready for insert_one (no ``_id`` until the driver assigns one)."""
        doc = self.model_dump(by_alias=True)
        if doc.get("_id") is None:
            doc.pop("_id", None)
        return doc
