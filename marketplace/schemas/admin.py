"""
Admin request schemas.
"""
from typing import Literal, Optional

from pydantic import BaseModel, Field


class UserRoleRequest(BaseModel):
    role: Literal["buyer", "seller", "admin"]


class UserStatusRequest(BaseModel):
    is_active: bool


class ProductStatusRequest(BaseModel):
    is_active: bool
    admin_remarks: Optional[str] = Field(None, max_length=1000)


class ProductApprovalRequest(BaseModel):
    admin_remarks: Optional[str] = Field(None, max_length=1000)
