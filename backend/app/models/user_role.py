"""Role assignment request/response models."""

from pydantic import BaseModel, Field

from backend.app.models.common import UtcDatetime


class UserRoleCreate(BaseModel):
    """Request body for POST /api/user-roles."""

    user_id: int = Field(..., gt=0)
    role_id: int = Field(..., gt=0)


class UserRoleRead(BaseModel):
    """Assignment with the names of both sides."""

    id: int
    user_id: int
    username: str
    role_id: int
    role_name: str
    assigned_at: UtcDatetime
    tenant_id: str


class UserRoleForUser(BaseModel):
    """A role held by a given user."""

    id: int
    role_id: int
    role_name: str
    role_description: str | None
    assigned_at: UtcDatetime
