"""Role request/response models."""

from pydantic import BaseModel, Field

from backend.app.models.common import ORMModel, UtcDatetime


class RoleCreate(BaseModel):
    """Request body for POST /api/roles."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)


class RoleUpdate(BaseModel):
    """Request body for PUT /api/roles/{id}."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    is_active: bool = True


class RoleRead(ORMModel):
    """Role as returned by the API."""

    id: int
    name: str
    description: str | None
    is_active: bool
    created_at: UtcDatetime
    updated_at: UtcDatetime | None
