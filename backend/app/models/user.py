"""User request/response models.

Password material is accepted on input only; responses never carry it.
"""

from pydantic import BaseModel, Field

from backend.app.models.common import ORMModel, UtcDatetime


class UserCreate(BaseModel):
    """Request body for POST /api/users."""

    username: str = Field(..., min_length=3, max_length=100)
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=6, max_length=500)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)


class UserUpdate(BaseModel):
    """Request body for PUT /api/users/{id}."""

    username: str = Field(..., min_length=3, max_length=100)
    email: str = Field(..., max_length=255)
    password: str | None = Field(None, min_length=6, max_length=500)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    is_active: bool = True


class UserRead(ORMModel):
    """User as returned by the API."""

    id: int
    username: str
    email: str
    first_name: str | None
    last_name: str | None
    is_active: bool
    created_at: UtcDatetime
    updated_at: UtcDatetime | None
