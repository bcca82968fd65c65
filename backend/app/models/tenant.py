"""Tenant request/response models."""

from pydantic import BaseModel, Field

from backend.app.models.common import ORMModel, UtcDatetime


class TenantCreate(BaseModel):
    """Request body for POST /api/tenants."""

    name: str = Field(..., min_length=1, max_length=200)
    tenant_id: str = Field(..., min_length=1, max_length=50, pattern=r"^[A-Za-z0-9_.\-]+$")
    description: str | None = Field(None, max_length=500)


class TenantUpdate(BaseModel):
    """Request body for PUT /api/tenants/{id}."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=500)
    is_active: bool = True


class TenantRead(ORMModel):
    """Tenant as returned by the API."""

    id: int
    name: str
    description: str | None
    tenant_id: str
    is_active: bool
    created_at: UtcDatetime
    updated_at: UtcDatetime | None
