"""Audit log request/response models.

The client IP address is accepted and stored but is not part of any response.
"""

from pydantic import BaseModel, Field

from backend.app.models.common import ORMModel, UtcDatetime


class AuditLogCreate(BaseModel):
    """Request body for POST /api/audit-logs."""

    entity_name: str = Field(..., min_length=1, max_length=100)
    action: str = Field(..., min_length=1, max_length=50)
    entity_id: str | None = Field(None, max_length=50)
    changes: str | None = None
    user_id: str | None = Field(None, max_length=100)
    ip_address: str | None = Field(None, max_length=45)
    description: str | None = Field(None, max_length=500)


class AuditLogRead(ORMModel):
    """Audit entry as returned by the API."""

    id: int
    entity_name: str
    entity_id: str | None
    action: str
    description: str | None
    changes: str | None
    user_id: str | None
    created_at: UtcDatetime


class AuditLogPage(BaseModel):
    """Paged audit entries."""

    total_count: int
    page: int
    page_size: int
    total_pages: int
    data: list[AuditLogRead]
