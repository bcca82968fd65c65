"""Models package - re-exports for convenience."""

from backend.app.models.audit_log import AuditLogCreate, AuditLogPage, AuditLogRead
from backend.app.models.common import ORMModel
from backend.app.models.condominium import (
    CondominiumCreate,
    CondominiumRead,
    CondominiumSummary,
    CondominiumUpdate,
    HousingUnitCreate,
    HousingUnitDetail,
    HousingUnitRead,
    HousingUnitUpdate,
)
from backend.app.models.role import RoleCreate, RoleRead, RoleUpdate
from backend.app.models.tenant import TenantCreate, TenantRead, TenantUpdate
from backend.app.models.user import UserCreate, UserRead, UserUpdate
from backend.app.models.user_role import UserRoleCreate, UserRoleForUser, UserRoleRead

__all__ = [
    "AuditLogCreate",
    "AuditLogPage",
    "AuditLogRead",
    "CondominiumCreate",
    "CondominiumRead",
    "CondominiumSummary",
    "CondominiumUpdate",
    "HousingUnitCreate",
    "HousingUnitDetail",
    "HousingUnitRead",
    "HousingUnitUpdate",
    "ORMModel",
    "RoleCreate",
    "RoleRead",
    "RoleUpdate",
    "TenantCreate",
    "TenantRead",
    "TenantUpdate",
    "UserCreate",
    "UserRead",
    "UserRoleCreate",
    "UserRoleForUser",
    "UserRoleRead",
    "UserUpdate",
]
