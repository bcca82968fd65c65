"""SQLAlchemy ORM models for the tenant-scoped domain."""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship, validates

from backend.app.db.tenancy import DomainValidationError, TenantScopedMixin


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def _required(value: str | None, field: str, max_length: int) -> str:
    if value is None or not value.strip():
        raise DomainValidationError(f"{field} must not be empty")
    if len(value) > max_length:
        raise DomainValidationError(f"{field} must not exceed {max_length} characters")
    return value.strip()


def _optional(value: str | None, field: str, max_length: int) -> str | None:
    if value is None:
        return None
    if len(value) > max_length:
        raise DomainValidationError(f"{field} must not exceed {max_length} characters")
    return value.strip()


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class AuditableMixin:
    """Creation and modification stamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def mark_created(self, actor: str | None = None) -> None:
        self.created_at = utcnow()
        self.created_by = actor

    def mark_updated(self, actor: str | None = None) -> None:
        self.updated_at = utcnow()
        self.updated_by = actor


class Tenant(TenantScopedMixin, AuditableMixin, Base):
    """Tenant table - a customer whose rows are isolated from other tenants.

    The tenant row is filtered by its own ``tenant_id`` like every other table,
    so a request only ever sees the record of the tenant it runs as.
    """

    __tablename__ = "tenants"
    __table_args__ = (
        UniqueConstraint("tenant_id", name="uq_tenants_tenant_id"),
        Index("ix_tenants_name", "name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        return _required(value, "name", 200)

    @validates("description")
    def _validate_description(self, key: str, value: str | None) -> str | None:
        return _optional(value, "description", 500)


class User(TenantScopedMixin, AuditableMixin, Base):
    """User table - tenant-scoped accounts."""

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("username", "tenant_id", name="uq_users_username_tenant"),
        UniqueConstraint("email", "tenant_id", name="uq_users_email_tenant"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(500), nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    user_roles: Mapped[list["UserRole"]] = relationship(
        "UserRole", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    @validates("username")
    def _validate_username(self, key: str, value: str) -> str:
        return _required(value, "username", 100)

    @validates("email")
    def _validate_email(self, key: str, value: str) -> str:
        value = _required(value, "email", 255)
        if "@" not in value or "." not in value:
            raise DomainValidationError("email must be a valid address")
        return value.lower()

    @validates("password_hash")
    def _validate_password_hash(self, key: str, value: str) -> str:
        if value is None or not value.strip():
            raise DomainValidationError("password_hash must not be empty")
        if len(value) > 500:
            raise DomainValidationError("password_hash must not exceed 500 characters")
        return value

    @validates("first_name", "last_name")
    def _validate_names(self, key: str, value: str | None) -> str | None:
        return _optional(value, key, 100)


class Role(TenantScopedMixin, AuditableMixin, Base):
    """Role table - tenant-scoped named permissions group."""

    __tablename__ = "roles"
    __table_args__ = (UniqueConstraint("name", "tenant_id", name="uq_roles_name_tenant"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    user_roles: Mapped[list["UserRole"]] = relationship(
        "UserRole", back_populates="role", cascade="all, delete-orphan", passive_deletes=True
    )

    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        return _required(value, "name", 100)

    @validates("description")
    def _validate_description(self, key: str, value: str | None) -> str | None:
        return _optional(value, "description", 500)


class UserRole(TenantScopedMixin, Base):
    """Role assignment table - many-to-many between users and roles."""

    __tablename__ = "user_roles"
    __table_args__ = (
        UniqueConstraint("user_id", "role_id", "tenant_id", name="uq_user_roles_user_role_tenant"),
        Index("ix_user_roles_user_id", "user_id"),
        Index("ix_user_roles_role_id", "role_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    role_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    user: Mapped["User"] = relationship("User", back_populates="user_roles")
    role: Mapped["Role"] = relationship("Role", back_populates="user_roles")


class Condominium(TenantScopedMixin, AuditableMixin, Base):
    """Condominium table - a property managed by a tenant."""

    __tablename__ = "condominiums"
    __table_args__ = (UniqueConstraint("name", "tenant_id", name="uq_condominiums_name_tenant"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    total_units: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    housing_units: Mapped[list["HousingUnit"]] = relationship(
        "HousingUnit",
        back_populates="condominium",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="HousingUnit.id",
    )

    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        return _required(value, "name", 200)


class HousingUnit(TenantScopedMixin, AuditableMixin, Base):
    """Housing unit table - an apartment, house or shop inside a condominium."""

    __tablename__ = "housing_units"
    __table_args__ = (
        UniqueConstraint(
            "unit_number", "condominium_id", "tenant_id", name="uq_housing_units_number_condo_tenant"
        ),
        Index("ix_housing_units_condominium_id", "condominium_id"),
        Index("ix_housing_units_is_occupied", "is_occupied"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    unit_number: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(String(200), nullable=True)
    unit_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    area_sqm: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    bedrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bathrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    has_garage: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_occupied: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    condominium_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("condominiums.id", ondelete="CASCADE"), nullable=False
    )

    condominium: Mapped["Condominium"] = relationship("Condominium", back_populates="housing_units")

    @validates("unit_number")
    def _validate_unit_number(self, key: str, value: str) -> str:
        return _required(value, "unit_number", 50)


class AuditLog(TenantScopedMixin, AuditableMixin, Base):
    """Audit log table - append-only record of actions on domain entities."""

    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_entity", "entity_name", "entity_id"),
        Index("ix_audit_logs_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entity_name: Mapped[str] = mapped_column(String(100), nullable=False)
    entity_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    user_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # JSON document describing the change
    changes: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Never exposed in API responses
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)

    @validates("entity_name")
    def _validate_entity_name(self, key: str, value: str) -> str:
        return _required(value, "entity_name", 100)

    @validates("action")
    def _validate_action(self, key: str, value: str) -> str:
        return _required(value, "action", 50)

    @validates("entity_id")
    def _validate_entity_id(self, key: str, value: str | None) -> str | None:
        return _optional(value, "entity_id", 50)

    @validates("user_id")
    def _validate_user_id(self, key: str, value: str | None) -> str | None:
        return _optional(value, "user_id", 100)

    @validates("description")
    def _validate_description(self, key: str, value: str | None) -> str | None:
        return _optional(value, "description", 500)

    @validates("ip_address")
    def _validate_ip_address(self, key: str, value: str | None) -> str | None:
        return _optional(value, "ip_address", 45)
