"""Seed demo tenant

Revision ID: 002
Revises: 001
Create Date: 2026-10-17

Adds tenant "demo-tenant" with roles Admin, User and Manager and an "admin"
user holding the Admin role.
"""

from collections.abc import Sequence
from datetime import datetime, timezone

import bcrypt
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

TENANT_ID = "demo-tenant"


def upgrade() -> None:
    """Insert demo rows."""
    now = datetime.now(timezone.utc)
    conn = op.get_bind()

    conn.execute(
        sa.text(
            "INSERT INTO tenants (name, description, is_active, tenant_id, created_at, created_by) "
            "VALUES (:name, :description, :is_active, :tenant_id, :now, 'seed')"
        ),
        {
            "name": "Tenant Demo",
            "description": "Demonstration tenant",
            "is_active": True,
            "tenant_id": TENANT_ID,
            "now": now,
        },
    )

    for name, description in (
        ("Admin", "System administrator"),
        ("User", "Standard user"),
        ("Manager", "Condominium manager"),
    ):
        conn.execute(
            sa.text(
                "INSERT INTO roles (name, description, is_active, tenant_id, created_at, created_by) "
                "VALUES (:name, :description, :is_active, :tenant_id, :now, 'seed')"
            ),
            {
                "name": name,
                "description": description,
                "is_active": True,
                "tenant_id": TENANT_ID,
                "now": now,
            },
        )

    password_hash = bcrypt.hashpw(b"Admin123!", bcrypt.gensalt(rounds=12)).decode("utf-8")
    conn.execute(
        sa.text(
            "INSERT INTO users (username, email, password_hash, first_name, last_name, is_active, "
            "tenant_id, created_at, created_by) VALUES (:username, :email, :password_hash, "
            ":first_name, :last_name, :is_active, :tenant_id, :now, 'seed')"
        ),
        {
            "username": "admin",
            "email": "admin@demo.com",
            "password_hash": password_hash,
            "first_name": "Admin",
            "last_name": "User",
            "is_active": True,
            "tenant_id": TENANT_ID,
            "now": now,
        },
    )

    conn.execute(
        sa.text(
            "INSERT INTO user_roles (user_id, role_id, assigned_at, tenant_id) "
            "SELECT u.id, r.id, :now, :tenant_id FROM users u, roles r "
            "WHERE u.username = 'admin' AND u.tenant_id = :tenant_id "
            "AND r.name = 'Admin' AND r.tenant_id = :tenant_id"
        ),
        {"now": now, "tenant_id": TENANT_ID},
    )


def downgrade() -> None:
    """Remove demo rows."""
    conn = op.get_bind()
    for table in ("user_roles", "users", "roles", "tenants"):
        conn.execute(
            sa.text(f"DELETE FROM {table} WHERE tenant_id = :tenant_id"), {"tenant_id": TENANT_ID}
        )
