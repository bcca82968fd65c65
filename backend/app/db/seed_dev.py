"""Demo tenant seeding for local development."""

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.config import get_settings
from backend.app.db.context import tenant_scope
from backend.app.db.engine import get_session_factory
from backend.app.db.models import Role, Tenant, User, UserRole
from backend.app.security.passwords import PasswordHasher

logger = logging.getLogger(__name__)

DEMO_TENANT_ID = "demo-tenant"
DEMO_TENANT_NAME = "Tenant Demo"
DEMO_ROLES = {
    "Admin": "System administrator",
    "User": "Standard user",
    "Manager": "Condominium manager",
}
DEMO_ADMIN_USERNAME = "admin"
DEMO_ADMIN_EMAIL = "admin@demo.com"
DEMO_ADMIN_PASSWORD = "Admin123!"


async def _get_or_create_roles(session: AsyncSession) -> dict[str, Role]:
    result = await session.execute(select(Role).where(Role.name.in_(list(DEMO_ROLES))))
    roles = {role.name: role for role in result.scalars().all()}
    for name, description in DEMO_ROLES.items():
        if name not in roles:
            role = Role(name=name, description=description, is_active=True)
            role.mark_created("seed")
            session.add(role)
            roles[name] = role
    return roles


async def seed_demo_data(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    hasher: PasswordHasher | None = None,
) -> None:
    """Seed the demo tenant with its roles and an admin user.

    This function is idempotent - safe to run multiple times.
    Creates:
    - Tenant "demo-tenant"
    - Roles Admin, User and Manager
    - User "admin" holding the Admin role
    """
    session_factory = session_factory or get_session_factory()
    hasher = hasher or PasswordHasher(rounds=get_settings().bcrypt_rounds)

    with tenant_scope(DEMO_TENANT_ID):
        async with session_factory() as session:
            tenant_result = await session.execute(select(Tenant))
            if tenant_result.scalar_one_or_none() is None:
                logger.info("Creating demo tenant %s", DEMO_TENANT_ID)
                tenant = Tenant(
                    name=DEMO_TENANT_NAME,
                    tenant_id=DEMO_TENANT_ID,
                    description="Demonstration tenant",
                    is_active=True,
                )
                tenant.mark_created("seed")
                session.add(tenant)

            roles = await _get_or_create_roles(session)

            user_result = await session.execute(
                select(User).where(User.username == DEMO_ADMIN_USERNAME)
            )
            admin = user_result.scalar_one_or_none()
            if admin is None:
                logger.info("Creating demo admin user")
                admin = User(
                    username=DEMO_ADMIN_USERNAME,
                    email=DEMO_ADMIN_EMAIL,
                    password_hash=hasher.hash_password(DEMO_ADMIN_PASSWORD),
                    first_name="Admin",
                    last_name="User",
                    is_active=True,
                )
                admin.mark_created("seed")
                session.add(admin)

            await session.flush()

            assignment_result = await session.execute(
                select(UserRole).where(
                    UserRole.user_id == admin.id, UserRole.role_id == roles["Admin"].id
                )
            )
            if assignment_result.scalar_one_or_none() is None:
                session.add(UserRole(user_id=admin.id, role_id=roles["Admin"].id))

            await session.commit()
            logger.info("Demo seeding complete for %s", DEMO_TENANT_ID)


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
