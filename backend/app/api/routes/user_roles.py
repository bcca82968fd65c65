"""Role assignment endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from backend.app.api.auth import get_current_context
from backend.app.api.responses import bad_request, not_found
from backend.app.db.audit import append_audit_log
from backend.app.db.context import RequestContext
from backend.app.db.engine import get_session
from backend.app.db.models import Role, User, UserRole
from backend.app.db.queries import fetch_by_id, list_all
from backend.app.models.user_role import UserRoleCreate, UserRoleForUser, UserRoleRead

router = APIRouter(prefix="/api/user-roles", tags=["user-roles"])

_WITH_NAMES = (selectinload(UserRole.user), selectinload(UserRole.role))


def _to_read(assignment: UserRole) -> UserRoleRead:
    return UserRoleRead(
        id=assignment.id,
        user_id=assignment.user_id,
        username=assignment.user.username,
        role_id=assignment.role_id,
        role_name=assignment.role.name,
        assigned_at=assignment.assigned_at,
        tenant_id=assignment.tenant_id,
    )


@router.get("", response_model=list[UserRoleRead])
async def list_user_roles(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[UserRoleRead]:
    """List assignments with the username and role name of each."""
    assignments = await list_all(session, UserRole, *_WITH_NAMES)
    return [_to_read(a) for a in assignments]


@router.get("/user/{user_id}", response_model=list[UserRoleForUser])
async def list_roles_for_user(
    user_id: int,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[UserRoleForUser]:
    """List the roles held by a user (empty for unknown users)."""
    result = await session.execute(
        select(UserRole)
        .where(UserRole.user_id == user_id)
        .options(selectinload(UserRole.role))
        .order_by(UserRole.id)
    )
    return [
        UserRoleForUser(
            id=a.id,
            role_id=a.role_id,
            role_name=a.role.name,
            role_description=a.role.description,
            assigned_at=a.assigned_at,
        )
        for a in result.scalars().all()
    ]


@router.get("/{assignment_id}", response_model=UserRoleRead)
async def get_user_role(
    assignment_id: int,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> UserRoleRead:
    assignment = await fetch_by_id(session, UserRole, assignment_id, *_WITH_NAMES)
    if assignment is None:
        raise not_found()
    return _to_read(assignment)


@router.post("", response_model=UserRoleRead, status_code=status.HTTP_201_CREATED)
async def assign_role(
    request: UserRoleCreate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> UserRoleRead:
    """Assign a role to a user.

    Both sides must belong to the caller's tenant; ids from another tenant are
    reported exactly like ids that do not exist.

    Raises:
        HTTPException: 400 for an unknown user/role or a duplicate assignment
    """
    user = await fetch_by_id(session, User, request.user_id)
    if user is None:
        raise bad_request("User not found")
    role = await fetch_by_id(session, Role, request.role_id)
    if role is None:
        raise bad_request("Role not found")

    existing = await session.execute(
        select(func.count(UserRole.id)).where(
            UserRole.user_id == user.id, UserRole.role_id == role.id
        )
    )
    if existing.scalar_one() > 0:
        raise bad_request("User already has this role assigned")

    assignment = UserRole(user_id=user.id, role_id=role.id)
    session.add(assignment)
    await session.flush()

    await append_audit_log(
        session,
        ctx,
        "UserRole",
        assignment.id,
        "Create",
        changes={"user_id": user.id, "role_id": role.id},
    )
    await session.commit()
    return UserRoleRead(
        id=assignment.id,
        user_id=user.id,
        username=user.username,
        role_id=role.id,
        role_name=role.name,
        assigned_at=assignment.assigned_at,
        tenant_id=assignment.tenant_id,
    )


@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_role(
    assignment_id: int,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Response:
    assignment = await fetch_by_id(session, UserRole, assignment_id)
    if assignment is None:
        raise not_found()

    changes = {"user_id": assignment.user_id, "role_id": assignment.role_id}
    await session.delete(assignment)
    await append_audit_log(session, ctx, "UserRole", assignment_id, "Delete", changes=changes)
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
