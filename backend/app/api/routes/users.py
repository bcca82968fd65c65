"""User endpoints.

Password hashes stay server-side: every response goes through ``UserRead``.
"""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import get_current_context
from backend.app.api.responses import bad_request, not_found
from backend.app.config import get_settings
from backend.app.db.audit import append_audit_log
from backend.app.db.context import RequestContext
from backend.app.db.engine import get_session
from backend.app.db.models import User
from backend.app.db.queries import fetch_by_id, list_all
from backend.app.models.user import UserCreate, UserRead, UserUpdate
from backend.app.security.passwords import PasswordHasher
from backend.app.security.sanitizer import InputSanitizer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])

sanitizer = InputSanitizer()


@lru_cache
def get_password_hasher() -> PasswordHasher:
    """Get the process-wide password hasher."""
    return PasswordHasher(rounds=get_settings().bcrypt_rounds)


async def _username_or_email_taken(
    session: AsyncSession, username: str, email: str, exclude_id: int | None = None
) -> bool:
    stmt = select(func.count(User.id)).where(
        or_(User.username == username, User.email == email.lower())
    )
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    result = await session.execute(stmt)
    return result.scalar_one() > 0


def _clean_identity(ctx: RequestContext, username: str, email: str) -> tuple[str, str]:
    """Sanitize username/email and reject malformed or hostile input.

    Raises:
        HTTPException: 400 for an invalid email or injection patterns
    """
    username = sanitizer.sanitize_string(username)
    email = sanitizer.sanitize_string(email)

    if not sanitizer.is_valid_email(email):
        raise bad_request("Invalid email")

    if sanitizer.is_suspicious(username, email):
        logger.warning(
            "Rejected suspicious user payload from %s",
            ctx.ip_address,
            extra={"structured": {"tenant_id": ctx.tenant_id, "ip": ctx.ip_address}},
        )
        raise bad_request("Invalid data")

    return username, email


@router.get("", response_model=list[UserRead])
async def list_users(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[User]:
    return await list_all(session, User)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: int,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> User:
    user = await fetch_by_id(session, User, user_id)
    if user is None:
        raise not_found()
    return user


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: UserCreate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> User:
    """Create a user in the caller's tenant.

    Raises:
        HTTPException: 400 for invalid input or a duplicate username/email
    """
    username, email = _clean_identity(ctx, request.username, request.email)

    if await _username_or_email_taken(session, username, email):
        raise bad_request("Username or email already exists")

    user = User(
        username=username,
        email=email,
        password_hash=hasher.hash_password(request.password),
        first_name=sanitizer.sanitize_string(request.first_name) or None,
        last_name=sanitizer.sanitize_string(request.last_name) or None,
        is_active=True,
    )
    user.mark_created(ctx.actor)
    session.add(user)
    await session.flush()

    await append_audit_log(
        session,
        ctx,
        "User",
        user.id,
        "Create",
        changes=request.model_dump(exclude={"password"}),
    )
    await session.commit()
    return user


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    request: UserUpdate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> User:
    """Update a user; the password is re-hashed only when one is supplied."""
    user = await fetch_by_id(session, User, user_id)
    if user is None:
        raise not_found()

    username, email = _clean_identity(ctx, request.username, request.email)
    if await _username_or_email_taken(session, username, email, exclude_id=user.id):
        raise bad_request("Username or email already exists")

    user.username = username
    user.email = email
    user.first_name = sanitizer.sanitize_string(request.first_name) or None
    user.last_name = sanitizer.sanitize_string(request.last_name) or None
    user.is_active = request.is_active
    if request.password:
        user.password_hash = hasher.hash_password(request.password)
    user.mark_updated(ctx.actor)

    changes = request.model_dump(exclude={"password"})
    changes["password_changed"] = bool(request.password)
    await append_audit_log(session, ctx, "User", user.id, "Update", changes=changes)
    await session.commit()
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Response:
    user = await fetch_by_id(session, User, user_id)
    if user is None:
        raise not_found()

    await session.delete(user)
    await append_audit_log(
        session, ctx, "User", user_id, "Delete", changes={"username": user.username}
    )
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
