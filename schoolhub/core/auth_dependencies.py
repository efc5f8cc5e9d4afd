# schoolhub/core/auth_dependencies.py
"""FastAPI dependencies for authentication and authorization."""
from typing import Optional
from uuid import UUID
import logging

from fastapi import Depends, Header, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .caller import Caller, caller_from_user
from .database import get_db
from .exceptions import AuthenticationError, AuthorizationError, ValidationError
from .security import decode_access_token, extract_bearer_token
from ..models.user import Role, User
from ..services.authorization_service import AuthorizationPolicy, OwnershipLookup

logger = logging.getLogger(__name__)


async def get_current_caller(
    authorization: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> Caller:
    """Resolve the bearer token to a caller; FastAPI caches this per request"""
    token = extract_bearer_token(authorization)
    if not token:
        raise AuthenticationError("Access token required")

    claims = decode_access_token(token)
    try:
        user_id = UUID(str(claims.get("id")))
    except ValueError:
        raise AuthenticationError("Invalid token")

    stmt = (
        select(User)
        .where(User.id == user_id)
        .options(selectinload(User.student), selectinload(User.teacher), selectinload(User.parent))
    )
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()
    if not user:
        raise AuthenticationError("User not found")
    return caller_from_user(user)


def get_authorization_policy(db: AsyncSession = Depends(get_db)) -> AuthorizationPolicy:
    return AuthorizationPolicy(OwnershipLookup(db))


def _path_uuid(request: Request, param: str) -> UUID:
    raw = request.path_params.get(param)
    if not raw:
        raise ValidationError("Resource ID required")
    try:
        return UUID(str(raw))
    except ValueError:
        raise ValidationError(f"Invalid {param}")


def require_roles(*roles: Role):
    role_names = [role.value for role in roles]

    async def dependency(
        caller: Caller = Depends(get_current_caller),
        policy: AuthorizationPolicy = Depends(get_authorization_policy),
    ) -> Caller:
        if not policy.authorize(caller, role_names):
            raise AuthorizationError(f"Access denied. Required roles: {', '.join(role_names)}")
        return caller

    return dependency


require_admin = require_roles(Role.ADMIN)
require_teacher_or_admin = require_roles(Role.TEACHER, Role.ADMIN)


def require_ownership(resource_type: str, param: str = "id"):
    async def dependency(
        request: Request,
        caller: Caller = Depends(get_current_caller),
        policy: AuthorizationPolicy = Depends(get_authorization_policy),
    ) -> Caller:
        resource_id = _path_uuid(request, param)
        decision = await policy.check_ownership(caller, resource_type, resource_id)
        if decision:
            return caller
        if decision.reason == "invalid resource type":
            raise ValidationError("Invalid resource type")
        raise AuthorizationError(decision.reason)

    return dependency


def require_class_ownership(param: str = "class_id"):
    async def dependency(
        request: Request,
        caller: Caller = Depends(get_current_caller),
        policy: AuthorizationPolicy = Depends(get_authorization_policy),
    ) -> Caller:
        decision = await policy.check_class_ownership(caller, _path_uuid(request, param))
        if not decision:
            raise AuthorizationError(decision.reason)
        return caller

    return dependency


def require_class_membership(param: str = "class_id"):
    async def dependency(
        request: Request,
        caller: Caller = Depends(get_current_caller),
        policy: AuthorizationPolicy = Depends(get_authorization_policy),
    ) -> Caller:
        decision = await policy.check_class_membership(caller, _path_uuid(request, param))
        if not decision:
            raise AuthorizationError(decision.reason)
        return caller

    return dependency
