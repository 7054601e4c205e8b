from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from storerate import models
from storerate.core import security
from storerate.core.exceptions import AuthError, ForbiddenError
from storerate.database.database import SessionLocal
from storerate.schemas.enums import Role
from storerate.services import user_service

# auto_error=False so a missing header goes through AuthError like any other bad token
bearer_scheme = HTTPBearer(auto_error=False)

async def get_db():
    async with SessionLocal() as db:
        yield db

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> models.User:
    """Resolve the bearer token to a user that still exists."""
    if credentials is None:
        raise AuthError("Not authenticated.")
    payload = security.decode_access_token(credentials.credentials)
    try:
        user_id = int(payload["userId"])
    except (TypeError, ValueError):
        raise AuthError("Could not validate credentials.")
    user = await user_service.get(db, user_id)
    if user is None:
        raise AuthError("Could not validate credentials.")
    return user

def require_roles(*roles: Role):
    """Route guard: the current user must hold one of the given roles."""
    async def role_guard(current_user: models.User = Depends(get_current_user)) -> models.User:
        if current_user.role not in roles:
            raise ForbiddenError("The user doesn't have enough privileges.")
        return current_user
    return role_guard
