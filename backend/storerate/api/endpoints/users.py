from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from storerate import models, schemas
from storerate.api import deps
from storerate.core.exceptions import InternalError
from storerate.core.logger import setup_logger
from storerate.schemas.enums import Role
from storerate.services import user_service

router = APIRouter()

logger = setup_logger("api.users")

@router.get("", response_model=List[schemas.User])
async def read_users(
    db: AsyncSession = Depends(deps.get_db),
    admin_user: models.User = Depends(deps.require_roles(Role.SYSTEM_ADMIN)),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    role: Optional[Role] = None,
    search: Optional[str] = None
):
    """
    (Admin only) List users, paginated, optionally filtered by role or by a
    name/email substring.
    """
    try:
        return await user_service.get_all(db, skip=skip, limit=limit, role=role, search=search)
    except Exception as e:
        logger.error(f"Error fetching users: {str(e)}", exc_info=True)
        raise InternalError("Failed to fetch users.")

@router.get("/me", response_model=schemas.User)
async def read_current_user(current_user: models.User = Depends(deps.get_current_user)):
    return current_user
