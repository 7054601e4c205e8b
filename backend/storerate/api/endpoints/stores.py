from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from storerate import models, schemas
from storerate.api import deps
from storerate.core.exceptions import AppError, InternalError
from storerate.core.logger import setup_logger
from storerate.schemas.enums import Role
from storerate.services import rating_service, store_service

router = APIRouter()

logger = setup_logger("api.stores")

@router.get("", response_model=List[schemas.Store])
async def read_stores(
    db: AsyncSession = Depends(deps.get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    search: Optional[str] = None,
    owner_id: Optional[int] = Query(None, alias="ownerId")
):
    """
    List stores, paginated, optionally filtered by a name/address substring
    or by owner.
    """
    try:
        return await store_service.get_all(db, skip=skip, limit=limit, search=search, owner_id=owner_id)
    except Exception as e:
        logger.error(f"Error fetching stores: {str(e)}", exc_info=True)
        raise InternalError("Failed to fetch stores.")

@router.post("", response_model=schemas.StoreCreated, status_code=status.HTTP_201_CREATED)
async def create_store(
    store_in: schemas.StoreCreate,
    db: AsyncSession = Depends(deps.get_db),
    admin_user: models.User = Depends(deps.require_roles(Role.SYSTEM_ADMIN)),
):
    """
    (Admin only) Create a store, optionally assigned to an existing user.
    """
    try:
        store = await store_service.create(db, store=store_in)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error creating store: {str(e)}", exc_info=True)
        raise InternalError("An error occurred while creating the store.")
    return schemas.StoreCreated(
        message="Store created successfully",
        store=schemas.Store.model_validate(store),
    )

@router.get("/{store_id}", response_model=schemas.StoreDetail)
async def read_store(store_id: int, db: AsyncSession = Depends(deps.get_db)):
    try:
        store = await store_service.get(db, store_id)
        average, count = await rating_service.get_summary(db, store_id)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error getting store {store_id}: {str(e)}", exc_info=True)
        raise InternalError("Failed to fetch store.")
    return schemas.StoreDetail(
        **schemas.Store.model_validate(store).model_dump(),
        average_rating=average,
        rating_count=count,
    )

@router.get("/{store_id}/ratings", response_model=List[schemas.Rating])
async def read_store_ratings(
    store_id: int,
    db: AsyncSession = Depends(deps.get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100)
):
    try:
        return await rating_service.get_for_store(db, store_id, skip=skip, limit=limit)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error fetching ratings for store {store_id}: {str(e)}", exc_info=True)
        raise InternalError("Failed to fetch ratings.")

@router.post("/{store_id}/ratings", response_model=schemas.RatingCreated, status_code=status.HTTP_201_CREATED)
async def rate_store(
    store_id: int,
    rating_in: schemas.RatingCreate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: models.User = Depends(deps.get_current_user),
):
    """
    Rate a store. A user can rate each store once.
    """
    try:
        rating = await rating_service.create(db, user_id=current_user.id, store_id=store_id, rating=rating_in)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error rating store {store_id}: {str(e)}", exc_info=True)
        raise InternalError("An error occurred while saving the rating.")
    return schemas.RatingCreated(
        message="Rating submitted successfully",
        rating=schemas.Rating.model_validate(rating),
    )
