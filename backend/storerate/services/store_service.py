import logging
from typing import List, Optional
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from storerate import models, schemas
from storerate.core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class StoreService:
    async def get(self, db: AsyncSession, store_id: int) -> models.Store:
        db_store = await db.get(models.Store, store_id)
        if db_store is None:
            raise NotFoundError("Store not found.")
        return db_store

    async def get_all(
            self, db: AsyncSession, skip: int = 0, limit: int = 100,
            search: Optional[str] = None,
            owner_id: Optional[int] = None
    ) -> List[models.Store]:
        query = select(models.Store)
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(models.Store.name.ilike(pattern), models.Store.address.ilike(pattern)))
        if owner_id is not None:
            query = query.where(models.Store.owner_id == owner_id)
        query = query.order_by(models.Store.id).offset(skip).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, store: schemas.StoreCreate) -> models.Store:
        if store.owner_id is not None and await db.get(models.User, store.owner_id) is None:
            raise ValidationError("Owner does not exist.")

        db_store = models.Store(**store.model_dump())
        db.add(db_store)
        try:
            await db.commit()
        except IntegrityError:
            # Owner deleted between the check and the insert
            await db.rollback()
            raise ValidationError("Owner does not exist.")
        await db.refresh(db_store)
        logger.info(f"Created store {db_store.id} '{db_store.name}'")
        return db_store

store_service = StoreService()
