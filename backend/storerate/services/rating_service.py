import logging
from typing import List, Optional, Tuple
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from storerate import models, schemas
from storerate.core.exceptions import ConflictError, ValidationError
from storerate.services.store_service import store_service

logger = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 5


class RatingService:
    async def create(
            self, db: AsyncSession, user_id: int, store_id: int,
            rating: schemas.RatingCreate
    ) -> models.Rating:
        """
        One rating per user per store. The unique constraint on
        (user_id, store_id) decides, so concurrent duplicates are caught too.
        """
        if not MIN_SCORE <= rating.score <= MAX_SCORE:
            raise ValidationError(f"Score must be between {MIN_SCORE} and {MAX_SCORE}.")
        await store_service.get(db, store_id)

        db_rating = models.Rating(
            user_id=user_id,
            store_id=store_id,
            score=rating.score,
            comment=rating.comment,
        )
        db.add(db_rating)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("You have already rated this store.")
        await db.refresh(db_rating)
        logger.info(f"User {user_id} rated store {store_id} with {rating.score}")
        return db_rating

    async def get_for_store(
            self, db: AsyncSession, store_id: int, skip: int = 0, limit: int = 100
    ) -> List[models.Rating]:
        await store_service.get(db, store_id)
        result = await db.execute(
            select(models.Rating)
            .where(models.Rating.store_id == store_id)
            .order_by(models.Rating.created_at.desc(), models.Rating.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_summary(self, db: AsyncSession, store_id: int) -> Tuple[Optional[float], int]:
        """Average score and rating count; the average is None when unrated."""
        result = await db.execute(
            select(func.avg(models.Rating.score), func.count(models.Rating.id))
            .where(models.Rating.store_id == store_id)
        )
        average, count = result.one()
        if average is None:
            return None, 0
        return round(float(average), 2), count

rating_service = RatingService()
