from pydantic import Field
from typing import Optional
from datetime import datetime
from .base import CamelModel

class RatingBase(CamelModel):
    score: int = Field(ge=1, le=5)
    comment: Optional[str] = None

class RatingCreate(RatingBase):
    pass

class Rating(RatingBase):
    id: int
    user_id: int
    store_id: int
    created_at: Optional[datetime] = None

class RatingCreated(CamelModel):
    message: str
    rating: Rating
