from pydantic import Field
from typing import Optional
from datetime import datetime
from .base import CamelModel

class StoreBase(CamelModel):
    name: str = Field(min_length=1)
    email: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    owner_id: Optional[int] = None

class StoreCreate(StoreBase):
    pass

class Store(StoreBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class StoreDetail(Store):
    average_rating: Optional[float] = None
    rating_count: int = 0

class StoreCreated(CamelModel):
    message: str
    store: Store
