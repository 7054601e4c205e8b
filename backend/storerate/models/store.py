from sqlalchemy import Column, Integer, String, ForeignKey, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from storerate.models.base import Base

class Store(Base):
    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(191), nullable=False)
    email = Column(String(191), nullable=True)
    address = Column(String(191), nullable=True)
    description = Column(String(191), nullable=True)
    owner_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL", onupdate="CASCADE"),
        nullable=True,
        index=True,
    )
    created_at = Column(TIMESTAMP(timezone=False), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=False), server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="stores")
    ratings = relationship("Rating", back_populates="store", passive_deletes="all")
