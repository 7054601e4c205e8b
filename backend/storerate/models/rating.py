from sqlalchemy import Column, Integer, String, ForeignKey, TIMESTAMP, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from storerate.models.base import Base

class Rating(Base):
    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("user_id", "store_id", name="ratings_user_id_store_id_key"),
        CheckConstraint("score >= 1 AND score <= 5", name="ratings_score_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    score = Column(Integer, nullable=False)
    comment = Column(String(191), nullable=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT", onupdate="CASCADE"),
        nullable=False,
    )
    store_id = Column(
        Integer,
        ForeignKey("stores.id", ondelete="RESTRICT", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(TIMESTAMP(timezone=False), server_default=func.now())

    user = relationship("User", back_populates="ratings")
    store = relationship("Store", back_populates="ratings")
