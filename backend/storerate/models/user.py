from sqlalchemy import Column, Integer, String, TIMESTAMP, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from storerate.models.base import Base
from storerate.schemas.enums import Role

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(191), nullable=False)
    email = Column(String(191), unique=True, index=True, nullable=False)
    # bcrypt hash, never the plaintext
    password = Column(String(191), nullable=False)
    address = Column(String(191), nullable=True)
    role = Column(
        Enum(Role, name="user_role"),
        nullable=False,
        default=Role.NORMAL_USER,
        server_default=Role.NORMAL_USER.value,
    )
    created_at = Column(TIMESTAMP(timezone=False), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=False), server_default=func.now(), onupdate=func.now())

    # The database owns the delete rules (SET NULL / RESTRICT), not the ORM
    stores = relationship("Store", back_populates="owner", passive_deletes=True)
    ratings = relationship("Rating", back_populates="user", passive_deletes="all")
