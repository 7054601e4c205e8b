# storerate/schemas/__init__.py

from .enums import Role
from .user import (
    User,
    UserRegister,
    UserLogin,
    PasswordUpdate,
    RegisterResponse,
    LoginResponse
)
from .store import Store, StoreCreate, StoreDetail, StoreCreated
from .rating import Rating, RatingCreate, RatingCreated
from .message import Message, HealthStatus

__all__ = [
    "Role",
    "User", "UserRegister", "UserLogin", "PasswordUpdate",
    "RegisterResponse", "LoginResponse",
    "Store", "StoreCreate", "StoreDetail", "StoreCreated",
    "Rating", "RatingCreate", "RatingCreated",
    "Message", "HealthStatus"
]
