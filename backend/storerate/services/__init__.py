from .user_service import user_service
from .auth_service import auth_service
from .store_service import store_service
from .rating_service import rating_service

__all__ = ["user_service", "auth_service", "store_service", "rating_service"]
