import logging
from typing import Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from storerate import models
from storerate.core import security
from storerate.services.user_service import user_service

logger = logging.getLogger(__name__)


class AuthService:
    async def login(self, db: AsyncSession, email: str, password: str) -> Tuple[str, models.User]:
        """
        Check the credentials and issue a signed, time-limited token
        carrying the user's id and role.
        """
        db_user = await user_service.verify_credentials(db, email, password)
        token = security.create_access_token(db_user.id, db_user.role.value)
        logger.info(f"Issued token for user {db_user.id}")
        return token, db_user

auth_service = AuthService()
