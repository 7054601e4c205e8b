import logging
from typing import List, Optional
from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from storerate import models
from storerate.core import security
from storerate.core.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from storerate.schemas.enums import Role

logger = logging.getLogger(__name__)

# Same message whether the email is unknown or the password is wrong
INVALID_CREDENTIALS = "Invalid credentials."


class UserService:
    async def get(self, db: AsyncSession, user_id: int) -> Optional[models.User]:
        return await db.get(models.User, user_id)

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[models.User]:
        result = await db.execute(select(models.User).where(models.User.email == email))
        return result.scalars().first()

    async def get_all(
            self, db: AsyncSession, skip: int = 0, limit: int = 100,
            role: Optional[Role] = None,
            search: Optional[str] = None
    ) -> List[models.User]:
        query = select(models.User)
        if role:
            query = query.where(models.User.role == role)
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(models.User.name.ilike(pattern), models.User.email.ilike(pattern)))
        query = query.order_by(models.User.id).offset(skip).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def register(
            self, db: AsyncSession, name: str, email: str, password: str,
            address: Optional[str] = None
    ) -> models.User:
        """
        Create a NORMAL_USER account. Callers cannot choose the role.
        """
        if not name or not name.strip() or not email or not email.strip() or not password:
            raise ValidationError("Name, email, and password are required.")

        if await self.get_by_email(db, email):
            raise ConflictError("Email is already registered.")

        db_user = models.User(
            name=name.strip(),
            email=email.strip(),
            password=security.get_password_hash(password),
            address=address,
            role=Role.NORMAL_USER,
        )
        db.add(db_user)
        try:
            await db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration on the unique index
            await db.rollback()
            raise ConflictError("Email is already registered.")
        await db.refresh(db_user)
        logger.info(f"Registered user {db_user.id} <{db_user.email}>")
        return db_user

    async def verify_credentials(self, db: AsyncSession, email: str, password: str) -> models.User:
        db_user = await self.get_by_email(db, email) if email else None
        if db_user is None:
            # Burn the same hashing time as a real comparison
            security.pwd_context.dummy_verify()
            raise AuthError(INVALID_CREDENTIALS)
        if not password or not security.verify_password(password, db_user.password):
            raise AuthError(INVALID_CREDENTIALS)
        return db_user

    async def update_password(self, db: AsyncSession, email: str, new_password: str) -> models.User:
        if not email or not new_password:
            raise ValidationError("Email and new password are required.")
        if not security.password_meets_policy(new_password):
            raise ValidationError("Password does not meet the security requirements.")

        db_user = await self.get_by_email(db, email)
        if db_user is None:
            raise NotFoundError("User not found.")

        db_user.password = security.get_password_hash(new_password)
        await db.commit()
        await db.refresh(db_user)
        logger.info(f"Password updated for user {db_user.id}")
        return db_user

    async def delete(self, db: AsyncSession, user_id: int) -> None:
        """
        Delete a user, leaving the foreign-key rules to the database:
        owned stores lose their owner, existing ratings block the delete.
        """
        if await self.get(db, user_id) is None:
            raise NotFoundError("User not found.")
        try:
            await db.execute(delete(models.User).where(models.User.id == user_id))
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("User has ratings and cannot be deleted.")
        logger.info(f"Deleted user {user_id}")

user_service = UserService()
