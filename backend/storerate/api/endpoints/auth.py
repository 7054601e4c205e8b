from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from storerate import models, schemas
from storerate.api import deps
from storerate.core.exceptions import AppError, ForbiddenError, InternalError
from storerate.core.logger import setup_logger
from storerate.schemas.enums import Role
from storerate.services import auth_service, user_service

router = APIRouter()

logger = setup_logger("api.auth")

@router.post("/register", response_model=schemas.RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(user_in: schemas.UserRegister, db: AsyncSession = Depends(deps.get_db)):
    """
    Register a new account. Every registration gets the NORMAL_USER role,
    whatever role the client sends.
    """
    try:
        user = await user_service.register(
            db,
            name=user_in.name,
            email=user_in.email,
            password=user_in.password,
            address=user_in.address,
        )
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error during registration: {str(e)}", exc_info=True)
        raise InternalError("An error occurred during registration.")
    return schemas.RegisterResponse(
        message="User registered successfully",
        user=schemas.User.model_validate(user),
    )

@router.post("/login", response_model=schemas.LoginResponse)
async def login(credentials: schemas.UserLogin, db: AsyncSession = Depends(deps.get_db)):
    try:
        token, user = await auth_service.login(db, credentials.email, credentials.password)
    except AppError as e:
        logger.warning(f"Login failed: {e.message}")
        raise
    except Exception as e:
        logger.error(f"Error during login: {str(e)}", exc_info=True)
        raise InternalError("An error occurred during login.")
    return schemas.LoginResponse(
        message="Login successful",
        token=token,
        user=schemas.User.model_validate(user),
    )

@router.post("/update-password", response_model=schemas.Message)
async def update_password(
    password_in: schemas.PasswordUpdate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: models.User = Depends(deps.get_current_user),
):
    """
    Change a password. Users may only change their own; system admins may
    change anyone's.
    """
    if current_user.email != password_in.email and current_user.role != Role.SYSTEM_ADMIN:
        raise ForbiddenError("You can only change your own password.")
    try:
        await user_service.update_password(db, password_in.email, password_in.new_password)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error updating password: {str(e)}", exc_info=True)
        raise InternalError("Failed to update password.")
    return schemas.Message(message="Password updated successfully.")
