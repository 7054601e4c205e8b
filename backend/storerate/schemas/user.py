from pydantic import EmailStr
from typing import Optional
from datetime import datetime
from .base import CamelModel
from .enums import Role

class UserBase(CamelModel):
    name: str
    email: EmailStr
    address: Optional[str] = None

class UserRegister(UserBase):
    password: str
    # Accepted for compatibility with existing clients, never applied
    role: Optional[str] = None

class UserLogin(CamelModel):
    email: EmailStr
    password: str

class PasswordUpdate(CamelModel):
    email: EmailStr
    new_password: str

class User(UserBase):
    id: int
    role: Role
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class RegisterResponse(CamelModel):
    message: str
    user: User

class LoginResponse(CamelModel):
    message: str
    token: str
    user: User
