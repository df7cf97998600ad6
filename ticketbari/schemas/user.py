from pydantic import EmailStr
from datetime import datetime
from typing import Optional

from ticketbari.models.user import UserRole
from ticketbari.schemas.base import CamelModel


class UserCreate(CamelModel):
    email: EmailStr
    name: str
    password: str
    photo_url: Optional[str] = None


class UserLogin(CamelModel):
    email: EmailStr
    password: str


class UserResponse(CamelModel):
    id: str
    email: str
    name: str
    photo_url: Optional[str]
    role: UserRole
    is_fraud: bool
    created_at: datetime


class RoleUpdate(CamelModel):
    role: UserRole


class FraudUpdate(CamelModel):
    is_fraud: bool


class Token(CamelModel):
    access_token: str
    token_type: str


class TokenData(CamelModel):
    user_id: Optional[str] = None
