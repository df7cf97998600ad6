from datetime import datetime, timedelta
from typing import Optional
import bcrypt
from jose import JWTError, jwt
from sqlalchemy.orm import Session
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ticketbari.config import get_settings
from ticketbari.database import get_db
from ticketbari.exceptions import Conflict, Forbidden, Unauthorized
from ticketbari.models.user import User, UserRole
from ticketbari.schemas.user import UserCreate, TokenData

settings = get_settings()
security = HTTPBearer(auto_error=False)


class AuthService:
    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )

    @staticmethod
    def get_password_hash(password: str) -> str:
        return bcrypt.hashpw(
            password.encode('utf-8'),
            bcrypt.gensalt()
        ).decode('utf-8')

    @staticmethod
    def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(minutes=settings.access_token_expire_minutes)
        to_encode.update({"exp": expire})
        encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
        return encoded_jwt

    @staticmethod
    def decode_token(token: str) -> Optional[TokenData]:
        try:
            payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
            user_id: str = payload.get("sub")
            if user_id is None:
                return None
            return TokenData(user_id=user_id)
        except JWTError:
            return None

    @staticmethod
    def create_user(db: Session, user_data: UserCreate, role: UserRole = UserRole.USER) -> User:
        email = user_data.email.lower()
        if AuthService.get_user_by_email(db, email):
            raise Conflict("Email already registered")

        db_user = User(
            email=email,
            name=user_data.name,
            photo_url=user_data.photo_url,
            hashed_password=AuthService.get_password_hash(user_data.password),
            role=role
        )
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
        return db_user

    @staticmethod
    def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
        user = AuthService.get_user_by_email(db, email)
        if not user:
            return None
        if not AuthService.verify_password(password, user.hashed_password):
            return None
        return user

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.lower()).first()

    @staticmethod
    def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Optional[User]:
    if credentials is None:
        return None

    token_data = AuthService.decode_token(credentials.credentials)
    if token_data is None or token_data.user_id is None:
        return None

    return AuthService.get_user_by_id(db, token_data.user_id)


def get_current_user_required(
    current_user: Optional[User] = Depends(get_current_user)
) -> User:
    if current_user is None:
        raise Unauthorized()
    return current_user


def require_roles(*roles: UserRole):
    """Capability check applied per route: the caller must hold one of ``roles``."""

    def _guard(current_user: User = Depends(get_current_user_required)) -> User:
        if current_user.role not in roles:
            raise Forbidden(f"{' or '.join(r.value for r in roles).capitalize()} access required")
        return current_user

    return _guard


get_current_vendor = require_roles(UserRole.VENDOR)
get_current_vendor_or_admin = require_roles(UserRole.VENDOR, UserRole.ADMIN)
get_current_admin = require_roles(UserRole.ADMIN)
