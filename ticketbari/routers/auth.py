from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from slowapi import Limiter
from slowapi.util import get_remote_address

from ticketbari.config import get_settings
from ticketbari.database import get_db
from ticketbari.exceptions import InvalidState, Unauthorized
from ticketbari.services.auth import AuthService, get_current_user_required
from ticketbari.schemas.user import UserCreate, UserLogin, UserResponse, Token
from ticketbari.models.user import User

settings = get_settings()

router = APIRouter(prefix="/auth", tags=["auth"])
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


@router.post("/register", status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")  # Max 5 registration attempts per minute per IP
async def register(
    request: Request,
    user_data: UserCreate,
    db: Session = Depends(get_db)
):
    if len(user_data.password) < 8:
        raise InvalidState("Password must be at least 8 characters")

    user = AuthService.create_user(db, user_data)

    return {
        "success": True,
        "message": "Registration successful",
        "data": UserResponse.model_validate(user)
    }


@router.post("/login")
@limiter.limit("5/minute")  # Max 5 login attempts per minute per IP
async def login(
    request: Request,
    credentials: UserLogin,
    db: Session = Depends(get_db)
):
    user = AuthService.authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise Unauthorized("Invalid email or password")

    access_token = AuthService.create_access_token(data={"sub": user.id})
    return {
        "success": True,
        "data": Token(access_token=access_token, token_type="bearer")
    }


@router.get("/me")
async def me(user: User = Depends(get_current_user_required)):
    return {"success": True, "data": UserResponse.model_validate(user)}
