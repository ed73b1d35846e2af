"""Authentication routes."""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr
from sqlalchemy.ext.asyncio import AsyncSession

from printtrack.auth import (
    CurrentOwner,
    create_access_token,
    hash_password,
    validate_password_strength,
    verify_password,
)
from printtrack.config import get_settings
from printtrack.db import get_db
from printtrack.db.repositories import UserRepository
from printtrack.errors import NotFoundError, ValidationError
from printtrack.utils import get_logger

logger = get_logger("api.auth")
router = APIRouter()


# Request/Response models
class SignupRequest(BaseModel):
    email: EmailStr
    password: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user_id: str


class UserResponse(BaseModel):
    id: str
    email: str
    created_at: str


def _token_response(user) -> TokenResponse:
    settings = get_settings()
    return TokenResponse(
        access_token=create_access_token(user_id=user.id, email=user.email),
        expires_in=settings.access_token_expire_minutes * 60,
        user_id=user.id,
    )


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    request: SignupRequest,
    db: AsyncSession = Depends(get_db)
):
    """Create an account and return an access token."""
    user_repo = UserRepository(db)

    if await user_repo.get_by_email(request.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    valid, message = validate_password_strength(request.password)
    if not valid:
        raise ValidationError(message)

    user = await user_repo.create_user(
        email=request.email,
        password_hash=hash_password(request.password),
    )
    await db.commit()

    logger.info(f"New user registered: {user.email}")
    return _token_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """Login with email and password."""
    user = await UserRepository(db).get_by_email(request.email)

    if not user or not verify_password(request.password, user.password_hash):
        logger.warning(f"Failed login for {request.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    return _token_response(user)


@router.get("/me", response_model=UserResponse)
async def me(
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """The signed-in account."""
    user = await UserRepository(db).get_by_id(owner)
    if not user:
        raise NotFoundError("User", owner)
    return UserResponse(**user.to_dict())
