import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AuthenticationError, ValidationError
from app.core.security import create_token, get_current_user, hash_password, verify_password
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.auth import AuthResponse, LoginRequest, ProfileUpdate, RegisterRequest, UserRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

MIN_PASSWORD_LENGTH = 6


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    email = data.email.strip().lower()
    if not email or not data.password or not data.name.strip():
        raise ValidationError("Email, password and name are required")
    if len(data.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise ValidationError("Email is already registered")

    user = User(email=email, name=data.name.strip(), password_hash=hash_password(data.password))
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info(f"Registered user {user.id}")

    return {"user": UserRead.model_validate(user), "token": create_token(user.id)}


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    if not data.email or not data.password:
        raise ValidationError("Email and password are required")

    result = await db.execute(select(User).where(User.email == data.email.strip().lower()))
    user = result.scalar_one_or_none()
    if not user or not verify_password(data.password, user.password_hash):
        raise AuthenticationError("Invalid email or password")

    return {"user": UserRead.model_validate(user), "token": create_token(user.id)}


@router.get("/profile", response_model=UserRead)
async def get_profile(user: User = Depends(get_current_user)):
    return user


@router.put("/profile", response_model=UserRead)
async def update_profile(
    data: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if data.name:
        user.name = data.name
    if data.avatar is not None:
        user.avatar = data.avatar
    await db.commit()
    await db.refresh(user)
    return user
