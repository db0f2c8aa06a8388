"""Auth API — signup, login, current user.

Routes:
- POST /auth/signup → create an account, returns a token right away
- POST /auth/login  → email/password → JWT access token
- GET  /auth/me     → profile of the authenticated user
"""

from datetime import datetime
from functools import lru_cache

import structlog
from fastapi import APIRouter, Depends
from pydantic import Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from nerv.auth.dependencies import CurrentIdentity, get_current_user, get_settings_dep
from nerv.auth.jwt import issue_token
from nerv.auth.password import hash_password, verify_password
from nerv.config import Settings
from nerv.db.engine import get_db
from nerv.db.models import User
from nerv.errors import InvalidCredentials, NotFoundOrNotOwned
from nerv.schemas.base import ApiModel
from nerv.services.user_service import UserService, normalize_email

logger = structlog.get_logger()

router = APIRouter(prefix="/auth")

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


@lru_cache
def _dummy_hash(rounds: int) -> str:
    """A hash to check against when the email is unknown, so a miss costs
    the same bcrypt work as a wrong password."""
    return hash_password("nerv-no-such-user", rounds=rounds)


# ─── Schemas ─────────────────────────────────────────────


class LoginRequest(ApiModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value):
        return normalize_email(value) if isinstance(value, str) else value


class SignupRequest(LoginRequest):
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6, max_length=128)


class UserRead(ApiModel):
    """User profile. The password hash is never part of a response."""
    id: str
    email: str
    created_at: datetime


class AuthResponse(ApiModel):
    token: str
    token_type: str = "bearer"
    user: UserRead


def _auth_response(user: User, settings: Settings) -> AuthResponse:
    token = issue_token(user.id, user.email, settings)
    return AuthResponse(token=token, user=UserRead.model_validate(user))


# ─── Signup ──────────────────────────────────────────────


@router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(
    body: SignupRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    """Create a new account and log it in."""
    # DuplicateEmail from the unique constraint becomes a 409.
    user = await UserService(db).create_user(
        email=body.email,
        password_hash=hash_password(body.password, rounds=settings.bcrypt_rounds),
    )
    logger.info("auth.signup", user_id=user.id)
    return _auth_response(user, settings)


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    """Login with email and password → JWT token."""
    user = await UserService(db).get_by_email(body.email)
    stored_hash = user.password_hash if user else _dummy_hash(settings.bcrypt_rounds)

    password_ok = verify_password(body.password, stored_hash)
    if user is None or not password_ok:
        logger.info("auth.login_failed")
        raise InvalidCredentials()

    logger.info("auth.login", user_id=user.id)
    return _auth_response(user, settings)


# ─── Current user ───────────────────────────────────────


@router.get("/me", response_model=UserRead)
async def get_me(
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the current authenticated user's profile."""
    user = await UserService(db).get_by_id(identity.user_id)
    if not user:
        raise NotFoundOrNotOwned("User not found")
    return user
