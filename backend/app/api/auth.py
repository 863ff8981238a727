"""Authentication API endpoints and dependencies."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.api.schemas import UserOut
from backend.app.config import get_settings
from backend.app.db.models.user import User
from backend.app.db.session import get_session
from backend.app.security import (
    AuthenticationError,
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_access_token,
    verify_password,
    verify_refresh_token,
)

__all__ = ["get_current_user", "get_optional_user", "router"]

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


# Pydantic models
class RegisterRequest(BaseModel):
    """Registration payload."""
    email: EmailStr
    password: str
    full_name: str = Field(min_length=1)
    age: int | None = Field(default=None, ge=1, le=120)
    gender: str | None = None
    bio: str | None = None
    interests: list[str] = []
    travel_style: str | None = None
    is_solo_traveler: bool = True


class RegisterResponse(BaseModel):
    message: str
    user: UserOut


class LoginRequest(BaseModel):
    """Login request payload."""
    email: EmailStr
    password: str


class AuthResponse(BaseModel):
    """Authentication response."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = 900  # 15 minutes in seconds


class RefreshRequest(BaseModel):
    """Refresh token request."""
    refresh_token: str


class MeResponse(BaseModel):
    user: UserOut


# HTTP Bearer token security scheme; missing headers are handled below
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_session),
) -> User:
    """Get current authenticated user from JWT token.

    Args:
        credentials: HTTP Authorization header with Bearer token
        db: Database session

    Returns:
        The User row, bound to the request session

    Raises:
        HTTPException: If token is missing, invalid, or user not found
    """
    if not credentials or not credentials.credentials:
        raise _unauthorized("Authentication required")

    try:
        payload = verify_access_token(credentials.credentials)
    except AuthenticationError as e:
        raise _unauthorized(str(e))

    # Verify user still exists
    user = db.get(User, payload.user_id)
    if not user:
        raise _unauthorized("User not found")

    return user


def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_session),
) -> User | None:
    """Like get_current_user, but anonymous or invalid tokens yield None."""
    if not credentials or not credentials.credentials:
        return None

    try:
        payload = verify_access_token(credentials.credentials)
    except AuthenticationError:
        return None

    return db.get(User, payload.user_id)


def _issue_tokens(user: User) -> AuthResponse:
    try:
        access_token = create_access_token(user.user_id)
        refresh_token = create_refresh_token(user.user_id)
    except AuthenticationError as e:
        logger.error("Token issuance failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication service not configured",
        )

    return AuthResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=get_settings().jwt_access_ttl_minutes * 60,
    )


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    db: Session = Depends(get_session),
) -> RegisterResponse:
    """Create a new traveller account.

    Raises:
        HTTPException: 400 for a weak password, 409 if the email is taken
    """
    email = request.email.lower()

    existing = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        )

    try:
        password_hash = hash_password(request.password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    user = User(
        email=email,
        password_hash=password_hash,
        full_name=request.full_name,
        age=request.age,
        gender=request.gender,
        bio=request.bio,
        interests=list(request.interests),
        travel_style=request.travel_style,
        is_solo_traveler=request.is_solo_traveler,
    )
    db.add(user)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        )

    logger.info("Registered user %s", user.user_id)
    return RegisterResponse(
        message="User registered successfully", user=UserOut.model_validate(user)
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    db: Session = Depends(get_session),
) -> AuthResponse:
    """Authenticate user and return JWT tokens.

    Raises:
        HTTPException: If authentication fails
    """
    user = db.execute(
        select(User).where(User.email == request.email.lower())
    ).scalar_one_or_none()

    # Same message whether or not the email exists
    if not user or not verify_password(request.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    return _issue_tokens(user)


@router.post("/refresh", response_model=AuthResponse)
async def refresh_token(
    request: RefreshRequest,
    db: Session = Depends(get_session),
) -> AuthResponse:
    """Exchange a refresh token for a new token pair.

    Raises:
        HTTPException: If refresh token is invalid or user not found
    """
    try:
        payload = verify_refresh_token(request.refresh_token)
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

    user = db.get(User, payload.user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return _issue_tokens(user)


@router.get("/me", response_model=MeResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user),
) -> MeResponse:
    """Get current user information."""
    return MeResponse(user=UserOut.model_validate(current_user))
