"""
Authentication Routes

Handles account registration and login.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import create_access_token, hash_password, verify_password
from app.models.enums import NotificationType, UserRole
from app.models.user import User
from app.schemas.token import LoginResponse, Token
from app.schemas.user import UserCreate, UserLogin, UserResponse
from app.services import notification_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


async def authenticate(email: str, password: str, db: AsyncSession) -> User:
    """
    Look up a user by email and check the password.

    Raises:
        HTTPException: 401 if the email is unknown or the password is wrong.
    """
    result = await db.execute(
        select(User).where(User.email == email.lower())
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


def issue_token(user: User) -> str:
    return create_access_token(subject=user.id, extra_claims={"role": user.role.value})


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new student account",
)
async def register(
    user_data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Create a new student account.

    **Flow:**
    1. Check if email already exists in database
    2. Hash the password using bcrypt
    3. Create the user with role STUDENT
    4. Post an entry to the admin notification feed

    Args:
        user_data: Registration data (full_name, email, password).
        db: Database session.

    Returns:
        UserResponse: The created user (never includes the password).

    Raises:
        HTTPException: 400 if email already exists.
    """
    email = user_data.email.lower()
    result = await db.execute(
        select(User).where(User.email == email)
    )
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    new_user = User(
        email=email,
        password_hash=hash_password(user_data.password),
        full_name=user_data.full_name,
        role=UserRole.STUDENT,
    )
    db.add(new_user)
    await db.flush()

    await notification_service.create_notification(
        db,
        type=NotificationType.USER,
        title="New user registered",
        message=f"{new_user.full_name} ({new_user.email}) created an account.",
        icon="user-plus",
        related_id=str(new_user.id),
        details={"action": "create", "entity": "user"},
        link="/admin/users",
    )

    await db.commit()
    await db.refresh(new_user)

    logger.info("Registered user %s", new_user.id)
    return new_user


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login with email and password",
)
async def login(
    credentials: UserLogin,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> LoginResponse:
    """
    Authenticate a user and return a JWT access token with the profile.

    Raises:
        HTTPException: 401 if credentials are invalid.
    """
    user = await authenticate(credentials.email, credentials.password, db)
    return LoginResponse(
        access_token=issue_token(user),
        token_type="bearer",
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/token",
    response_model=Token,
    summary="OAuth2 password flow token endpoint",
)
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Token:
    """
    Same as ``/login`` but form encoded, for Swagger UI's authorize button.

    The ``username`` field carries the email.
    """
    user = await authenticate(form_data.username, form_data.password, db)
    return Token(access_token=issue_token(user), token_type="bearer")
