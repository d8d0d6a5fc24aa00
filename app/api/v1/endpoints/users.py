"""
User Routes

Endpoints for user profile management and admin user administration.
"""

import logging
import uuid
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, require_admin
from app.core.database import get_db
from app.core.security import hash_password, verify_password
from app.models.user import User
from app.schemas.user import (
    NotificationPreferences,
    PasswordChange,
    PasswordReset,
    UserResponse,
    UserUpdate,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


async def _get_user_or_404(user_id: uuid.UUID, db: AsyncSession) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user profile",
)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """
    Get the currently logged-in user's profile.

    Args:
        current_user: Authenticated user from dependency.

    Returns:
        UserResponse: Current user's profile data.
    """
    return current_user


@router.patch(
    "/me",
    response_model=UserResponse,
    summary="Update current user profile",
)
async def update_me(
    user_update: UserUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Update the currently logged-in user's profile.

    Only provided fields will be updated.

    Raises:
        HTTPException: 400 if new email already exists.
    """
    changes = user_update.model_dump(exclude_unset=True)

    new_email = changes.pop("email", None)
    if new_email and new_email.lower() != current_user.email:
        result = await db.execute(
            select(User).where(User.email == new_email.lower())
        )
        if result.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered",
            )
        current_user.email = new_email.lower()

    for field, value in changes.items():
        setattr(current_user, field, value)

    await db.commit()
    await db.refresh(current_user)

    return current_user


@router.post(
    "/me/password",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Change own password",
)
async def change_password(
    data: PasswordChange,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """
    Raises:
        HTTPException: 400 if the current password is wrong.
    """
    if not verify_password(data.current_password, current_user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )

    current_user.password_hash = hash_password(data.new_password)
    await db.commit()


@router.put(
    "/me/notification-preferences",
    response_model=UserResponse,
    summary="Update notification preferences",
)
async def update_notification_preferences(
    preferences: NotificationPreferences,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    current_user.notification_preferences = preferences.model_dump()
    await db.commit()
    await db.refresh(current_user)
    return current_user


# ============== Admin ==============

@router.get(
    "",
    response_model=List[UserResponse],
    summary="List all users (admin)",
)
async def list_users(
    _: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[User]:
    result = await db.execute(select(User).order_by(User.created_at.desc()))
    return list(result.scalars().all())


@router.post(
    "/{user_id}/reset-password",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Set a user's password (admin)",
)
async def reset_password(
    user_id: uuid.UUID,
    data: PasswordReset,
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    user = await _get_user_or_404(user_id, db)
    user.password_hash = hash_password(data.new_password)
    await db.commit()
    logger.info("Admin %s reset password of user %s", admin.id, user_id)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user (admin)",
)
async def delete_user(
    user_id: uuid.UUID,
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """
    Raises:
        HTTPException: 400 when an admin tries to delete their own account.
    """
    if user_id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account",
        )

    user = await _get_user_or_404(user_id, db)
    await db.delete(user)
    await db.commit()
    logger.info("Admin %s deleted user %s", admin.id, user_id)
