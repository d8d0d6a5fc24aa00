"""
Cart Service

Courses a student has saved for later purchase.
"""

import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.cart_item import CartItem
from app.models.course import Course
from app.models.user import User


logger = logging.getLogger(__name__)


async def get_cart(user: User, db: AsyncSession) -> List[CartItem]:
    result = await db.execute(
        select(CartItem)
        .options(selectinload(CartItem.course))
        .where(CartItem.user_id == user.id)
        .order_by(CartItem.added_at.desc())
    )
    return list(result.scalars().all())


async def add_to_cart(user: User, course_id: int, db: AsyncSession) -> CartItem:
    """
    Raises:
        HTTPException: 404 if the course is missing, 409 if already in the cart.
    """
    course = await db.get(Course, course_id)

    if not course:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )

    result = await db.execute(
        select(CartItem.id).where(
            CartItem.user_id == user.id,
            CartItem.course_id == course_id,
        )
    )
    if result.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Course already in cart",
        )

    item = CartItem(user_id=user.id, course_id=course_id)
    db.add(item)
    await db.commit()
    await db.refresh(item)
    item.course = course
    return item


async def remove_from_cart(user: User, course_id: int, db: AsyncSession) -> None:
    """
    Raises:
        HTTPException: 404 if the course is not in the user's cart.
    """
    result = await db.execute(
        select(CartItem).where(
            CartItem.user_id == user.id,
            CartItem.course_id == course_id,
        )
    )
    item = result.scalar_one_or_none()

    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not in cart",
        )

    await db.delete(item)
    await db.commit()


async def clear_cart(user: User, db: AsyncSession) -> int:
    """Returns the number of removed items."""
    result = await db.execute(delete(CartItem).where(CartItem.user_id == user.id))
    await db.commit()
    logger.debug("Cleared %s cart items for user %s", result.rowcount, user.id)
    return result.rowcount or 0


async def get_cart_count(user: User, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count(CartItem.id)).where(CartItem.user_id == user.id)
    )
    return result.scalar_one()
