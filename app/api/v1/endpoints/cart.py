"""
Cart Routes

Student shopping cart.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.schemas.cart import CartItemCreate, CartItemResponse
from app.services import cart_service


router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get(
    "",
    response_model=List[CartItemResponse],
    summary="Get my cart",
)
async def get_cart(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await cart_service.get_cart(current_user, db)


@router.get(
    "/count",
    summary="Number of items in my cart",
)
async def get_cart_count(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    return {"count": await cart_service.get_cart_count(current_user, db)}


@router.post(
    "",
    response_model=CartItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a course to my cart",
)
async def add_to_cart(
    data: CartItemCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Raises:
        HTTPException: 409 if the course is already in the cart.
    """
    return await cart_service.add_to_cart(current_user, data.course_id, db)


@router.delete(
    "",
    summary="Empty my cart",
)
async def clear_cart(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    return {"removed": await cart_service.clear_cart(current_user, db)}


@router.delete(
    "/{course_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a course from my cart",
)
async def remove_from_cart(
    course_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await cart_service.remove_from_cart(current_user, course_id, db)
