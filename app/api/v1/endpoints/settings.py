"""
Settings Routes

Platform branding and admin-editable key/value settings.
"""

from typing import Annotated, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.core.database import get_db
from app.models.user import User
from app.schemas.setting import BrandingResponse, SettingResponse, SettingUpdate
from app.services import settings_service


router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get(
    "",
    response_model=Dict[str, str],
    summary="All settings as a key/value map",
)
async def get_all_settings(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Dict[str, str]:
    return await settings_service.get_all_settings(db)


@router.get(
    "/branding",
    response_model=BrandingResponse,
    summary="Platform name, logo, colour and tagline",
)
async def get_branding(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BrandingResponse:
    return BrandingResponse(**await settings_service.get_branding(db))


@router.get(
    "/{key}",
    response_model=SettingResponse,
    summary="Get a single setting",
)
async def get_setting(
    key: str,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await settings_service.get_setting_or_404(key, db)


@router.put(
    "/{key}",
    response_model=SettingResponse,
    summary="Create or update a setting (admin)",
)
async def update_setting(
    key: str,
    data: SettingUpdate,
    _: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await settings_service.upsert_setting(key, data.value, db)
