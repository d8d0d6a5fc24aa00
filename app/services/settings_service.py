"""
Settings Service

Global key/value settings edited by admins: branding and certificate theme.
"""

import logging
from typing import Dict, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.setting import Setting


logger = logging.getLogger(__name__)


# Well-known keys
PLATFORM_NAME_KEY = "platform_name"
PRIMARY_COLOR_KEY = "primary_color"
LOGO_URL_KEY = "logo_url"
TAGLINE_KEY = "tagline"
THEME_COLOR_KEY = "theme_color"

DEFAULT_PLATFORM_NAME = "Edu Learn"
DEFAULT_PRIMARY_COLOR = "#4c9aff"


async def get_setting(key: str, db: AsyncSession) -> Optional[str]:
    """Value of ``key`` or None when unset."""
    result = await db.execute(select(Setting.value).where(Setting.key == key))
    return result.scalar_one_or_none()


async def get_setting_or_404(key: str, db: AsyncSession) -> Setting:
    result = await db.execute(select(Setting).where(Setting.key == key))
    setting = result.scalar_one_or_none()

    if not setting:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Setting '{key}' not found",
        )

    return setting


async def get_all_settings(db: AsyncSession) -> Dict[str, str]:
    """All settings as a ``{key: value}`` map."""
    result = await db.execute(select(Setting.key, Setting.value))
    return {key: value for key, value in result.all()}


async def upsert_setting(key: str, value: str, db: AsyncSession) -> Setting:
    """
    Create or overwrite a setting.

    Args:
        key: Setting key.
        value: New value.
        db: Database session.

    Returns:
        The stored setting.
    """
    result = await db.execute(select(Setting).where(Setting.key == key))
    setting = result.scalar_one_or_none()

    if setting:
        setting.value = value
    else:
        setting = Setting(key=key, value=value)
        db.add(setting)

    await db.commit()
    await db.refresh(setting)

    logger.info("Setting '%s' updated", key)
    return setting


async def get_branding(db: AsyncSession) -> Dict[str, Optional[str]]:
    """Public branding view with defaults applied."""
    values = await get_all_settings(db)
    return {
        "platform_name": values.get(PLATFORM_NAME_KEY) or DEFAULT_PLATFORM_NAME,
        "logo_url": values.get(LOGO_URL_KEY) or None,
        "primary_color": values.get(PRIMARY_COLOR_KEY) or DEFAULT_PRIMARY_COLOR,
        "tagline": values.get(TAGLINE_KEY) or None,
    }
