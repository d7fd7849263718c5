"""
Storefront Settings Service

Reads the single settings row and shapes it for the public API.
The storefront must always receive a usable settings object, so the
read is wrapped in the fallback-on-read-failure policy.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pizzabox.models import RestaurantSettings
from pizzabox.schemas import PublicSettings
from pizzabox.services.fallback import fallback_on_read_failure

logger = logging.getLogger(__name__)

DEFAULT_PUBLIC_SETTINGS = {
    "restaurantName": "The Pizza Box",
    "contactPhone": "",
    "contactEmail": "",
    "address": "",
    "minOrderAmount": 0,
    "operatingHours": "9 AM - 11 PM",
    "isOpen": True,
    "isPaused": False,
    "notificationsEnabled": True,
}


def default_public_settings() -> PublicSettings:
    """Settings served when no row exists or the read fails."""
    return PublicSettings.model_validate(DEFAULT_PUBLIC_SETTINGS)


@fallback_on_read_failure(default_public_settings, resource="settings")
async def load_public_settings(db: AsyncSession) -> Optional[PublicSettings]:
    """
    Fetch the storefront settings row.

    Args:
        db: Database session

    Returns:
        PublicSettings: The stored settings, or the defaults
    """
    result = await db.execute(
        select(RestaurantSettings).order_by(RestaurantSettings.id).limit(1)
    )
    row = result.scalars().first()

    if row is None:
        return None

    return PublicSettings.model_validate(row)
