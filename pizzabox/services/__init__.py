"""
                        Services Module

Business logic behind the API routes.

Services:
    - settings: public storefront settings with default fallback
    - fallback: the fallback-on-read-failure policy and its counters
"""

from pizzabox.services.fallback import fallback_on_read_failure, masked_failures
from pizzabox.services.settings import (
    DEFAULT_PUBLIC_SETTINGS,
    default_public_settings,
    load_public_settings,
)

__all__ = [
    "fallback_on_read_failure",
    "masked_failures",
    "DEFAULT_PUBLIC_SETTINGS",
    "default_public_settings",
    "load_public_settings",
]
