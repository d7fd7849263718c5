"""
Admin Auth Lifecycle

Logout is client-authoritative: local auth state is always cleared and the
redirect always happens. Telling the API about the logout is best-effort.
"""

import logging
from typing import Optional

import httpx

from pizzabox.client.api import BrowserLocation
from pizzabox.client.storage import LocalStorage, StorageError
from pizzabox.core.config import get_settings

logger = logging.getLogger(__name__)

AUTH_KEY_PREFIXES = ("admin_", "auth_")


class AdminAuth:
    """Bearer token bookkeeping for the admin dashboard."""

    def __init__(self, storage: LocalStorage, location: BrowserLocation):
        settings = get_settings()
        self.storage = storage
        self.location = location
        self.token_key = settings.auth_token_key
        self.login_path = settings.login_path

    def get_token(self) -> Optional[str]:
        return self.storage.get_item(self.token_key)

    def set_token(self, token: str) -> None:
        self.storage.set_item(self.token_key, token)

    def is_authenticated(self) -> bool:
        return bool(self.get_token())

    def clear(self) -> None:
        """Remove the token, the cached admin user and any other auth entries."""
        keys = [self.token_key, "admin_user"]
        keys += [k for k in self.storage.keys() if k.startswith(AUTH_KEY_PREFIXES)]
        for key in dict.fromkeys(keys):
            try:
                self.storage.remove_item(key)
            except StorageError as e:
                logger.warning(f"Could not clear auth entry '{key}': {e}")

    def force_redirect_to_login(self) -> None:
        self.clear()
        self.location.assign(self.login_path)

    def logout(self, client: httpx.Client) -> None:
        """
        Log out of the admin dashboard.

        Local state is cleared before the API call, so a failed or
        unreachable API never leaves the dashboard logged in.

        Args:
            client: Admin API client (see create_api_client)
        """
        self.clear()

        try:
            client.post("/auth/logout")
            logger.info("✅ Backend logout successful")
        except httpx.HTTPError as e:
            logger.warning(f"⚠️ Backend logout failed (non-critical): {e}")

        self.force_redirect_to_login()
