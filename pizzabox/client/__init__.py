"""
Client toolkit for the storefront and admin apps.

    - storage: durable local key/value storage
    - api: admin API client with bearer token and 401 redirect
    - auth: admin token lifecycle and logout
    - store: persisted cart/user/address state container
"""

from pizzabox.client.storage import LocalStorage, StorageError
from pizzabox.client.api import BrowserLocation, create_api_client, resolve_admin_base_url
from pizzabox.client.auth import AdminAuth
from pizzabox.client.store import StorePersistence, StorefrontStore

__all__ = [
    "LocalStorage",
    "StorageError",
    "BrowserLocation",
    "create_api_client",
    "resolve_admin_base_url",
    "AdminAuth",
    "StorePersistence",
    "StorefrontStore",
]
