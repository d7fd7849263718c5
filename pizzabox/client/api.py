"""
Admin API Client

httpx client preconfigured for the admin-scoped API.

Behaviour:
    - Base URL is API_URL scoped under "/admin" (appended once)
    - Every request carries "Authorization: Bearer <token>" when a token
      is present in local storage
    - A 401 response navigates to the login route, unless already there
    - Every non-success response is raised to the caller unchanged

Usage:
    from pizzabox.client import BrowserLocation, LocalStorage, create_api_client

    with create_api_client(LocalStorage(), BrowserLocation("/orders")) as api:
        orders = api.get("/orders").json()
"""

import logging
from typing import Optional

import httpx

from pizzabox.client.storage import LocalStorage
from pizzabox.core.config import get_settings

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5001/api"
ADMIN_SUFFIX = "/admin"


def resolve_admin_base_url(api_url: Optional[str] = None) -> str:
    """
    Build the admin-scoped base URL.

    Args:
        api_url: Configured API URL; empty or None means the local default

    Returns:
        str: The URL itself if it already ends in "/admin", else URL + "/admin"

    Example:
        >>> resolve_admin_base_url("https://api.thepizzabox.in/api")
        'https://api.thepizzabox.in/api/admin'
        >>> resolve_admin_base_url("https://api.thepizzabox.in/api/admin")
        'https://api.thepizzabox.in/api/admin'
    """
    base = (api_url or DEFAULT_API_URL).rstrip("/")
    if base.endswith(ADMIN_SUFFIX):
        return base
    return f"{base}{ADMIN_SUFFIX}"


class BrowserLocation:
    """
    Current page location of the client UI.

    `assign` performs a full-page navigation: the path changes and the
    navigation is recorded in `history`.
    """

    def __init__(self, pathname: str = "/"):
        self.pathname = pathname
        self.history: list[str] = []

    def assign(self, href: str) -> None:
        logger.info(f"Navigating {self.pathname} -> {href}")
        self.history.append(href)
        self.pathname = href

    def __repr__(self):
        return f"<BrowserLocation {self.pathname}>"


def create_api_client(
    storage: LocalStorage,
    location: BrowserLocation,
    *,
    api_url: Optional[str] = None,
    transport: Optional[httpx.BaseTransport] = None,
    timeout: float = 30.0,
) -> httpx.Client:
    """
    Create the admin API client.

    Args:
        storage: Local storage holding the bearer token
        location: Page location used for the 401 redirect
        api_url: Overrides the configured API_URL
        transport: Custom httpx transport (e.g. httpx.MockTransport)
        timeout: Request timeout in seconds

    Returns:
        httpx.Client: Configured client; close it or use it as a context manager
    """
    settings = get_settings()
    base_url = resolve_admin_base_url(api_url if api_url is not None else settings.api_url)
    login_path = settings.login_path
    token_key = settings.auth_token_key

    def attach_token(request: httpx.Request) -> None:
        token = storage.get_item(token_key)
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    def handle_response(response: httpx.Response) -> None:
        if response.status_code == 401:
            if login_path not in location.pathname:
                logger.warning(
                    f"401 from {response.request.method} {response.request.url}, "
                    f"redirecting to {login_path}"
                )
                location.assign(login_path)
        # Redirects are followed by httpx; only errors reach the caller
        if response.is_error:
            response.raise_for_status()

    return httpx.Client(
        base_url=base_url,
        headers={"Content-Type": "application/json"},
        event_hooks={"request": [attach_token], "response": [handle_response]},
        follow_redirects=True,
        transport=transport,
        timeout=timeout,
    )
