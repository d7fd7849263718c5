"""
Storefront State Container

Holds the customer session of the storefront: cart lines, user, location,
delivery address and selected address id. The store is an explicit object
handed to whatever renders or edits it; nothing here is module-global.

Persistence:
    StorePersistence reads the saved state once when the store is created
    and writes a full snapshot after every mutation. The saved entry is
    `{"state": {...}, "version": 0}` under the "the-pizza-box-storage" key.
    Failing writes are logged and never reach the caller.

Cart merge rule:
    Adding an item whose id is already in the cart adds the incoming
    quantity to the existing line. Everything else on the incoming item
    (options, addons, variants, price, name) is dropped in favour of the
    existing line.

Usage:
    from pizzabox.client import LocalStorage, StorePersistence, StorefrontStore

    store = StorefrontStore(StorePersistence(LocalStorage()))
    store.add_to_cart({"id": "margherita", "name": "Margherita", "price": 299, "quantity": 1})
"""

import json
import logging
from typing import Any, Callable, Optional, Union

from filelock import Timeout
from pydantic import ValidationError

from pizzabox.client.storage import LocalStorage, StorageError
from pizzabox.core.config import get_settings
from pizzabox.schemas import CartItem, DeliveryAddress, User

logger = logging.getLogger(__name__)

STORE_VERSION = 0

Listener = Callable[[dict[str, Any]], None]


# =============================================================================
# PERSISTENCE ADAPTER
# =============================================================================

class StorePersistence:
    """Reads and writes the storefront snapshot in local storage."""

    def __init__(self, storage: LocalStorage, namespace: Optional[str] = None):
        self.storage = storage
        self.namespace = namespace or get_settings().store_namespace

    def load(self) -> Optional[dict[str, Any]]:
        """
        Read the saved state.

        Returns:
            The saved state dict, or None if nothing usable is stored
        """
        raw = self.storage.get_item(self.namespace)
        if raw is None:
            return None

        try:
            envelope = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Discarding unreadable '{self.namespace}' entry: {e}")
            return None

        if not isinstance(envelope, dict) or not isinstance(envelope.get("state"), dict):
            logger.warning(f"Discarding malformed '{self.namespace}' entry")
            return None

        if envelope.get("version", STORE_VERSION) != STORE_VERSION:
            logger.warning(
                f"Discarding '{self.namespace}' entry with version {envelope.get('version')}"
            )
            return None

        return envelope["state"]

    def save(self, state: dict[str, Any]) -> bool:
        """
        Write a full snapshot.

        Returns:
            bool: True if written; False if the write failed (logged)
        """
        try:
            raw = json.dumps({"state": state, "version": STORE_VERSION})
            self.storage.set_item(self.namespace, raw)
        except (StorageError, Timeout, OSError, TypeError, ValueError) as e:
            logger.warning(f"Could not persist '{self.namespace}': {e}")
            return False
        return True


# =============================================================================
# STATE CONTAINER
# =============================================================================

class StorefrontStore:
    """Cart, user and delivery details of one storefront session."""

    def __init__(self, persistence: Optional[StorePersistence] = None):
        self._persistence = persistence
        self._listeners: list[Listener] = []

        self._cart: list[CartItem] = []
        self._user: Optional[User] = None
        self._location: str = ""
        self._delivery_address: Optional[DeliveryAddress] = None
        self._selected_address_id: Optional[str] = None

        if persistence is not None:
            saved = persistence.load()
            if saved is not None:
                self._hydrate(saved)

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def cart(self) -> list[CartItem]:
        return list(self._cart)

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def location(self) -> str:
        return self._location

    @property
    def delivery_address(self) -> Optional[DeliveryAddress]:
        return self._delivery_address

    @property
    def selected_address_id(self) -> Optional[str]:
        return self._selected_address_id

    @property
    def cart_count(self) -> int:
        """Total number of units across all lines."""
        return sum(item.quantity for item in self._cart)

    @property
    def cart_total(self) -> float:
        return round(sum(item.line_total for item in self._cart), 2)

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready copy of the whole state, camelCase keys."""
        return {
            "cart": [
                item.model_dump(mode="json", by_alias=True, exclude_none=True)
                for item in self._cart
            ],
            "user": (
                self._user.model_dump(mode="json", by_alias=True, exclude_none=True)
                if self._user else None
            ),
            "location": self._location,
            "deliveryAddress": (
                self._delivery_address.model_dump(mode="json", by_alias=True, exclude_none=True)
                if self._delivery_address else None
            ),
            "selectedAddressId": self._selected_address_id,
        }

    # =========================================================================
    # CART MUTATIONS
    # =========================================================================

    def add_to_cart(self, item: Union[CartItem, dict[str, Any]]) -> None:
        """
        Add a line, or merge its quantity into the line with the same id.

        Only the quantity is merged; the existing line's options, addons,
        variants, price and name win over the incoming item's.
        """
        incoming = item if isinstance(item, CartItem) else CartItem.model_validate(item)

        if any(line.id == incoming.id for line in self._cart):
            self._cart = [
                line.model_copy(update={"quantity": line.quantity + incoming.quantity})
                if line.id == incoming.id else line
                for line in self._cart
            ]
        else:
            self._cart = self._cart + [incoming]

        self._commit()

    def remove_from_cart(self, item_id: str) -> None:
        """Drop every line with this id."""
        self._cart = [line for line in self._cart if line.id != item_id]
        self._commit()

    def clear_cart(self) -> None:
        self._cart = []
        self._commit()

    # =========================================================================
    # SESSION MUTATIONS
    # =========================================================================

    def set_user(self, user: Union[User, dict[str, Any], None]) -> None:
        if isinstance(user, dict):
            user = User.model_validate(user)
        self._user = user
        self._commit()

    def set_location(self, location: str) -> None:
        self._location = location
        self._commit()

    def set_delivery_address(self, address: Union[DeliveryAddress, dict[str, Any], None]) -> None:
        if isinstance(address, dict):
            address = DeliveryAddress.model_validate(address)
        self._delivery_address = address
        self._commit()

    def set_selected_address_id(self, address_id: Optional[str]) -> None:
        self._selected_address_id = address_id
        self._commit()

    # =========================================================================
    # SUBSCRIPTIONS
    # =========================================================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call listener with the new snapshot after every mutation.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _commit(self) -> None:
        state = self.snapshot()
        if self._persistence is not None:
            self._persistence.save(state)
        for listener in list(self._listeners):
            listener(state)

    def _hydrate(self, state: dict[str, Any]) -> None:
        """Restore saved state; fields that fail validation start empty."""
        cart = state.get("cart") or []
        if not isinstance(cart, list):
            logger.warning(f"Dropping saved cart of type {type(cart).__name__}")
            cart = []
        try:
            self._cart = [CartItem.model_validate(line) for line in cart]
        except (ValidationError, TypeError) as e:
            logger.warning(f"Dropping saved cart: {e}")

        try:
            user = state.get("user")
            self._user = User.model_validate(user) if user else None
        except (ValidationError, TypeError) as e:
            logger.warning(f"Dropping saved user: {e}")

        location = state.get("location")
        self._location = location if isinstance(location, str) else ""

        try:
            address = state.get("deliveryAddress")
            self._delivery_address = DeliveryAddress.model_validate(address) if address else None
        except (ValidationError, TypeError) as e:
            logger.warning(f"Dropping saved delivery address: {e}")

        selected = state.get("selectedAddressId")
        self._selected_address_id = selected if isinstance(selected, str) else None
