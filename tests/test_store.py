import json
import random
from collections import Counter

import pytest
from pydantic import ValidationError

from pizzabox.client import LocalStorage, StorageError, StorePersistence, StorefrontStore
from pizzabox.schemas import CartItem, User

NAMESPACE = "the-pizza-box-storage"


def margherita(quantity=1, **extra):
    return {"id": "margherita", "name": "Margherita", "price": 299.0, "quantity": quantity, **extra}


def garlic_bread(quantity=1):
    return {"id": "garlic-bread", "name": "Garlic Bread", "price": 149.0, "quantity": quantity}


@pytest.fixture
def store(storage):
    return StorefrontStore(StorePersistence(storage))


class ReadOnlyStorage(LocalStorage):
    """Storage whose writes always fail, like a full disk."""

    def set_item(self, key, value):
        raise StorageError("No space left on device")


def test_repeated_ids_merge_into_one_line(store):
    store.add_to_cart(margherita(2))
    store.add_to_cart(garlic_bread(1))
    store.add_to_cart(margherita(3))

    assert [(line.id, line.quantity) for line in store.cart] == [
        ("margherita", 5),
        ("garlic-bread", 1),
    ]


def test_random_add_sequences_keep_one_line_per_id(store):
    rng = random.Random(7)
    ids = ["margherita", "farmhouse", "coke", "choco-lava"]
    expected = Counter()

    for _ in range(40):
        item_id = rng.choice(ids)
        qty = rng.randint(1, 4)
        expected[item_id] += qty
        store.add_to_cart({"id": item_id, "name": item_id.title(), "price": 100, "quantity": qty})

    assert len(store.cart) == len(expected)
    assert {line.id: line.quantity for line in store.cart} == dict(expected)


def test_duplicate_add_keeps_existing_line_options(store):
    # Same product id with different toppings still merges into the first line
    store.add_to_cart(margherita(1, addons=["extra cheese"], variants={"size": "large"}))
    store.add_to_cart(margherita(1, addons=["olives"], variants={"size": "small"}, price=199.0))

    assert len(store.cart) == 1
    line = store.cart[0]
    assert line.quantity == 2
    assert line.addons == ["extra cheese"]
    assert line.variants == {"size": "large"}
    assert line.price == 299.0


def test_new_item_is_appended_unchanged(store):
    item = CartItem(id="farmhouse", name="Farmhouse", price=449, quantity=2, options={"crust": "thin"}, type="pizza")
    store.add_to_cart(item)
    assert store.cart == [item]


def test_remove_from_cart_drops_matching_lines(store):
    store.add_to_cart(margherita(2))
    store.add_to_cart(garlic_bread(1))

    store.remove_from_cart("margherita")
    assert [line.id for line in store.cart] == ["garlic-bread"]

    store.remove_from_cart("not-in-cart")
    assert [line.id for line in store.cart] == ["garlic-bread"]


def test_clear_cart_empties_cart(store):
    store.add_to_cart(margherita(2))
    store.add_to_cart(garlic_bread(4))

    store.clear_cart()
    assert store.cart == []
    assert store.cart_count == 0
    assert store.snapshot()["cart"] == []


def test_cart_totals(store):
    store.add_to_cart(margherita(2))
    store.add_to_cart(garlic_bread(1))
    assert store.cart_count == 3
    assert store.cart_total == 747.0


def test_quantity_must_be_positive(store):
    with pytest.raises(ValidationError):
        store.add_to_cart(margherita(0))
    assert store.cart == []


def test_user_is_replaced_not_edited(store):
    store.set_user({"id": "u1", "name": "Asha", "email": "asha@example.com", "role": "CUSTOMER", "isGuest": True})
    assert store.user.is_guest is True

    with pytest.raises(ValidationError):
        store.user.name = "Someone else"

    store.set_user(User(id="u2", name="Ravi", email="ravi@example.com", role="CUSTOMER"))
    assert store.user.id == "u2"

    store.set_user(None)
    assert store.user is None


def test_session_setters_replace_values(store):
    store.set_location("Indiranagar, Bengaluru")
    store.set_delivery_address({
        "location": "Indiranagar, Bengaluru",
        "houseNo": "12B",
        "buildingName": "Lakeview Apartments",
        "landmark": "Near metro",
        "type": "home",
    })
    store.set_selected_address_id("addr_42")

    assert store.location == "Indiranagar, Bengaluru"
    assert store.delivery_address.house_no == "12B"
    assert store.selected_address_id == "addr_42"

    store.set_delivery_address(None)
    store.set_selected_address_id(None)
    assert store.delivery_address is None
    assert store.selected_address_id is None


def test_every_mutation_is_persisted(storage, store):
    store.add_to_cart(margherita(2, addons=["paneer"]))
    store.set_location("HSR Layout")

    saved = json.loads(storage.get_item(NAMESPACE))
    assert saved == {
        "state": {
            "cart": [{"id": "margherita", "name": "Margherita", "price": 299.0, "quantity": 2, "addons": ["paneer"]}],
            "user": None,
            "location": "HSR Layout",
            "deliveryAddress": None,
            "selectedAddressId": None,
        },
        "version": 0,
    }


def test_state_is_restored_on_init(storage, store):
    store.add_to_cart(margherita(3))
    store.set_user({"id": "u1", "name": "Asha", "email": "asha@example.com", "role": "CUSTOMER"})
    store.set_selected_address_id("addr_1")

    restored = StorefrontStore(StorePersistence(storage))
    assert [(line.id, line.quantity) for line in restored.cart] == [("margherita", 3)]
    assert restored.user.name == "Asha"
    assert restored.selected_address_id == "addr_1"


def test_unreadable_saved_state_starts_fresh(storage):
    storage.set_item(NAMESPACE, "{not json")
    store = StorefrontStore(StorePersistence(storage))
    assert store.cart == []
    assert store.user is None


def test_storage_write_failure_does_not_break_mutations(tmp_path, caplog):
    store = StorefrontStore(StorePersistence(ReadOnlyStorage(tmp_path / "ls.json")))

    store.add_to_cart(margherita(1))
    store.add_to_cart(margherita(1))

    assert store.cart[0].quantity == 2
    assert "Could not persist" in caplog.text


def test_subscribers_receive_snapshots(store):
    seen = []
    unsubscribe = store.subscribe(seen.append)

    store.add_to_cart(garlic_bread(1))
    unsubscribe()
    store.clear_cart()

    assert len(seen) == 1
    assert seen[0]["cart"][0]["id"] == "garlic-bread"


def test_store_without_persistence_stays_in_memory():
    store = StorefrontStore()
    store.add_to_cart(margherita(1))
    assert store.cart_count == 1


@pytest.mark.parametrize("state", [
    {"cart": 5},
    {"cart": "margherita"},
    {"cart": [5, "x"]},
    {"cart": [], "user": ["not", "a", "user"], "deliveryAddress": 42},
])
def test_malformed_saved_fields_start_empty(storage, state):
    storage.set_item(NAMESPACE, json.dumps({"state": {**state, "location": "HSR Layout"}, "version": 0}))

    store = StorefrontStore(StorePersistence(storage))

    assert store.cart == []
    assert store.user is None
    assert store.delivery_address is None
    assert store.location == "HSR Layout"
