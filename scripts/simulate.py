"""
Storefront Simulation Script

Fires concurrent settings requests at a running API and plays a shopping
session against the persisted storefront store.
Run from project root: python scripts/simulate.py
"""

import asyncio
import sys
import os
import random
import tempfile
import time
import argparse
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any

import httpx
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from pizzabox.client import LocalStorage, StorePersistence, StorefrontStore

# Configuration
API_BASE_URL = "http://localhost:5001"
TOTAL_REQUESTS = 50

MENU_ITEMS = [
    {"id": "margherita", "name": "Margherita", "price": 299.0, "type": "pizza"},
    {"id": "farmhouse", "name": "Farmhouse", "price": 449.0, "type": "pizza"},
    {"id": "peppy-paneer", "name": "Peppy Paneer", "price": 399.0, "type": "pizza"},
    {"id": "garlic-bread", "name": "Garlic Bread", "price": 149.0, "type": "side"},
    {"id": "choco-lava", "name": "Choco Lava Cake", "price": 109.0, "type": "dessert"},
    {"id": "coke", "name": "Coke 500ml", "price": 60.0, "type": "beverage"},
]
TOPPINGS = [None, ["extra cheese"], ["jalapeno", "olives"], ["paneer"]]


def generate_random_line() -> dict[str, Any]:
    """Generate a random cart line."""
    line = random.choice(MENU_ITEMS).copy()
    line["quantity"] = random.randint(1, 3)
    toppings = random.choice(TOPPINGS)
    if toppings:
        line["addons"] = toppings
    return line


# =============================================================================
# SETTINGS LOAD
# =============================================================================

async def fetch_settings(
    client: httpx.AsyncClient,
    request_num: int
) -> dict[str, Any]:
    """Fetch public settings once."""
    start_time = time.time()

    try:
        response = await client.get(f"{API_BASE_URL}/api/settings", timeout=30.0)
        elapsed = round(time.time() - start_time, 3)
        return {
            "request_num": request_num,
            "success": response.status_code == 200,
            "restaurant": response.json().get("restaurantName"),
            "time": elapsed,
        }
    except Exception as e:
        elapsed = round(time.time() - start_time, 3)
        return {
            "request_num": request_num,
            "success": False,
            "error": str(e)[:100],
            "time": elapsed,
        }


async def run_settings_load(num_requests: int = TOTAL_REQUESTS) -> dict[str, Any]:
    """Hit GET /api/settings concurrently and summarize."""
    print("=" * 70)
    print("🔥 SETTINGS LOAD TEST")
    print("=" * 70)
    print(f"📋 Total Requests: {num_requests}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()
    async with httpx.AsyncClient() as client:
        tasks = [fetch_settings(client, i + 1) for i in range(num_requests)]
        results = await asyncio.gather(*tasks)
    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print(f"\n✅ Successful: {len(successful)}/{num_requests}")
    print(f"❌ Failed: {len(failed)}/{num_requests}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        names = Counter(r["restaurant"] for r in successful)
        print(f"   Average Response: {avg_time}s")
        print(f"   Restaurant names served: {dict(names)}")

    if failed:
        print(f"\n⚠️  Failed Request Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Request #{f['request_num']}: {f.get('error', 'Unknown error')}")

    return {
        "total": num_requests,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
    }


# =============================================================================
# CART SESSION
# =============================================================================

def run_cart_session(num_adds: int, storage_path: Path) -> bool:
    """
    Add random lines to a persisted store and check the merge rule:
    one line per id, quantity equal to the sum added under that id.
    """
    print("\n" + "=" * 70)
    print("🛒 CART SESSION")
    print("=" * 70)

    store = StorefrontStore(StorePersistence(LocalStorage(storage_path)))
    store.clear_cart()

    expected: Counter = Counter()
    for _ in range(num_adds):
        line = generate_random_line()
        expected[line["id"]] += line["quantity"]
        store.add_to_cart(line)

    reloaded = StorefrontStore(StorePersistence(LocalStorage(storage_path)))
    actual = {line.id: line.quantity for line in reloaded.cart}

    print(f"   Adds: {num_adds}")
    print(f"   Lines: {len(reloaded.cart)} (distinct ids: {len(expected)})")
    print(f"   Units: {reloaded.cart_count}")
    print(f"   💰 Total: ₹{reloaded.cart_total:.2f}")

    ok = len(reloaded.cart) == len(expected) and actual == dict(expected)
    print(f"\n{'✅' if ok else '❌'} Merge rule {'holds' if ok else 'VIOLATED'} after reload")
    return ok


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Storefront Simulation Script")
    parser.add_argument("--requests", type=int, default=TOTAL_REQUESTS, help="Number of settings requests")
    parser.add_argument("--adds", type=int, default=25, help="Number of add-to-cart calls")
    parser.add_argument("--skip-api", action="store_true", help="Only run the cart session")
    args = parser.parse_args()

    with tempfile.TemporaryDirectory() as tmp:
        cart_ok = run_cart_session(args.adds, Path(tmp) / "local_storage.json")

    if not args.skip_api:
        asyncio.run(run_settings_load(args.requests))

    print("\n" + "=" * 70)
    sys.exit(0 if cart_ok else 1)
