"""
Storefront Simulation Script

Fires concurrent storefront sessions (search, open restaurant by slug,
place order, track order) against a running API.
Run from project root: python scripts/simulate.py

Version: 1.0.0
"""

import argparse
import asyncio
import os
import random
import sys
import time
from datetime import datetime
from typing import Any

import httpx
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = "http://localhost:8000"
TOTAL_SESSIONS = 50

# Search points for random sessions
LOCATIONS = [
    (12.9716, 77.5946),   # Bangalore
    (28.6139, 77.2090),   # New Delhi
    (19.0760, 72.8777),   # Mumbai
    (13.0827, 80.2707),   # Chennai
    (17.3850, 78.4867),   # Hyderabad
]
STREETS = ["MG Road", "Brigade Road", "Park Street", "Linking Road", "Anna Salai", "Banjara Hills"]


def generate_address() -> str:
    return f"{random.randint(1, 999)} {random.choice(STREETS)}"


def generate_order_payload(restaurant: dict[str, Any], user_id: str) -> dict[str, Any]:
    """Build a checkout payload from a restaurant's menu."""
    menu = restaurant.get("menu") or []
    picks = random.sample(menu, k=min(len(menu), random.randint(1, 3)))

    return {
        "user_id": user_id,
        "restaurant_id": restaurant["id"],
        "restaurant_name": restaurant["name"],
        "items": [
            {
                "id": dish["id"],
                "name": dish["name"],
                "price": dish["price"],
                "quantity": random.randint(1, 3),
            }
            for dish in picks
        ],
        "delivery_address": generate_address(),
        "delivery_fee": restaurant.get("delivery_fee", 49),
    }


# =============================================================================
# SESSION SIMULATION
# =============================================================================

async def run_session(
    client: httpx.AsyncClient,
    session_num: int
) -> dict[str, Any]:
    """One customer: search, open a restaurant by slug, order, then track it."""
    lat, lng = random.choice(LOCATIONS)
    user_id = f"sim-user-{session_num}"
    start_time = time.time()

    try:
        response = await client.post(
            f"{API_BASE_URL}/api/restaurants/nearby",
            json={"lat": lat, "lng": lng, "radius": 5000},
            timeout=30.0
        )
        response.raise_for_status()
        search = response.json()
        restaurants = search.get("restaurants") or []
        if not restaurants:
            raise ValueError("search returned no restaurants")

        chosen = random.choice(restaurants)
        response = await client.get(
            f"{API_BASE_URL}/api/restaurants/slug/{chosen['slug']}",
            timeout=30.0
        )
        response.raise_for_status()
        restaurant = response.json()["restaurant"]

        response = await client.post(
            f"{API_BASE_URL}/api/orders",
            json=generate_order_payload(restaurant, user_id),
            timeout=30.0
        )
        response.raise_for_status()
        order = response.json()

        response = await client.get(
            f"{API_BASE_URL}/api/orders/{order['order_id']}",
            timeout=30.0
        )
        response.raise_for_status()
        tracked = response.json()

        elapsed = round(time.time() - start_time, 3)
        return {
            "session_num": session_num,
            "success": True,
            "order_id": order["order_id"],
            "total": order.get("total", 0),
            "search_source": search.get("source"),
            "tracking_source": tracked.get("source"),
            "slug_cached": not restaurant["id"].startswith("reconstructed_"),
            "time": elapsed,
        }
    except (httpx.HTTPError, KeyError, ValueError) as e:
        elapsed = round(time.time() - start_time, 3)
        return {
            "session_num": session_num,
            "success": False,
            "error": str(e)[:100],
            "time": elapsed,
        }


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def run_simulation(num_sessions: int = TOTAL_SESSIONS) -> dict[str, Any]:
    """
    Run the concurrent session simulation.

    Args:
        num_sessions: Number of customer sessions to simulate
    """
    print("=" * 70)
    print("🔥 STOREFRONT SIMULATION - CONCURRENT SESSIONS")
    print("=" * 70)
    print(f"📋 Total Sessions: {num_sessions}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient() as client:
        print("\n🚀 Firing sessions...\n")
        tasks = [run_session(client, i + 1) for i in range(num_sessions)]
        results = await asyncio.gather(*tasks)

    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)

    print(f"\n✅ Successful Sessions: {len(successful)}/{num_sessions}")
    print(f"❌ Failed Sessions: {len(failed)}/{num_sessions}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        fallback_searches = len([r for r in successful if r["search_source"] == "fallback"])
        rebuilt_slugs = len([r for r in successful if not r["slug_cached"]])
        total_revenue = sum(r.get("total", 0) for r in successful)

        print(f"\n📈 Performance Metrics:")
        print(f"   Average Session: {avg_time}s")
        print(f"   Fastest: {min(r['time'] for r in successful)}s")
        print(f"   Slowest: {max(r['time'] for r in successful)}s")
        print(f"   Fallback searches: {fallback_searches}")
        print(f"   Slugs rebuilt from text: {rebuilt_slugs}")
        print(f"   💰 Total Revenue: ₹{total_revenue:.2f}")

    if failed:
        print(f"\n⚠️  Failed Session Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Session #{f['session_num']}: {f.get('error', 'Unknown error')}")

    print("\n" + "=" * 70)
    print("🔍 VERIFICATION STEPS")
    print("=" * 70)
    print(f"1. GET {API_BASE_URL}/api/orders should list every placed order")
    print(f"2. GET {API_BASE_URL}/health shows cached restaurants and stored orders")
    print("=" * 70)

    return {
        "total": num_sessions,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results
    }


async def test_single_flows() -> bool:
    """Test individual flows before the concurrent run."""
    print("\n" + "=" * 70)
    print("🧪 TESTING INDIVIDUAL FLOWS")
    print("=" * 70)

    async with httpx.AsyncClient() as client:
        # Test 1: Health check
        print("\n1️⃣ Health Check...")
        response = await client.get(f"{API_BASE_URL}/health")
        if response.status_code == 200:
            data = response.json()
            print(f"   ✅ Status: {data.get('status')}")
            print(f"   Database: {data.get('database')}")
            print(f"   Places: {data.get('places_service')}")
        else:
            print(f"   ❌ Failed: {response.text}")
            return False

        # Test 2: Reverse geocoding
        print("\n2️⃣ Reverse Geocoding...")
        lat, lng = LOCATIONS[0]
        response = await client.post(
            f"{API_BASE_URL}/api/geocode/reverse",
            json={"lat": lat, "lng": lng}
        )
        if response.status_code == 200:
            print(f"   ✅ Address: {response.json().get('address')}")
        else:
            print(f"   ❌ Failed: {response.text}")

        # Test 3: Empty cart is rejected
        print("\n3️⃣ Empty Cart Rejection...")
        response = await client.post(
            f"{API_BASE_URL}/api/orders",
            json={
                "user_id": "sim-user-0",
                "restaurant_id": "1",
                "restaurant_name": "Pizza Palace",
                "items": [],
                "delivery_address": generate_address(),
            }
        )
        if response.status_code == 400:
            print("   ✅ Rejected with 400")
        else:
            print(f"   ⚠️ Unexpected {response.status_code}: {response.text[:100]}")

        # Test 4: One full session
        print("\n4️⃣ Single Session...")
        result = await run_session(client, 0)
        if result["success"]:
            print(f"   ✅ Order {result['order_id']} placed")
            print(f"   Total: ₹{result['total']}")
        else:
            print(f"   ❌ Failed: {result['error']}")
            return False

    print("\n" + "=" * 70)
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Storefront Simulation Script")
    parser.add_argument("--sessions", type=int, default=TOTAL_SESSIONS, help="Number of sessions")
    parser.add_argument("--base-url", default=API_BASE_URL, help="API base URL")
    parser.add_argument("--skip-tests", action="store_true", help="Skip individual tests")
    args = parser.parse_args()

    API_BASE_URL = args.base_url.rstrip("/")

    # Run tests first
    if not args.skip_tests:
        success = asyncio.run(test_single_flows())
        if not success:
            print("\n❌ Pre-flight tests failed. Fix issues before running simulation.")
            sys.exit(1)

        print("\n✅ Pre-flight tests passed!")

    asyncio.run(run_simulation(num_sessions=args.sessions))
