"""
Seed script -- populates the realtime store with sample tracking data.

Run with the store configured in .env:
    python seed.py

Creates:
  - 6 delivery partners around a Bengaluru restaurant cluster (4 online)
  - 3 drivers
  - 2 customers
  - 1 active order with an encoded route
  - 1 route cache entry for that route
"""

import asyncio
import sys

from src.domain.cache_key import make_route_cache_key
from src.infrastructure.realtime import ensure_mandatory_collections, init_realtime
from src.infrastructure.repositories import (
    ActiveOrderRepository,
    DeliveryBoyPresenceRepository,
    DriverPresenceRepository,
    RouteCacheRepository,
    UserLocationRepository,
)

# Koramangala restaurant cluster (approx)
RESTAURANT_LAT, RESTAURANT_LNG = 12.9352, 77.6245


DELIVERY_BOYS = {
    "boy_101": {"status": "online", "lat": 12.9400, "lng": 77.6200},
    "boy_102": {"status": "online", "lat": 12.9279, "lng": 77.6271},
    "boy_103": {"status": "online", "lat": 12.9716, "lng": 77.5946},
    "boy_104": {"status": "offline", "lat": 12.9355, "lng": 77.6240},
    "boy_105": {"status": "online", "lat": 13.0358, "lng": 77.5970},
    "boy_106": {"status": "offline", "lat": 12.9120, "lng": 77.6440},
}

DRIVERS = {
    "7": {"name": "Ravi Kumar", "mobile": "9800000007", "lat": 12.9380, "lng": 77.6210},
    "8": {"name": "Meena Iyer", "mobile": "9800000008", "lat": 12.9250, "lng": 77.6300,
          "vehicle_type_icon": "scooter"},
    "9": {"name": "Arjun Das", "mobile": "9800000009", "lat": 12.9600, "lng": 77.6400,
          "is_available": False},
}

USERS = {
    "user_1": {"lat": 12.9279, "lng": 77.6271, "city": "Bengaluru",
               "area": "Koramangala 4th Block", "state": "Karnataka"},
    "user_2": {"lat": 12.9141, "lng": 77.6411, "city": "Bengaluru",
               "area": "HSR Layout", "state": "Karnataka"},
}

ROUTE = [
    (RESTAURANT_LAT, RESTAURANT_LNG),
    (12.9330, 77.6260),
    (12.9300, 77.6268),
    (12.9279, 77.6271),
]


async def seed() -> None:
    store = init_realtime()
    if store is None:
        print("Realtime store not configured -- check .env")
        sys.exit(1)

    await ensure_mandatory_collections(store)

    boys = DeliveryBoyPresenceRepository(store)
    for boy_id, payload in DELIVERY_BOYS.items():
        await boys.upsert(boy_id, payload)
    print(f"  Created {len(DELIVERY_BOYS)} delivery partners")

    drivers = DriverPresenceRepository(store)
    for driver_id, payload in DRIVERS.items():
        await drivers.upsert(driver_id, payload)
    print(f"  Created {len(DRIVERS)} drivers")

    users = UserLocationRepository(store)
    for user_id, payload in USERS.items():
        await users.upsert(user_id, payload)
    print(f"  Created {len(USERS)} customers")

    nearest = await boys.find_nearest_online(RESTAURANT_LAT, RESTAURANT_LNG)
    boy_id = nearest["boy_id"] if nearest else None

    orders = ActiveOrderRepository(store)
    await orders.upsert(
        "order_5001",
        {
            "boy_id": boy_id,
            "boy_lat": nearest["lat"] if nearest else None,
            "boy_lng": nearest["lng"] if nearest else None,
            "customer_lat": USERS["user_1"]["lat"],
            "customer_lng": USERS["user_1"]["lng"],
            "restaurant_lat": RESTAURANT_LAT,
            "restaurant_lng": RESTAURANT_LNG,
            "distance": 1.2,
            "duration": 6,
            "route_coordinates": ROUTE,
        },
    )
    print(f"  Created 1 active order (assigned to {boy_id})")

    key = make_route_cache_key(*ROUTE[0], *ROUTE[-1])
    await RouteCacheRepository(store).upsert(
        key, {"distance": 1.2, "duration": 6, "route_coordinates": ROUTE}
    )
    print(f"  Cached route {key}")

    print("\nSeed complete!")


if __name__ == "__main__":
    print("Seeding realtime store...")
    asyncio.run(seed())
