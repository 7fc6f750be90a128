"""
Fixture data used to seed an empty data file.

Passwords are hashed at seed time; the plaintext values below are the demo
accounts shown on the login page.
"""

from typing import Any

from booking_ledger.core.security import hash_password
from booking_ledger.models.base import utcnow
from booking_ledger.models.user import Role

SEED_USERS = [
    {"id": "1", "email": "test@example.com", "password": "Password123", "role": Role.USER, "name": "Test User"},
    {"id": "2", "email": "admin@example.com", "password": "Admin123", "role": Role.ADMIN, "name": "Admin User"},
    {"id": "3", "email": "agent@example.com", "password": "Agent123", "role": Role.AGENT, "name": "Booking Agent"},
    {"id": "4", "email": "traveler@example.com", "password": "Password123", "role": Role.USER, "name": "Frequent Traveler"},
]

SEED_TRIPS = [
    {
        "id": "trip1",
        "destination": "Hawaii",
        "imageUrl": "/images/southwest-hawaii.jpg",
        "price": 1299,
        "description": "Pristine beaches, volcanic landscapes, and rich cultural heritage.",
        "datesAvailable": ["2025-06-01", "2025-07-01", "2025-08-01"],
        "category": "beach",
        "duration": 7,
        "maxTravelers": 8,
        "hotels": [
            {"id": "hotel1", "name": "Waikiki Beach Resort", "location": "Honolulu", "pricePerNight": 289, "rating": 4.6},
            {"id": "hotel2", "name": "Maui Garden Inn", "location": "Kahului", "pricePerNight": 179, "rating": 4.1},
        ],
        "carRentals": [
            {"id": "car1", "company": "Island Wheels", "model": "Jeep Wrangler", "type": "suv", "pricePerDay": 89},
        ],
    },
    {
        "id": "trip2",
        "destination": "Cancun",
        "imageUrl": "/images/southwest-cancun.jpg",
        "price": 899,
        "description": "Crystal-clear waters, vibrant nightlife, and ancient Mayan ruins.",
        "datesAvailable": ["2025-06-15", "2025-07-15", "2025-08-15"],
        "category": "beach",
        "duration": 5,
        "maxTravelers": 6,
        "hotels": [
            {"id": "hotel3", "name": "Hotel Zone Suites", "location": "Cancun", "pricePerNight": 210, "rating": 4.4},
        ],
        "carRentals": [
            {"id": "car2", "company": "Riviera Rentals", "model": "Nissan Versa", "type": "economy", "pricePerDay": 45},
        ],
    },
    {
        "id": "trip3",
        "destination": "Las Vegas",
        "imageUrl": "/images/southwest-vegas.jpg",
        "price": 599,
        "description": "World-class entertainment, dining, and gaming in the desert.",
        "datesAvailable": ["2025-05-01", "2025-06-01", "2025-07-01"],
        "category": "city",
        "duration": 3,
        "maxTravelers": 10,
        "hotels": [
            {"id": "hotel4", "name": "Strip View Hotel", "location": "Las Vegas", "pricePerNight": 159, "rating": 4.2},
        ],
        "carRentals": [],
    },
]


def build_seed_collections() -> dict[str, list[dict[str, Any]]]:
    created_at = utcnow().isoformat()
    users = [
        {
            "id": user["id"],
            "email": user["email"],
            "passwordHash": hash_password(user["password"]),
            "role": user["role"].value,
            "name": user["name"],
            "createdAt": created_at,
        }
        for user in SEED_USERS
    ]
    return {
        "users": users,
        "trips": [dict(trip) for trip in SEED_TRIPS],
        "bookings": [],
        "favorites": [],
    }
