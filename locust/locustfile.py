"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Lost-update check on the data file
  locust -f locustfile.py --tags read         # Catalog and listing throughput
  locust -f locustfile.py --tags edge         # Bad input
  locust -f locustfile.py                     # All tests

Start the API with AUTO_CONFIRM_BOOKINGS=true and a fresh data file
(`booking-ledger reset --yes --reseed`) so the counts below are meaningful.
"""

import random
from datetime import date, timedelta

from locust import HttpUser, task, between, tag, events

SEED_ACCOUNTS = [
    ("test@example.com", "Password123"),
    ("traveler@example.com", "Password123"),
]
TRIP_IDS = ["trip1", "trip2", "trip3"]

# Bookings the API acknowledged with 201, per user id
CREATED = {}


def booking_payload(trip_id=None, travelers=None):
    start = date.today() + timedelta(days=random.randint(7, 120))
    return {
        "tripId": trip_id or random.choice(TRIP_IDS),
        "fullName": "Load Test",
        "email": "load@example.com",
        "travelers": travelers if travelers is not None else random.randint(1, 4),
        "startDate": start.isoformat(),
        "tripType": "one-way",
    }


def login(client):
    email, password = random.choice(SEED_ACCOUNTS)
    resp = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    if resp.status_code != 200:
        return None, {}
    data = resp.json()
    return data["user"]["id"], {"Authorization": f"Bearer {data['access_token']}"}


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    """Compare acknowledged creates with what the API lists."""
    if not CREATED:
        return
    print("\n" + "=" * 60)
    print("Acknowledged bookings per user:")
    for user_id, count in CREATED.items():
        print(f"  user {user_id}: {count}")
    print("Each user's GET /api/v1/bookings/ must list at least this many.")
    print("=" * 60)


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - many simultaneous creates against one data file

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    Every 201 is a booking that must survive a restart of the API.
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.user_id, self.headers = login(self.client)

    @tag("concurrency")
    @task
    def create_booking(self):
        if not self.headers:
            return

        with self.client.post(
            "/api/v1/bookings/",
            json=booking_payload(),
            headers=self.headers,
            catch_response=True,
        ) as resp:
            if resp.status_code == 201:
                CREATED[self.user_id] = CREATED.get(self.user_id, 0) + 1
                resp.success()
            elif resp.status_code in (503, 504):
                resp.failure(f"Storage error: {resp.status_code}")
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ReadUser(HttpUser):
    """
    TEST 2: Read throughput

    Run: locust -f locustfile.py --tags read -u 100 -r 20 --run-time 60s
    """
    wait_time = between(0.1, 0.5)

    def on_start(self):
        self.user_id, self.headers = login(self.client)

    @tag("read")
    @task(10)
    def list_trips(self):
        self.client.get("/api/v1/trips/")

    @tag("read")
    @task(5)
    def list_own_bookings(self):
        if self.headers:
            self.client.get("/api/v1/bookings/", headers=self.headers)

    @tag("read")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - bad input must be rejected without side effects

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.user_id, self.headers = login(self.client)

    def expect(self, expected, **kwargs):
        with self.client.post("/api/v1/bookings/", catch_response=True, **kwargs) as resp:
            if resp.status_code in expected:
                resp.success()
            else:
                resp.failure(f"Expected {expected}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_trip(self):
        self.expect((422,), json=booking_payload(trip_id="atlantis"), headers=self.headers)

    @tag("edge")
    @task
    def zero_travelers(self):
        self.expect((422,), json=booking_payload(travelers=0), headers=self.headers)

    @tag("edge")
    @task
    def too_many_travelers(self):
        self.expect((422,), json=booking_payload(trip_id="trip2", travelers=999), headers=self.headers)

    @tag("edge")
    @task
    def malformed_json(self):
        self.expect((422,), data="not json at all", headers=self.headers)

    @tag("edge")
    @task
    def missing_auth(self):
        self.expect((401,), json=booking_payload())

    @tag("edge")
    @task
    def forged_token(self):
        self.expect((401,), json=booking_payload(), headers={"Authorization": "Bearer 1"})
