import random
import uuid
from datetime import date, timedelta

from locust import HttpUser, between, task

# Catálogo de app/infrastructure/seed_data.py (habitaciones reservables)
ROOM_IDS = [101, 102, 201]
FIRST_NIGHT = date.today() + timedelta(days=30)


class GuestUser(HttpUser):
    """
    Huéspedes compitiendo por las mismas habitaciones y fechas.

    Con pocas habitaciones y una ventana corta de fechas la mayoría de los
    POST /bookings chocan: un 409 es una respuesta correcta, no un fallo.
    """

    wait_time = between(1, 3)

    def on_start(self):
        self.user_id = random.randint(1, 10_000)
        self.headers = {"X-User-Id": str(self.user_id), "X-User-Role": "customer"}
        self.booking_ids = []

    def _stay(self):
        check_in = FIRST_NIGHT + timedelta(days=random.randint(0, 6))
        return check_in, check_in + timedelta(days=random.randint(1, 3))

    @task(3)
    def search_availability(self):
        check_in, check_out = self._stay()
        self.client.get(
            "/api/v1/rooms/availability",
            params={"check_in": check_in.isoformat(), "check_out": check_out.isoformat()},
            headers=self.headers,
            name="/api/v1/rooms/availability",
        )

    @task(2)
    def create_booking(self):
        check_in, check_out = self._stay()
        payload = {
            "room_id": random.choice(ROOM_IDS),
            "check_in": check_in.isoformat(),
            "check_out": check_out.isoformat(),
        }
        with self.client.post(
            "/api/v1/bookings",
            json=payload,
            headers=self.headers,
            name="/api/v1/bookings",
            catch_response=True,
        ) as response:
            if response.status_code == 201:
                self.booking_ids.append(response.json()["id"])
                response.success()
            elif response.status_code == 409:
                response.success()
            else:
                response.failure(f"unexpected status {response.status_code}")

    @task(1)
    def pay_booking(self):
        if not self.booking_ids:
            return
        booking_id = random.choice(self.booking_ids)
        headers = {**self.headers, "Idempotency-Key": str(uuid.uuid4())}
        with self.client.post(
            f"/api/v1/bookings/{booking_id}/payments",
            json={"amount": "100.00", "method": "cash"},
            headers=headers,
            name="/api/v1/bookings/[id]/payments",
            catch_response=True,
        ) as response:
            # 409: saldo ya cubierto
            if response.status_code in (201, 409):
                response.success()
            else:
                response.failure(f"unexpected status {response.status_code}")
