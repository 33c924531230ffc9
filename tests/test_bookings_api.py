"""
Flujo completo de reservaciones vía HTTP (TestClient + contenedor in-memory).

Habitación X: tarifa 100.00, capacidad 2. Lavandería: 50.00. Hoy: 2023-12-01.
"""

from datetime import date
from decimal import Decimal

from tests.factories import CUSTOMER, LAUNDRY, OTHER_CUSTOMER, ROOM_X, ROOM_Y, STAFF, headers_for

BOOKINGS = "/api/v1/bookings"


def _create(client, actor=CUSTOMER, room_id=ROOM_X.id, check_in="2024-01-01", check_out="2024-01-03", **extra):
    return client.post(
        BOOKINGS,
        json={"room_id": room_id, "check_in": check_in, "check_out": check_out, **extra},
        headers=headers_for(actor),
    )


def _room_available(client, room_id, check_in, check_out, actor=CUSTOMER):
    response = client.get(
        f"/api/v1/rooms/{room_id}/availability",
        params={"check_in": check_in, "check_out": check_out},
        headers=headers_for(actor),
    )
    assert response.status_code == 200
    return response.json()["available"]


class TestCreateBooking:
    def test_two_night_stay_is_priced_per_night(self, client):
        """Reservar X del 1 al 3 de enero son 2 noches a 100.00."""
        response = _create(client)

        assert response.status_code == 201
        body = response.json()
        assert body["nights"] == 2
        assert Decimal(str(body["room_charge"])) == Decimal("200.00")
        assert body["status"] == "PENDING"
        assert body["holder_id"] == CUSTOMER.user_id

    def test_staff_created_booking_is_approved(self, client):
        response = _create(client, actor=STAFF, holder_id=CUSTOMER.user_id)
        assert response.status_code == 201
        assert response.json()["status"] == "APPROVED"

    def test_inverted_dates_fail_request_validation(self, client):
        response = _create(client, check_in="2024-01-03", check_out="2024-01-01")
        assert response.status_code == 422

    def test_past_check_in_is_a_domain_validation_error(self, client):
        response = _create(client, check_in="2023-11-20", check_out="2023-11-22")
        assert response.status_code == 422
        assert response.json()["code"] == "INVALID_DATE_RANGE"

    def test_unknown_room_is_404(self, client):
        response = _create(client, room_id=999)
        assert response.status_code == 404
        assert response.json()["code"] == "ROOM_NOT_FOUND"

    def test_extra_fields_are_rejected(self, client):
        response = _create(client, price="1.00")
        assert response.status_code == 422

    def test_missing_identity_is_401(self, client):
        response = client.post(
            BOOKINGS, json={"room_id": ROOM_X.id, "check_in": "2024-01-01", "check_out": "2024-01-03"}
        )
        assert response.status_code == 401

    def test_unknown_role_is_400(self, client):
        response = client.get(BOOKINGS, headers={"X-User-Id": "1", "X-User-Role": "manager"})
        assert response.status_code == 400


class TestOverlap:
    def test_overlapping_booking_rejected_until_first_is_cancelled(self, client):
        first = _create(client).json()

        clash = _create(client, actor=OTHER_CUSTOMER, check_in="2024-01-02", check_out="2024-01-04")
        assert clash.status_code == 409
        assert clash.json()["code"] == "ROOM_UNAVAILABLE"
        assert not _room_available(client, ROOM_X.id, "2024-01-02", "2024-01-04")

        cancel = client.post(f"{BOOKINGS}/{first['id']}/cancel", headers=headers_for(CUSTOMER))
        assert cancel.status_code == 200
        assert cancel.json()["status"] == "CANCELLED"

        assert _room_available(client, ROOM_X.id, "2024-01-02", "2024-01-04")
        retry = _create(client, actor=OTHER_CUSTOMER, check_in="2024-01-02", check_out="2024-01-04")
        assert retry.status_code == 201

    def test_back_to_back_stays_do_not_overlap(self, client):
        assert _create(client).status_code == 201
        assert _create(client, actor=OTHER_CUSTOMER, check_in="2024-01-03", check_out="2024-01-05").status_code == 201

    def test_search_lists_free_rooms(self, client):
        _create(client)
        response = client.get(
            "/api/v1/rooms/availability",
            params={"check_in": "2024-01-01", "check_out": "2024-01-02"},
            headers=headers_for(CUSTOMER),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["booked_room_ids"] == [ROOM_X.id]
        assert [room["id"] for room in body["available_rooms"]] == [ROOM_Y.id]

    def test_inverted_availability_query_is_never_available(self, client):
        assert not _room_available(client, ROOM_X.id, "2024-01-03", "2024-01-01")


class TestServicesAndBalance:
    def test_services_then_partial_and_full_payment(self, client):
        booking = _create(client).json()
        usage = client.post(
            f"{BOOKINGS}/{booking['id']}/services",
            json={"service_id": LAUNDRY.id, "quantity": 3},
            headers=headers_for(CUSTOMER),
        )
        assert usage.status_code == 201
        assert Decimal(str(usage.json()["amount"])) == Decimal("150.00")

        invoice = client.get(f"{BOOKINGS}/{booking['id']}/invoice", headers=headers_for(CUSTOMER)).json()
        assert Decimal(str(invoice["totals"]["total"])) == Decimal("350.00")

        first = client.post(
            f"{BOOKINGS}/{booking['id']}/payments",
            json={"amount": "200.00", "method": "cash"},
            headers=headers_for(CUSTOMER),
        )
        assert first.status_code == 201
        assert Decimal(str(first.json()["summary"]["balance_due"])) == Decimal("150.00")
        assert first.json()["summary"]["is_fully_paid"] is False

        second = client.post(
            f"{BOOKINGS}/{booking['id']}/payments",
            json={"amount": "150.00", "method": "bkash"},
            headers=headers_for(CUSTOMER),
        )
        assert second.status_code == 201
        assert second.json()["summary"]["is_fully_paid"] is True
        assert second.json()["payment"]["invoice_number"] == first.json()["payment"]["invoice_number"]

    def test_overpayment_is_rejected_and_nothing_is_recorded(self, client):
        booking = _create(client).json()
        client.post(
            f"{BOOKINGS}/{booking['id']}/services",
            json={"service_id": LAUNDRY.id, "quantity": 3},
            headers=headers_for(CUSTOMER),
        )

        response = client.post(
            f"{BOOKINGS}/{booking['id']}/payments",
            json={"amount": "500.00", "method": "cash"},
            headers=headers_for(CUSTOMER),
        )
        assert response.status_code == 409
        assert response.json()["code"] == "PAYMENT_EXCEEDS_BALANCE"

        history = client.get(f"{BOOKINGS}/{booking['id']}/payments", headers=headers_for(CUSTOMER)).json()
        assert history["payments"] == []
        assert Decimal(str(history["summary"]["balance_due"])) == Decimal("350.00")

    def test_remove_service_usage(self, client):
        booking = _create(client).json()
        usage = client.post(
            f"{BOOKINGS}/{booking['id']}/services",
            json={"service_id": LAUNDRY.id},
            headers=headers_for(CUSTOMER),
        ).json()

        deleted = client.delete(f"{BOOKINGS}/{booking['id']}/services/{usage['id']}", headers=headers_for(CUSTOMER))
        assert deleted.status_code == 204
        listed = client.get(f"{BOOKINGS}/{booking['id']}/services", headers=headers_for(CUSTOMER))
        assert listed.json() == []

    def test_paid_service_usage_cannot_be_removed(self, client):
        booking = _create(client).json()
        usage = client.post(
            f"{BOOKINGS}/{booking['id']}/services",
            json={"service_id": LAUNDRY.id, "quantity": 3},
            headers=headers_for(CUSTOMER),
        ).json()
        client.post(
            f"{BOOKINGS}/{booking['id']}/payments",
            json={"amount": "350.00", "method": "cash"},
            headers=headers_for(CUSTOMER),
        )

        deleted = client.delete(f"{BOOKINGS}/{booking['id']}/services/{usage['id']}", headers=headers_for(CUSTOMER))
        assert deleted.status_code == 409
        assert deleted.json()["code"] == "TOTAL_BELOW_PAYMENTS"


class TestStayLifecycle:
    def test_check_in_window_and_room_release(self, client, clock):
        booking = _create(client, actor=STAFF, holder_id=CUSTOMER.user_id).json()
        url = f"{BOOKINGS}/{booking['id']}"

        clock.set_today(date(2023, 12, 30))
        too_early = client.post(f"{url}/check-in", headers=headers_for(STAFF))
        assert too_early.status_code == 409
        assert too_early.json()["code"] == "CHECK_IN_WINDOW"

        clock.set_today(date(2023, 12, 31))
        checked_in = client.post(f"{url}/check-in", headers=headers_for(STAFF))
        assert checked_in.status_code == 200
        assert checked_in.json()["status"] == "CHECKED_IN"

        clock.set_today(date(2024, 1, 3))
        checked_out = client.post(f"{url}/check-out", headers=headers_for(STAFF))
        assert checked_out.status_code == 200
        assert checked_out.json()["status"] == "CHECKED_OUT"

        assert _room_available(client, ROOM_X.id, "2024-01-03", "2024-01-05")
        assert _room_available(client, ROOM_X.id, "2024-01-01", "2024-01-03")

    def test_customer_cannot_approve_or_check_in(self, client):
        booking = _create(client).json()
        approve = client.post(f"{BOOKINGS}/{booking['id']}/approve", headers=headers_for(CUSTOMER))
        assert approve.status_code == 403
        assert approve.json()["code"] == "FORBIDDEN"

    def test_staff_approves_then_edits(self, client):
        booking = _create(client).json()
        approved = client.post(f"{BOOKINGS}/{booking['id']}/approve", headers=headers_for(STAFF))
        assert approved.json()["status"] == "APPROVED"

        edited = client.patch(
            f"{BOOKINGS}/{booking['id']}",
            json={"room_id": ROOM_Y.id, "check_out": "2024-01-04"},
            headers=headers_for(CUSTOMER),
        )
        assert edited.status_code == 200
        body = edited.json()
        assert body["nights"] == 3
        assert Decimal(str(body["room_charge"])) == Decimal("450.00")

    def test_invalid_transition_is_409(self, client):
        booking = _create(client).json()
        response = client.post(f"{BOOKINGS}/{booking['id']}/check-out", headers=headers_for(STAFF))
        assert response.status_code == 409
        assert response.json()["code"] == "INVALID_RESERVATION_STATUS"

    def test_other_customer_cannot_see_booking(self, client):
        booking = _create(client).json()
        response = client.get(f"{BOOKINGS}/{booking['id']}", headers=headers_for(OTHER_CUSTOMER))
        assert response.status_code == 403

    def test_list_filters_by_status(self, client):
        _create(client)
        _create(client, actor=STAFF, room_id=ROOM_Y.id, holder_id=CUSTOMER.user_id)
        response = client.get(BOOKINGS, params={"status": "APPROVED"}, headers=headers_for(STAFF))
        assert [b["room_id"] for b in response.json()] == [ROOM_Y.id]
