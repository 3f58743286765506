"""Integration tests for the booking lifecycle.

Run with: pytest tests/test_bookings.py -v
"""

import pytest


class TestCreateBooking:
    """Tests for POST /api/bookings"""

    def test_create_booking_is_pending(self, client, booking_payload):
        """Given a valid payload, returns 201 with status pending."""
        response = client.post("/api/bookings", json=booking_payload)

        assert response.status_code == 201
        booking = response.get_json()["booking"]
        assert booking["status"] == "pending"
        assert booking["id"]
        assert booking["created_at"] and booking["updated_at"]

    def test_client_status_is_ignored(self, create_booking):
        booking = create_booking(status="confirmed")
        assert booking["status"] == "pending"

    def test_unknown_venue_returns_404_and_inserts_nothing(self, client, booking_payload, auth_headers):
        response = client.post("/api/bookings", json={**booking_payload, "venue_id": 9999})

        assert response.status_code == 404
        assert response.get_json()["error"] == "Venue with id '9999' not found"
        listing = client.get("/api/bookings", headers=auth_headers).get_json()
        assert listing["total"] == 0

    def test_non_numeric_venue_id_is_not_found(self, client, booking_payload):
        response = client.post("/api/bookings", json={**booking_payload, "venue_id": "v1"})
        assert response.status_code == 404

    @pytest.mark.parametrize("venue_id", ["\u00b2", 10**30, "9" * 30])
    def test_unstorable_venue_id_is_not_found(self, client, booking_payload, venue_id):
        """Given a venue id no row could have, returns 404 rather than a server error."""
        response = client.post("/api/bookings", json={**booking_payload, "venue_id": venue_id})
        assert response.status_code == 404

    def test_unknown_table_type_returns_404(self, client, booking_payload):
        response = client.post("/api/bookings", json={**booking_payload, "table_type_id": 42})
        assert response.status_code == 404
        assert "Table type" in response.get_json()["error"]

    def test_table_type_is_optional(self, create_booking, table_type_id):
        assert create_booking()["table_type_id"] is None
        assert create_booking(table_type_id=table_type_id)["table_type_id"] == table_type_id

    @pytest.mark.parametrize("field", ["venue_id", "full_name", "email", "date", "time"])
    def test_missing_required_field(self, client, booking_payload, field):
        payload = {key: value for key, value in booking_payload.items() if key != field}
        response = client.post("/api/bookings", json=payload)

        assert response.status_code == 400
        assert response.get_json()["details"] == {"missing_fields": [field]}

    @pytest.mark.parametrize("overrides, message", [
        ({"email": "not-an-email"}, "Invalid email format"),
        ({"date": "15/03/2024"}, "Invalid date format. Expected YYYY-MM-DD"),
        ({"time": "25:00"}, "Invalid time format. Expected HH:MM (24-hour format)"),
        ({"guests": 0}, "guests must be a positive whole number"),
        ({"date": "2024-03-15\n"}, "Invalid date format. Expected YYYY-MM-DD"),
        ({"time": "18:30\n"}, "Invalid time format. Expected HH:MM (24-hour format)"),
        ({"email": "a@b.com\n"}, "Invalid email format"),
        ({"guests": 10**30}, "guests must be a positive whole number"),
    ])
    def test_malformed_fields(self, client, booking_payload, overrides, message):
        response = client.post("/api/bookings", json={**booking_payload, **overrides})
        assert response.status_code == 400
        assert response.get_json()["error"] == message


class TestListBookings:
    """Tests for GET /api/bookings and /api/bookings/status/{status}"""

    def test_filters_are_anded(self, client, auth_headers, create_booking):
        create_booking(date="2024-03-15")
        create_booking(date="2024-03-16")
        target = create_booking(date="2024-03-16")
        client.patch(f"/api/bookings/{target['id']}/status", json={"status": "confirmed"}, headers=auth_headers)

        response = client.get("/api/bookings?status=confirmed&date=2024-03-16", headers=auth_headers)

        body = response.get_json()
        assert body["total"] == 1
        assert body["bookings"][0]["id"] == target["id"]

    def test_newest_first_with_venue_projection(self, client, auth_headers, create_booking):
        first = create_booking()
        second = create_booking()

        bookings = client.get("/api/bookings", headers=auth_headers).get_json()["bookings"]

        assert [b["id"] for b in bookings] == [second["id"], first["id"]]
        assert bookings[0]["venue_name"] == "Harbour Room"
        assert bookings[0]["venue_location"] == "Pier 4"

    def test_invalid_status_filter(self, client, auth_headers):
        response = client.get("/api/bookings?status=bogus", headers=auth_headers)
        assert response.status_code == 400

    def test_by_status_rejects_unknown_status(self, client, auth_headers):
        """GET /status/bogus is an error, not an empty list."""
        response = client.get("/api/bookings/status/bogus", headers=auth_headers)

        assert response.status_code == 400
        body = response.get_json()
        assert "pending, confirmed, cancelled" in body["error"]
        assert "bookings" not in body

    def test_by_status_orders_by_date_and_time(self, client, auth_headers, create_booking):
        early = create_booking(date="2024-03-15", time="12:00")
        late = create_booking(date="2024-03-15", time="19:00")
        later_day = create_booking(date="2024-04-01", time="08:00")

        body = client.get("/api/bookings/status/pending", headers=auth_headers).get_json()

        assert body["status"] == "pending"
        assert body["count"] == 3
        assert [b["id"] for b in body["bookings"]] == [later_day["id"], late["id"], early["id"]]


class TestGetBooking:
    """Tests for GET /api/bookings/{id} and /api/bookings/customer/{email}"""

    def test_get_by_id_includes_table_type(self, client, auth_headers, create_booking, table_type_id):
        booking = create_booking(table_type_id=table_type_id)

        body = client.get(f"/api/bookings/{booking['id']}", headers=auth_headers).get_json()

        assert body["booking"]["table_type_name"] == "Booth"
        assert body["booking"]["table_price"] == "25.50"

    def test_get_missing_booking(self, client, auth_headers):
        response = client.get("/api/bookings/12345", headers=auth_headers)
        assert response.status_code == 404
        assert response.get_json()["error"] == "Booking not found"

    def test_get_out_of_range_id(self, client, auth_headers):
        response = client.get(f"/api/bookings/{'9' * 30}", headers=auth_headers)
        assert response.status_code == 404
        assert response.get_json()["error"] == "Booking not found"

    def test_customer_view_is_public(self, client, create_booking):
        mine = create_booking(email="me@example.com")
        create_booking(email="someone@example.com")

        body = client.get("/api/bookings/customer/me@example.com").get_json()

        assert body["total"] == 1
        assert body["bookings"][0]["id"] == mine["id"]

    def test_customer_view_unknown_email(self, client):
        body = client.get("/api/bookings/customer/nobody@example.com").get_json()
        assert body == {"bookings": [], "total": 0}


class TestUpdateStatus:
    """Tests for PATCH /api/bookings/{id}/status"""

    @pytest.mark.parametrize("path", [
        ["confirmed"],
        ["cancelled", "pending"],
        ["confirmed", "confirmed", "cancelled"],
    ])
    def test_transitions_round_trip(self, client, auth_headers, create_booking, path):
        booking = create_booking()
        previous = "pending"
        for status in path:
            response = client.patch(
                f"/api/bookings/{booking['id']}/status", json={"status": status}, headers=auth_headers
            )
            body = response.get_json()
            assert response.status_code == 200
            assert body["previous_status"] == previous
            assert body["new_status"] == status

            stored = client.get(f"/api/bookings/{booking['id']}", headers=auth_headers).get_json()
            assert stored["booking"]["status"] == status
            previous = status

    def test_invalid_status(self, client, auth_headers, create_booking):
        booking = create_booking()
        response = client.patch(
            f"/api/bookings/{booking['id']}/status", json={"status": "done"}, headers=auth_headers
        )
        assert response.status_code == 400

    def test_missing_booking(self, client, auth_headers):
        response = client.patch("/api/bookings/777/status", json={"status": "confirmed"}, headers=auth_headers)
        assert response.status_code == 404

    def test_requires_admin(self, client, create_booking):
        booking = create_booking()
        response = client.patch(f"/api/bookings/{booking['id']}/status", json={"status": "confirmed"})
        assert response.status_code == 401


class TestReplaceBooking:
    """Tests for PUT /api/bookings/{id}"""

    def test_replace_overwrites_fields_and_defaults_status(self, client, auth_headers, create_booking, booking_payload):
        booking = create_booking()
        client.patch(f"/api/bookings/{booking['id']}/status", json={"status": "confirmed"}, headers=auth_headers)

        response = client.put(
            f"/api/bookings/{booking['id']}",
            json={**booking_payload, "full_name": "B", "guests": 6},
            headers=auth_headers,
        )

        body = response.get_json()["booking"]
        assert response.status_code == 200
        assert body["full_name"] == "B"
        assert body["guests"] == 6
        assert body["status"] == "pending"

    def test_replace_missing_booking(self, client, auth_headers, booking_payload):
        response = client.put("/api/bookings/404", json=booking_payload, headers=auth_headers)
        assert response.status_code == 404

    def test_replace_with_bad_status(self, client, auth_headers, create_booking, booking_payload):
        booking = create_booking()
        response = client.put(
            f"/api/bookings/{booking['id']}", json={**booking_payload, "status": "done"}, headers=auth_headers
        )
        assert response.status_code == 400


class TestCustomerCancel:
    """Tests for PATCH /api/bookings/cancel/{id}"""

    def test_cancel_then_cancel_again(self, client, booking_payload):
        """Create, cancel, then a repeated cancel is rejected as a domain error."""
        created = client.post("/api/bookings", json=booking_payload)
        assert created.status_code == 201
        booking = created.get_json()["booking"]
        assert booking["status"] == "pending"

        first = client.patch(f"/api/bookings/cancel/{booking['id']}", json={"email": "a@b.com"})
        assert first.status_code == 200
        assert first.get_json()["booking"]["status"] == "cancelled"

        second = client.patch(f"/api/bookings/cancel/{booking['id']}", json={"email": "a@b.com"})
        assert second.status_code == 400
        assert second.get_json()["error"] == "Booking is already cancelled"

    def test_cancel_confirmed_booking(self, client, auth_headers, create_booking):
        booking = create_booking()
        client.patch(f"/api/bookings/{booking['id']}/status", json={"status": "confirmed"}, headers=auth_headers)

        response = client.patch(f"/api/bookings/cancel/{booking['id']}", json={"email": "a@b.com"})
        assert response.get_json()["booking"]["status"] == "cancelled"

    def test_wrong_email_matches_missing_id(self, client, create_booking):
        booking = create_booking()
        wrong_email = client.patch(f"/api/bookings/cancel/{booking['id']}", json={"email": "x@y.com"})
        wrong_id = client.patch("/api/bookings/cancel/99999", json={"email": "a@b.com"})

        assert wrong_email.status_code == wrong_id.status_code == 404
        assert wrong_email.get_json() == wrong_id.get_json()

    def test_out_of_range_id_is_not_found(self, client, create_booking):
        create_booking()
        response = client.patch(f"/api/bookings/cancel/{'9' * 30}", json={"email": "a@b.com"})
        assert response.status_code == 404
        assert response.get_json()["error"] == "Booking not found or email does not match"

    def test_email_required(self, client, create_booking):
        booking = create_booking()
        response = client.patch(f"/api/bookings/cancel/{booking['id']}", json={})
        assert response.status_code == 400
        assert response.get_json()["error"] == "Email is required to cancel booking"


class TestDeleteAndStatistics:
    """Tests for DELETE /api/bookings/{id} and GET /api/bookings/stats/summary"""

    def test_delete_returns_deleted_booking(self, client, auth_headers, create_booking):
        booking = create_booking()

        response = client.delete(f"/api/bookings/{booking['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json()["deleted_booking"]["id"] == booking["id"]
        assert client.get(f"/api/bookings/{booking['id']}", headers=auth_headers).status_code == 404

    def test_delete_missing_booking(self, client, auth_headers):
        assert client.delete("/api/bookings/31337", headers=auth_headers).status_code == 404

    def test_statistics_sum_to_total(self, client, auth_headers, create_booking):
        bookings = [create_booking() for _ in range(5)]
        client.patch(f"/api/bookings/{bookings[0]['id']}/status", json={"status": "confirmed"}, headers=auth_headers)
        client.patch(f"/api/bookings/{bookings[1]['id']}/status", json={"status": "confirmed"}, headers=auth_headers)
        client.patch(f"/api/bookings/cancel/{bookings[2]['id']}", json={"email": "a@b.com"})

        stats = client.get("/api/bookings/stats/summary", headers=auth_headers).get_json()["statistics"]

        assert stats == {
            "pending_count": 2,
            "confirmed_count": 2,
            "cancelled_count": 1,
            "total_bookings": 5,
        }

    def test_statistics_empty(self, client, auth_headers):
        stats = client.get("/api/bookings/stats/summary", headers=auth_headers).get_json()["statistics"]
        assert stats["total_bookings"] == 0
        assert stats["pending_count"] + stats["confirmed_count"] + stats["cancelled_count"] == 0
