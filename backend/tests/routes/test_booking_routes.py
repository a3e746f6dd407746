"""End-to-end booking flow through the v1 API."""

from datetime import datetime, time, timedelta

from fastapi import status

from tutorbook.models import SessionStatus

STUDENT = {"X-User-Id": "01JSTUDENT0000000000000001"}
OTHER_STUDENT = {"X-User-Id": "01JSTUDENT0000000000000002"}


def _booking_payload(tutor_id, subject_id, on_date, **overrides):
    payload = {
        "tutorId": tutor_id,
        "date": on_date.isoformat(),
        "startTime": "09:00",
        "durationMinutes": 90,
        "subjectId": subject_id,
    }
    payload.update(overrides)
    return payload


class TestAvailabilityEndpoint:
    def test_lists_windows(self, client, monday_morning_tutor, upcoming_monday):
        response = client.get(
            f"/api/v1/tutors/{monday_morning_tutor.id}/availability",
            params={"date": upcoming_monday.isoformat(), "duration": 60},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == [{"startTime": "09:00", "endTime": "10:00"}]

    def test_default_duration_is_an_hour(self, client, monday_morning_tutor, upcoming_monday):
        response = client.get(
            f"/api/v1/tutors/{monday_morning_tutor.id}/availability",
            params={"date": upcoming_monday.isoformat()},
        )

        assert response.json()[0]["endTime"] == "10:00"

    def test_booked_window_disappears(
        self, client, monday_morning_tutor, upcoming_monday, make_session
    ):
        make_session(datetime.combine(upcoming_monday, time(11, 0)), minutes=30)

        response = client.get(
            f"/api/v1/tutors/{monday_morning_tutor.id}/availability",
            params={"date": upcoming_monday.isoformat()},
        )

        assert response.json() == []

    def test_unknown_tutor_is_404_problem(self, client, upcoming_monday):
        response = client.get(
            "/api/v1/tutors/missing/availability", params={"date": upcoming_monday.isoformat()}
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.headers["content-type"].startswith("application/problem+json")
        body = response.json()
        assert body["code"] == "TUTOR_NOT_FOUND"
        assert body["status"] == 404
        assert body["instance"] == "/api/v1/tutors/missing/availability"

    def test_zero_duration_is_400(self, client, monday_morning_tutor, upcoming_monday):
        response = client.get(
            f"/api/v1/tutors/{monday_morning_tutor.id}/availability",
            params={"date": upcoming_monday.isoformat(), "duration": 0},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["code"] == "INVALID_DURATION"

    def test_missing_date_is_422(self, client, monday_morning_tutor):
        response = client.get(f"/api/v1/tutors/{monday_morning_tutor.id}/availability")

        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"


class TestCreateBooking:
    def test_creates_priced_session(self, client, monday_morning_tutor, subject, upcoming_monday):
        response = client.post(
            "/api/v1/bookings",
            json=_booking_payload(monday_morning_tutor.id, subject.id, upcoming_monday),
            headers=STUDENT,
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["price"] == 37.5
        assert body["session"]["status"] == "booked"
        assert body["session"]["studentId"] == STUDENT["X-User-Id"]
        assert body["session"]["startAt"] == f"{upcoming_monday.isoformat()}T09:00:00"
        assert body["session"]["endAt"] == f"{upcoming_monday.isoformat()}T10:30:00"

    def test_second_booking_is_conflict(self, client, monday_morning_tutor, subject, upcoming_monday):
        payload = _booking_payload(monday_morning_tutor.id, subject.id, upcoming_monday)
        first = client.post("/api/v1/bookings", json=payload, headers=STUDENT)
        assert first.status_code == status.HTTP_201_CREATED

        second = client.post("/api/v1/bookings", json=payload, headers=OTHER_STUDENT)

        assert second.status_code == status.HTTP_409_CONFLICT
        assert second.json()["code"] == "SLOT_UNAVAILABLE"

    def test_requires_caller_identity(self, client, monday_morning_tutor, subject, upcoming_monday):
        response = client.post(
            "/api/v1/bookings",
            json=_booking_payload(monday_morning_tutor.id, subject.id, upcoming_monday),
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["code"] == "NOT_AUTHENTICATED"

    def test_past_date_is_422(self, client, monday_morning_tutor, subject, upcoming_monday):
        response = client.post(
            "/api/v1/bookings",
            json=_booking_payload(
                monday_morning_tutor.id, subject.id, upcoming_monday - timedelta(days=14)
            ),
            headers=STUDENT,
        )

        assert response.status_code == 422
        assert response.json()["code"] == "OUT_OF_RANGE_DATE"

    def test_missing_subject_is_400(self, client, monday_morning_tutor, upcoming_monday):
        payload = _booking_payload(monday_morning_tutor.id, None, upcoming_monday)
        del payload["subjectId"]

        response = client.post("/api/v1/bookings", json=payload, headers=STUDENT)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["code"] == "INVALID_SUBJECT"

    def test_unknown_field_is_422(self, client, monday_morning_tutor, subject, upcoming_monday):
        payload = _booking_payload(
            monday_morning_tutor.id, subject.id, upcoming_monday, windowId="client-window"
        )

        response = client.post("/api/v1/bookings", json=payload, headers=STUDENT)

        assert response.status_code == 422

    def test_cancel_then_rebook(self, client, monday_morning_tutor, subject, upcoming_monday):
        payload = _booking_payload(monday_morning_tutor.id, subject.id, upcoming_monday)
        session_id = client.post("/api/v1/bookings", json=payload, headers=STUDENT).json()[
            "session"
        ]["id"]

        cancel = client.post(f"/api/v1/sessions/{session_id}/cancel", headers=STUDENT)
        assert cancel.status_code == status.HTTP_200_OK
        assert cancel.json()["status"] == SessionStatus.CANCELED.value

        again = client.post("/api/v1/bookings", json=payload, headers=OTHER_STUDENT)
        assert again.status_code == status.HTTP_201_CREATED
