from datetime import datetime, time

import pytest

from tutorbook.core.exceptions import (
    ForbiddenException,
    InvalidSessionTransition,
    SessionNotFound,
)
from tutorbook.models import SessionStatus
from tutorbook.services.booking_service import BookingService
from tutorbook.services.session_lifecycle_service import SessionLifecycleService

STUDENT_ID = "01JSTUDENT0000000000000001"
STRANGER_ID = "01JSTRANGER000000000000001"
MONDAY_9 = datetime(2026, 10, 26, 9, 0)


@pytest.fixture
def service(db):
    return SessionLifecycleService(db)


@pytest.fixture
def booked(make_session):
    return make_session(MONDAY_9, student_id=STUDENT_ID)


class TestCancel:
    def test_student_can_cancel(self, service, booked):
        session = service.cancel(booked.id, STUDENT_ID)

        assert session.status == SessionStatus.CANCELED.value
        assert session.canceled_at is not None

    def test_tutor_can_cancel(self, service, booked, tutor):
        assert service.cancel(booked.id, tutor.id).status == "canceled"

    def test_stranger_cannot_cancel(self, service, booked):
        with pytest.raises(ForbiddenException):
            service.cancel(booked.id, STRANGER_ID)

    def test_cannot_cancel_twice(self, service, booked):
        service.cancel(booked.id, STUDENT_ID)

        with pytest.raises(InvalidSessionTransition) as exc_info:
            service.cancel(booked.id, STUDENT_ID)
        assert exc_info.value.details["current_status"] == "canceled"

    def test_unknown_session(self, service):
        with pytest.raises(SessionNotFound):
            service.cancel("missing", STUDENT_ID)

    def test_cancel_frees_availability(self, db, service, monday_morning_tutor, booked, today_provider):
        booking_service = BookingService(db, today_provider=today_provider)
        assert booking_service.get_available_windows(monday_morning_tutor.id, MONDAY_9.date(), 60) == []

        service.cancel(booked.id, STUDENT_ID)

        windows = booking_service.get_available_windows(monday_morning_tutor.id, MONDAY_9.date(), 60)
        assert [w.start_time for w in windows] == [time(9, 0)]


class TestTutorOnlyTransitions:
    def test_tutor_completes(self, service, booked, tutor):
        session = service.complete(booked.id, tutor.id)

        assert session.status == "completed"
        assert session.completed_at is not None

    def test_completion_notes_are_appended(self, db, service, booked, tutor):
        booked.notes = "Wants to focus on fractions"
        db.commit()

        session = service.complete(booked.id, tutor.id, notes="Covered fractions, set homework")

        assert session.notes == "Wants to focus on fractions\n\nCovered fractions, set homework"

    def test_completion_without_notes_leaves_notes_empty(self, service, booked, tutor):
        assert service.complete(booked.id, tutor.id).notes is None

    def test_student_cannot_complete(self, service, booked):
        with pytest.raises(ForbiddenException):
            service.complete(booked.id, STUDENT_ID)

    def test_tutor_marks_no_show(self, service, booked, tutor):
        assert service.mark_no_show(booked.id, tutor.id).status == "no_show"

    def test_completed_session_cannot_be_canceled(self, service, booked, tutor):
        service.complete(booked.id, tutor.id)

        with pytest.raises(InvalidSessionTransition):
            service.cancel(booked.id, STUDENT_ID)

    def test_no_show_still_blocks_availability(
        self, db, service, monday_morning_tutor, booked, today_provider
    ):
        service.mark_no_show(booked.id, monday_morning_tutor.id)

        booking_service = BookingService(db, today_provider=today_provider)
        assert booking_service.get_available_windows(monday_morning_tutor.id, MONDAY_9.date(), 60) == []


class TestListForTutor:
    def test_tutor_lists_own_sessions(self, service, tutor, make_session):
        make_session(MONDAY_9)
        make_session(MONDAY_9.replace(day=27), status=SessionStatus.CANCELED)

        assert len(service.list_for_tutor(tutor.id, tutor.id)) == 2
        assert len(service.list_for_tutor(tutor.id, tutor.id, status="canceled")) == 1

    def test_other_caller_is_forbidden(self, service, tutor):
        with pytest.raises(ForbiddenException):
            service.list_for_tutor(tutor.id, STUDENT_ID)
