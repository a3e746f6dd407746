from datetime import date, datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError

from tutorbook.core.exceptions import ConflictException
from tutorbook.models import NO_OVERLAP_CONSTRAINT, SessionStatus, TutoringSession
from tutorbook.repositories import RepositoryFactory
from tutorbook.repositories.session_repository import is_overlap_violation

MONDAY_9 = datetime(2026, 10, 26, 9, 0)


@pytest.fixture
def repo(db):
    return RepositoryFactory.create_session_repository(db)


def _new_session(tutor, subject, start_at, minutes=60, status=SessionStatus.BOOKED):
    return TutoringSession(
        tutor_id=tutor.id,
        student_id="student-1",
        subject_id=subject.id,
        start_at=start_at,
        end_at=start_at + timedelta(minutes=minutes),
        status=status.value,
        price=Decimal("25.00"),
    )


class TestReads:
    def test_get_sessions_includes_every_status_ordered(self, repo, tutor, make_session):
        later = make_session(MONDAY_9 + timedelta(hours=3), status=SessionStatus.CANCELED)
        earlier = make_session(MONDAY_9, status=SessionStatus.COMPLETED)

        sessions = repo.get_sessions(tutor.id)

        assert [s.id for s in sessions] == [earlier.id, later.id]

    def test_get_sessions_on_date_only_returns_that_day(self, repo, tutor, make_session):
        same_day = make_session(MONDAY_9)
        make_session(MONDAY_9 + timedelta(days=1))
        make_session(MONDAY_9 - timedelta(days=1))

        sessions = repo.get_sessions_on_date(tutor.id, date(2026, 10, 26))

        assert [s.id for s in sessions] == [same_day.id]

    def test_get_sessions_on_date_includes_session_from_previous_evening(
        self, repo, tutor, make_session
    ):
        overnight = make_session(datetime(2026, 10, 25, 23, 30), minutes=60)

        sessions = repo.get_sessions_on_date(tutor.id, date(2026, 10, 26))

        assert [s.id for s in sessions] == [overnight.id]

    def test_find_overlapping_ignores_canceled(self, repo, tutor, make_session):
        make_session(MONDAY_9, status=SessionStatus.CANCELED)
        booked = make_session(MONDAY_9 + timedelta(minutes=30))

        found = repo.find_overlapping(tutor.id, MONDAY_9, MONDAY_9 + timedelta(hours=1))

        assert [s.id for s in found] == [booked.id]

    def test_find_overlapping_half_open(self, repo, tutor, make_session):
        make_session(MONDAY_9, minutes=60)

        found = repo.find_overlapping(
            tutor.id, MONDAY_9 + timedelta(hours=1), MONDAY_9 + timedelta(hours=2)
        )

        assert found == []

    def test_list_for_tutor_newest_first_with_status_filter(self, repo, tutor, make_session):
        first = make_session(MONDAY_9)
        second = make_session(MONDAY_9 + timedelta(days=1))
        make_session(MONDAY_9 + timedelta(days=2), status=SessionStatus.CANCELED)

        booked = repo.list_for_tutor(tutor.id, status="booked")

        assert [s.id for s in booked] == [second.id, first.id]
        assert len(repo.list_for_tutor(tutor.id)) == 3


class TestInsertSession:
    def test_insert_assigns_id_without_commit(self, db, repo, tutor, subject):
        session = repo.insert_session(_new_session(tutor, subject, MONDAY_9))

        assert session.id
        db.rollback()
        assert repo.get_sessions(tutor.id) == []

    def test_overlap_is_rejected(self, repo, tutor, subject, make_session):
        existing = make_session(MONDAY_9)

        with pytest.raises(ConflictException) as exc_info:
            repo.insert_session(_new_session(tutor, subject, MONDAY_9 + timedelta(minutes=30)))

        assert exc_info.value.code == "SESSION_OVERLAP"
        assert exc_info.value.details["conflicting_session_ids"] == [existing.id]

    def test_adjacent_session_is_accepted(self, db, repo, tutor, subject, make_session):
        make_session(MONDAY_9)

        repo.insert_session(_new_session(tutor, subject, MONDAY_9 + timedelta(hours=1)))
        db.commit()

        assert len(repo.get_sessions(tutor.id)) == 2

    def test_canceled_session_does_not_conflict(self, db, repo, tutor, subject, make_session):
        make_session(MONDAY_9, status=SessionStatus.CANCELED)

        repo.insert_session(_new_session(tutor, subject, MONDAY_9))
        db.commit()

        assert len(repo.find_overlapping(tutor.id, MONDAY_9, MONDAY_9 + timedelta(hours=1))) == 1


class TestOverlapViolationDetection:
    def test_matches_constraint_name_from_diag(self):
        orig = SimpleNamespace(diag=SimpleNamespace(constraint_name=NO_OVERLAP_CONSTRAINT))
        assert is_overlap_violation(IntegrityError("INSERT", {}, orig))

    def test_other_constraint_is_not_an_overlap(self):
        orig = SimpleNamespace(diag=SimpleNamespace(constraint_name="ck_sessions_price_non_negative"))
        assert not is_overlap_violation(IntegrityError("INSERT", {}, orig))

    def test_falls_back_to_message_text(self):
        orig = Exception(f'conflicting key value violates exclusion constraint "{NO_OVERLAP_CONSTRAINT}"')
        assert is_overlap_violation(IntegrityError("INSERT", {}, orig))
