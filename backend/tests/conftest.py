# backend/tests/conftest.py
"""
Shared fixtures.

Every test gets a fresh in-memory SQLite schema. Services commit, so the
schema is created and dropped per test instead of wrapping each test in a
rolled-back transaction.
"""

import os

# Must be set before tutorbook.core.config is imported
os.environ["IS_TESTING"] = "true"
os.environ["REDIS_URL"] = ""
os.environ.setdefault("PLATFORM_TIMEZONE", "UTC")

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Callable, Iterator, Optional

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tutorbook.api.dependencies.database import get_db
from tutorbook.core.calendar import platform_today, weekday_label
from tutorbook.database import Base, _enable_sqlite_foreign_keys
from tutorbook.main import app
from tutorbook.models import (
    AvailabilityRule,
    SessionStatus,
    Subject,
    Topic,
    TutoringSession,
    TutorProfile,
)

# Monday
TODAY = date(2026, 10, 19)

STUDENT_ID = "01JSTUDENT0000000000000001"


def next_date_for(label: str, today: date) -> date:
    """First date strictly after today that falls on the given Mon..Sun label."""
    candidate = today + timedelta(days=1)
    while weekday_label(candidate) != label:
        candidate += timedelta(days=1)
    return candidate


test_engine = create_engine(
    "sqlite+pysqlite:///:memory:",
    poolclass=StaticPool,
    connect_args={"check_same_thread": False},
)
event.listen(test_engine, "connect", _enable_sqlite_foreign_keys)
TestSessionLocal = sessionmaker(
    bind=test_engine, autocommit=False, autoflush=False, expire_on_commit=False
)


@pytest.fixture(scope="function")
def db() -> Iterator[Session]:
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db: Session) -> Iterator[TestClient]:
    """Create a test client bound to the test session."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


@pytest.fixture
def today_provider() -> Callable[[], date]:
    return lambda: TODAY


@pytest.fixture
def tutor(db: Session) -> TutorProfile:
    profile = TutorProfile(display_name="Grace Tutor", hourly_rate=Decimal("25.00"))
    db.add(profile)
    db.commit()
    return profile


@pytest.fixture
def unrated_tutor(db: Session) -> TutorProfile:
    profile = TutorProfile(display_name="New Tutor", hourly_rate=None)
    db.add(profile)
    db.commit()
    return profile


@pytest.fixture
def subject(db: Session) -> Subject:
    math = Subject(name="Mathematics")
    math.topics = [Topic(name="Algebra"), Topic(name="Geometry")]
    db.add(math)
    db.commit()
    return math


@pytest.fixture
def other_subject(db: Session) -> Subject:
    chem = Subject(name="Chemistry")
    chem.topics = [Topic(name="Stoichiometry")]
    db.add(chem)
    db.commit()
    return chem


@pytest.fixture
def make_rule(db: Session, tutor: TutorProfile) -> Callable[..., AvailabilityRule]:
    def _make(
        day_of_week: str = "Mon",
        start: time = time(9, 0),
        end: time = time(12, 0),
        is_active: bool = True,
        tutor_id: Optional[str] = None,
    ) -> AvailabilityRule:
        rule = AvailabilityRule(
            tutor_id=tutor_id or tutor.id,
            day_of_week=day_of_week,
            start_time=start,
            end_time=end,
            is_active=is_active,
        )
        db.add(rule)
        db.commit()
        return rule

    return _make


@pytest.fixture
def make_session(
    db: Session, tutor: TutorProfile, subject: Subject
) -> Callable[..., TutoringSession]:
    def _make(
        start_at: datetime,
        minutes: int = 60,
        status: SessionStatus = SessionStatus.BOOKED,
        student_id: str = STUDENT_ID,
        tutor_id: Optional[str] = None,
    ) -> TutoringSession:
        session = TutoringSession(
            tutor_id=tutor_id or tutor.id,
            student_id=student_id,
            subject_id=subject.id,
            start_at=start_at,
            end_at=start_at + timedelta(minutes=minutes),
            status=status.value,
            price=Decimal("25.00"),
        )
        db.add(session)
        db.commit()
        return session

    return _make


@pytest.fixture
def monday_morning_tutor(make_rule, tutor: TutorProfile) -> TutorProfile:
    """Tutor available Mondays 09:00-12:00."""
    make_rule("Mon", time(9, 0), time(12, 0))
    return tutor


@pytest.fixture
def upcoming_monday() -> date:
    """The next Monday after the real platform date, for tests that go through the API."""
    return next_date_for("Mon", platform_today())
