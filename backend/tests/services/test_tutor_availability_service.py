from datetime import time
from types import SimpleNamespace

import pytest

from tutorbook.core.exceptions import ForbiddenException, TutorNotFound, ValidationException
from tutorbook.services.tutor_availability_service import TutorAvailabilityService


def _rule(day="Mon", start=time(9, 0), end=time(12, 0), is_active=True):
    return SimpleNamespace(day_of_week=day, start_time=start, end_time=end, is_active=is_active)


@pytest.fixture
def service(db):
    return TutorAvailabilityService(db)


def test_get_rules(service, tutor, make_rule):
    make_rule("Mon")
    make_rule("Thu", time(15, 0), time(18, 0), is_active=False)

    rules = service.get_rules(tutor.id)

    assert {r.day_of_week for r in rules} == {"Mon", "Thu"}


def test_get_rules_unknown_tutor(service):
    with pytest.raises(TutorNotFound):
        service.get_rules("missing")


def test_replace_rules(service, tutor, make_rule):
    make_rule("Mon")

    stored = service.replace_rules(
        tutor.id, [_rule("Tue", time(8, 0), time(9, 30)), _rule("Sat")], tutor.id
    )

    assert sorted(r.day_of_week for r in stored) == ["Sat", "Tue"]
    assert {r.day_of_week for r in service.get_rules(tutor.id)} == {"Sat", "Tue"}


def test_replace_with_empty_list_clears_rules(service, tutor, make_rule):
    make_rule("Mon")

    assert service.replace_rules(tutor.id, [], tutor.id) == []
    assert service.get_rules(tutor.id) == []


def test_replace_rules_truncates_seconds(service, tutor):
    stored = service.replace_rules(tutor.id, [_rule(start=time(9, 0, 45))], tutor.id)

    assert stored[0].start_time == time(9, 0)


def test_only_the_tutor_can_replace(service, tutor):
    with pytest.raises(ForbiddenException):
        service.replace_rules(tutor.id, [_rule()], "someone-else")


def test_rule_with_start_after_end_is_rejected(service, tutor, make_rule):
    make_rule("Mon")

    with pytest.raises(ValidationException) as exc_info:
        service.replace_rules(tutor.id, [_rule(start=time(12, 0), end=time(9, 0))], tutor.id)

    assert exc_info.value.code == "INVALID_AVAILABILITY_RULE"
    assert len(service.get_rules(tutor.id)) == 1


def test_unknown_day_label_is_rejected(service, tutor):
    with pytest.raises(ValidationException):
        service.replace_rules(tutor.id, [_rule(day="Monday")], tutor.id)
