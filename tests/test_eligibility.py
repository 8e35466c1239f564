# tests/test_eligibility.py
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from campus_placement.models.application import ApplicationStatus
from campus_placement.models.job import JobStatus
from campus_placement.models.student import PlacementStatus
from campus_placement.services.eligibility import ReasonCode, can_apply

NOW = datetime(2026, 3, 1, 12, 0, 0)


def make_student(**overrides):
    values = dict(
        is_verified=True,
        placement_status=PlacementStatus.NOT_PLACED,
        cgpa=8.2,
        course="B.Tech",
        backlogs=0,
        year_of_completion=2026,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def make_job(**overrides):
    values = dict(
        status=JobStatus.APPROVED,
        is_active=True,
        application_deadline=NOW + timedelta(days=7),
        min_cgpa=None,
        allowed_courses=[],
        max_backlogs=None,
        allowed_years=[],
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def test_eligible_student_has_no_reasons():
    result = can_apply(make_student(), make_job(), now=NOW)
    assert result.eligible
    assert result.reasons == []
    assert result.to_dict() == {"eligible": True, "reasons": []}


def test_unverified_student_is_blocked():
    result = can_apply(make_student(is_verified=False), make_job(), now=NOW)
    assert not result.eligible
    assert result.codes == [ReasonCode.UNVERIFIED]


def test_all_failures_are_reported_together():
    student = make_student(is_verified=False, cgpa=6.0, course="BCA", backlogs=3, year_of_completion=2024)
    job = make_job(
        status=JobStatus.PENDING,
        is_active=False,
        application_deadline=NOW - timedelta(hours=1),
        min_cgpa=7.0,
        allowed_courses=["B.Tech", "M.Tech"],
        max_backlogs=1,
        allowed_years=[2025, 2026],
    )
    result = can_apply(student, job, now=NOW)

    assert set(result.codes) == {
        ReasonCode.UNVERIFIED,
        ReasonCode.JOB_NOT_APPROVED,
        ReasonCode.JOB_INACTIVE,
        ReasonCode.DEADLINE_PASSED,
        ReasonCode.CGPA_TOO_LOW,
        ReasonCode.COURSE_NOT_ELIGIBLE,
        ReasonCode.TOO_MANY_BACKLOGS,
        ReasonCode.YEAR_NOT_ELIGIBLE,
    }


def test_deadline_equal_to_now_is_closed():
    result = can_apply(make_student(), make_job(application_deadline=NOW), now=NOW)
    assert result.has(ReasonCode.DEADLINE_PASSED)


def test_aware_deadline_is_compared_in_utc():
    # 17:30 in UTC+5:30 is 12:00 UTC, so the job closes exactly at NOW
    ist = timezone(timedelta(hours=5, minutes=30))
    deadline = datetime(2026, 3, 1, 17, 30, tzinfo=ist)
    result = can_apply(make_student(), make_job(application_deadline=deadline), now=NOW)
    assert result.has(ReasonCode.DEADLINE_PASSED)

    later = datetime(2026, 3, 1, 17, 31, tzinfo=ist)
    assert can_apply(make_student(), make_job(application_deadline=later), now=NOW).eligible


def test_existing_application_blocks_unless_withdrawn():
    application = SimpleNamespace(id=uuid.uuid4(), status=ApplicationStatus.SHORTLISTED)
    result = can_apply(make_student(), make_job(), application, now=NOW)
    assert result.codes == [ReasonCode.ALREADY_APPLIED]
    assert result.reasons[0].details["application_id"] == str(application.id)

    withdrawn = SimpleNamespace(id=uuid.uuid4(), status=ApplicationStatus.WITHDRAWN)
    assert can_apply(make_student(), make_job(), withdrawn, now=NOW).eligible


def test_placed_student_cannot_apply():
    result = can_apply(make_student(placement_status=PlacementStatus.PLACED), make_job(), now=NOW)
    assert result.codes == [ReasonCode.ALREADY_PLACED]


def test_missing_cgpa_fails_a_cgpa_requirement():
    result = can_apply(make_student(cgpa=None), make_job(min_cgpa=6.0), now=NOW)
    assert result.codes == [ReasonCode.CGPA_TOO_LOW]


def test_cgpa_equal_to_minimum_passes():
    assert can_apply(make_student(cgpa=7.0), make_job(min_cgpa=7.0), now=NOW).eligible


def test_backlogs_at_limit_pass_and_missing_count_as_zero():
    assert can_apply(make_student(backlogs=2), make_job(max_backlogs=2), now=NOW).eligible
    assert can_apply(make_student(backlogs=None), make_job(max_backlogs=0), now=NOW).eligible


def test_empty_course_and_year_lists_mean_unrestricted():
    student = make_student(course="Anything", year_of_completion=1999)
    assert can_apply(student, make_job(allowed_courses=[], allowed_years=None), now=NOW).eligible


def test_reason_details_explain_the_failure():
    result = can_apply(make_student(cgpa=6.5), make_job(min_cgpa=7.5), now=NOW)
    reason = result.to_dict()["reasons"][0]
    assert reason["code"] == "CgpaTooLow"
    assert reason["details"] == {"required": 7.5, "actual": 6.5}
