# tests/test_api.py
import uuid
from datetime import timedelta

from campus_placement.models import JobStatus
from campus_placement.utils.helpers import utcnow
from tests.conftest import auth_headers

RESUME = {"resume_filename": "asha_cv.pdf", "resume_mimetype": "application/pdf"}


def job_json(**overrides):
    body = {
        "title": "Platform Engineer",
        "description": "Kubernetes and Python",
        "company_name": "Acme Corp",
        "location": "Hyderabad",
        "ctc_min": 700000,
        "ctc_max": 1100000,
        "application_deadline": (utcnow() + timedelta(days=20)).isoformat(),
        "allowed_courses": ["B.Tech"],
    }
    body.update(overrides)
    return body


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


async def test_missing_token_is_rejected(client):
    resp = await client.get("/api/v1/jobs")
    assert resp.status_code in (401, 403)


async def test_invalid_token_is_unauthorized(client):
    resp = await client.get("/api/v1/jobs", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


async def test_job_review_flow(client, seed):
    college = await seed.college()
    recruiter = await seed.recruiter()
    tnp = await seed.tnp(college)
    student = await seed.student(college)

    created = await client.post("/api/v1/jobs", json=job_json(), headers=auth_headers(recruiter))
    assert created.status_code == 201
    job = created.json()
    assert job["status"] == "Pending"
    assert job["application_count"] == 0

    # Students do not see pending jobs
    listing = await client.get("/api/v1/jobs", headers=auth_headers(student))
    assert listing.json()["total"] == 0

    rejected = await client.post(
        f"/api/v1/jobs/{job['id']}/reject", json={"reason": "Add the bond terms"}, headers=auth_headers(tnp)
    )
    assert rejected.status_code == 200
    assert rejected.json()["status"] == "Rejected"

    edited = await client.patch(
        f"/api/v1/jobs/{job['id']}", json={"description": "Kubernetes, Python, no bond"}, headers=auth_headers(recruiter)
    )
    assert edited.status_code == 200
    assert edited.json()["status"] == "Pending"
    assert edited.json()["rejection_reason"] is None

    approved = await client.post(f"/api/v1/jobs/{job['id']}/approve", headers=auth_headers(tnp))
    assert approved.status_code == 200
    assert approved.json()["status"] == "Approved"

    listing = await client.get("/api/v1/jobs", headers=auth_headers(student))
    body = listing.json()
    assert body["total"] == 1
    assert body["items"][0]["eligibility"] == {"eligible": True, "reasons": []}


async def test_error_envelope_for_wrong_role(client, seed):
    college = await seed.college()
    student = await seed.student(college)

    resp = await client.post("/api/v1/jobs", json=job_json(), headers=auth_headers(student))

    assert resp.status_code == 403
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == "FORBIDDEN"
    assert body["error"]["details"]["kind"] == "role"
    assert "timestamp" in body["error"]


async def test_invalid_ctc_range_is_validation_error(client, seed):
    recruiter = await seed.recruiter()
    resp = await client.post(
        "/api/v1/jobs", json=job_json(ctc_min=900000, ctc_max=800000), headers=auth_headers(recruiter)
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_apply_is_idempotent_over_http(client, seed):
    college = await seed.college()
    recruiter = await seed.recruiter()
    student = await seed.student(college)
    job = await seed.job(recruiter)

    first = await client.post(f"/api/v1/jobs/{job.id}/apply", json=RESUME, headers=auth_headers(student))
    assert first.status_code == 201
    second = await client.post(f"/api/v1/jobs/{job.id}/apply", json=RESUME, headers=auth_headers(student))
    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]

    detail = await client.get(f"/api/v1/jobs/{job.id}", headers=auth_headers(recruiter))
    assert detail.json()["application_count"] == 1


async def test_ineligible_apply_lists_reasons(client, seed):
    college = await seed.college()
    recruiter = await seed.recruiter()
    student = await seed.student(college, verified=False, cgpa=6.0)
    job = await seed.job(recruiter, min_cgpa=7.0)

    eligibility = await client.get(f"/api/v1/jobs/{job.id}/eligibility", headers=auth_headers(student))
    assert eligibility.status_code == 200
    codes = {r["code"] for r in eligibility.json()["reasons"]}
    assert codes == {"Unverified", "CgpaTooLow"}

    resp = await client.post(f"/api/v1/jobs/{job.id}/apply", json=RESUME, headers=auth_headers(student))
    assert resp.status_code == 403
    assert {r["code"] for r in resp.json()["error"]["details"]["reasons"]} == codes


async def test_application_pipeline_over_http(client, seed):
    college = await seed.college()
    recruiter = await seed.recruiter()
    student = await seed.student(college)
    job = await seed.job(recruiter)

    applied = await client.post(f"/api/v1/jobs/{job.id}/apply", json=RESUME, headers=auth_headers(student))
    application_id = applied.json()["id"]

    shortlisted = await client.post(
        f"/api/v1/applications/{application_id}/advance",
        json={"status": "Shortlisted", "notes": "Good fit"},
        headers=auth_headers(recruiter),
    )
    assert shortlisted.status_code == 200
    assert shortlisted.json()["status"] == "Shortlisted"

    backwards = await client.post(
        f"/api/v1/applications/{application_id}/advance",
        json={"status": "Applied"},
        headers=auth_headers(recruiter),
    )
    assert backwards.status_code == 409
    assert backwards.json()["error"]["code"] == "INVALID_TRANSITION"

    withdraw = await client.post(f"/api/v1/applications/{application_id}/withdraw", headers=auth_headers(student))
    assert withdraw.status_code == 409

    interview = await client.post(
        f"/api/v1/applications/{application_id}/advance",
        json={
            "status": "Interview Scheduled",
            "interview_details": {"scheduled_date": "2026-11-05", "interview_mode": "Online", "round": 1},
        },
        headers=auth_headers(recruiter),
    )
    assert interview.status_code == 200
    assert interview.json()["interview_details"]["scheduled_date"] == "2026-11-05"

    mine = await client.get("/api/v1/applications/me", headers=auth_headers(student))
    assert mine.json()["items"][0]["status"] == "Interview Scheduled"

    for_job = await client.get(f"/api/v1/jobs/{job.id}/applications", headers=auth_headers(recruiter))
    assert for_job.json()["total"] == 1


async def test_withdraw_returns_no_content(client, seed):
    college = await seed.college()
    recruiter = await seed.recruiter()
    student = await seed.student(college)
    job = await seed.job(recruiter)

    applied = await client.post(f"/api/v1/jobs/{job.id}/apply", json=RESUME, headers=auth_headers(student))
    resp = await client.post(f"/api/v1/applications/{applied.json()['id']}/withdraw", headers=auth_headers(student))
    assert resp.status_code == 204

    detail = await client.get(f"/api/v1/jobs/{job.id}", headers=auth_headers(recruiter))
    assert detail.json()["application_count"] == 0


async def test_profile_edit_and_reverification(client, seed):
    college = await seed.college()
    student = await seed.student(college, verified=True, cgpa=7.0)
    tnp = await seed.tnp(college)

    edit = await client.patch("/api/v1/students/me", json={"cgpa": 7.8}, headers=auth_headers(student))
    assert edit.status_code == 200
    body = edit.json()
    assert body["verification_revoked"] is True
    assert body["student"]["is_verified"] is False

    verify = await client.post(
        f"/api/v1/students/{student.id}/verification", json={"verified": True}, headers=auth_headers(tnp)
    )
    assert verify.status_code == 200
    assert verify.json()["is_verified"] is True


async def test_unknown_job_is_not_found(client, seed):
    recruiter = await seed.recruiter()
    resp = await client.get(f"/api/v1/jobs/{uuid.uuid4()}", headers=auth_headers(recruiter))
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"


async def test_delete_job_over_http(client, seed):
    recruiter = await seed.recruiter()
    job = await seed.job(recruiter, status=JobStatus.PENDING)

    resp = await client.delete(f"/api/v1/jobs/{job.id}", headers=auth_headers(recruiter))
    assert resp.status_code == 204
    missing = await client.get(f"/api/v1/jobs/{job.id}", headers=auth_headers(recruiter))
    assert missing.status_code == 404


async def test_null_for_required_profile_field_is_validation_error(client, seed):
    college = await seed.college()
    student = await seed.student(college, verified=True)

    resp = await client.patch("/api/v1/students/me", json={"course": None}, headers=auth_headers(student))

    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_unapproved_job_detail_is_hidden_from_students(client, seed):
    college = await seed.college()
    recruiter = await seed.recruiter()
    other_recruiter = await seed.recruiter(company="Globex")
    tnp = await seed.tnp(college)
    student = await seed.student(college)
    job = await seed.job(recruiter, status=JobStatus.PENDING)

    for viewer in (student, other_recruiter):
        resp = await client.get(f"/api/v1/jobs/{job.id}", headers=auth_headers(viewer))
        assert resp.status_code == 404

    for viewer in (recruiter, tnp):
        resp = await client.get(f"/api/v1/jobs/{job.id}", headers=auth_headers(viewer))
        assert resp.status_code == 200
        assert resp.json()["status"] == "Pending"
