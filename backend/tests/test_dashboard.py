"""Tests for dashboard listing and summary."""
from datetime import timedelta

import pytest
from httpx import AsyncClient

from labhub.core.exceptions import NotFoundError, ValidationError
from labhub.models.base import utcnow
from labhub.models.submission import Submission, SubmissionStatus
from labhub.services.dashboard import DashboardService, SubmissionFilter

from tests.conftest import headers_for


async def submit_many(services, submission_form, titles):
    created = []
    for i, title in enumerate(titles):
        form = dict(submission_form, project_title=title, roll_number=f"22103{i}")
        created.append(await services.intake.submit(form))
    return created


@pytest.mark.asyncio
async def test_summary_counts_by_status(services, submission_form, admin):
    a, b, c, d = await submit_many(services, submission_form, ["Quadcopter", "Robot Dog", "Arm", "Hand"])
    await services.review.review(a.id, "approved", "Go.", reviewer=admin)
    await services.review.review(b.id, "rejected", "No.", reviewer=admin)
    await services.review.review(c.id, "under_review", None, reviewer=admin)

    stats = services.dashboard.summarize(await services.dashboard.list_submissions())

    assert stats.total == 4
    assert stats.pending == 1
    assert stats.approved == 1
    assert stats.rejected == 1
    assert stats.under_review == 1
    assert stats.completed == 0


def test_summary_of_nothing():
    stats = DashboardService.summarize([])
    assert stats.total == 0
    assert stats.pending == 0


@pytest.mark.asyncio
async def test_list_is_newest_first(memory_gateway):
    dashboard = DashboardService(memory_gateway)
    now = utcnow()
    for i, title in enumerate(["Oldest", "Middle", "Newest"]):
        await memory_gateway.create(
            Submission,
            student_name="Asha Verma",
            student_email="asha.verma@juitsolan.in",
            roll_number="221030",
            branch="ECE",
            year="3rd",
            category="Other",
            project_title=title,
            description="d" * 100,
            duration="1-3 months",
            required_resources=["Drone"],
            created=now + timedelta(minutes=i),
        )

    titles = [s.project_title for s in await dashboard.list_submissions()]
    assert titles == ["Newest", "Middle", "Oldest"]


@pytest.mark.asyncio
async def test_list_filters(services, submission_form, admin):
    a, b, _ = await submit_many(services, submission_form, ["Quadcopter Swarm", "Robot Dog Gait", "Arm Kinematics"])
    await services.review.review(a.id, "approved", "Go.", reviewer=admin)

    approved = await services.dashboard.list_submissions(SubmissionFilter(status="approved"))
    assert [s.id for s in approved] == [a.id]

    found = await services.dashboard.list_submissions(SubmissionFilter(search="robot DOG"))
    assert [s.id for s in found] == [b.id]

    by_roll = await services.dashboard.list_submissions(SubmissionFilter(search="221031"))
    assert [s.id for s in by_roll] == [b.id]

    with pytest.raises(ValidationError):
        await services.dashboard.list_submissions(SubmissionFilter(status="archived"))


@pytest.mark.asyncio
async def test_list_reflects_reviews_without_caching(services, submission_form, admin):
    (a,) = await submit_many(services, submission_form, ["Quadcopter"])
    before = await services.dashboard.get_submission(a.id)
    await services.review.review(a.id, "under_review", None, reviewer=admin)
    after = await services.dashboard.get_submission(a.id)

    assert before.status == SubmissionStatus.PENDING
    assert after.status == SubmissionStatus.UNDER_REVIEW


@pytest.mark.asyncio
async def test_get_missing_submission(services):
    with pytest.raises(NotFoundError):
        await services.dashboard.get_submission("missing0000001")


@pytest.mark.asyncio
async def test_dashboard_api(client: AsyncClient, services, submission_form, admin, viewer):
    a, _ = await submit_many(services, submission_form, ["Quadcopter", "Robot Dog"])
    await services.review.review(a.id, "approved", "Go.", reviewer=admin)

    resp = await client.get("/api/v1/dashboard/summary", headers=headers_for(viewer))
    assert resp.status_code == 403

    resp = await client.get("/api/v1/dashboard/summary", headers=headers_for(admin))
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["stats"] == {
        "total": 2, "pending": 1, "under_review": 0, "approved": 1, "rejected": 0, "completed": 0,
    }
    assert data["user_role"] == "admin"
    # Two confirmations, two admin heads-ups, one status update
    assert data["queued_emails"] == 5
    assert data["failed_emails"] == 0

    resp = await client.get("/api/v1/submissions?status=approved", headers=headers_for(admin))
    assert resp.status_code == 200
    listing = resp.json()
    assert listing["totalItems"] == 1
    assert listing["items"][0]["id"] == a.id
    assert listing["items"][0]["faculty_comments"] == "Go."

    resp = await client.get("/api/v1/submissions?perPage=1&page=2", headers=headers_for(admin))
    assert resp.json()["totalPages"] == 2
    assert len(resp.json()["items"]) == 1

    resp = await client.get(f"/api/v1/submissions/{a.id}", headers=headers_for(admin))
    assert resp.status_code == 200
    assert resp.json()["status"] == "approved"
