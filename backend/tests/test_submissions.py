"""Tests for project submission intake."""
import pytest
from httpx import AsyncClient

from labhub.core.container import build_services
from labhub.core.exceptions import TransientStoreError, ValidationError
from labhub.gateway import InMemoryGateway
from labhub.models.email_queue import EmailQueueEntry, EmailStatus
from labhub.models.profile import Profile
from labhub.models.submission import Submission, SubmissionStatus

from tests.conftest import DESCRIPTION_100, headers_for, make_settings


async def emails_to(services, address):
    return await services.gateway.select(EmailQueueEntry, filters={"to_email": address})


@pytest.mark.asyncio
async def test_submit_stores_pending_and_queues_confirmation(services, submission_form):
    assert len(DESCRIPTION_100) == 100

    submission = await services.intake.submit(submission_form)

    assert submission.status == SubmissionStatus.PENDING
    assert submission.project_title == "Autonomous Line Follower"
    assert submission.required_resources == ["Arduino & Development Kits"]
    assert submission.reviewed_by is None
    assert submission.faculty_comments is None
    assert submission.version == 1

    stored = await services.gateway.get(Submission, submission.id)
    assert stored is not None
    assert stored.status == SubmissionStatus.PENDING

    queued = await emails_to(services, "asha.verma@juitsolan.in")
    assert len(queued) == 1
    assert queued[0].status == EmailStatus.PENDING
    assert queued[0].template_name == "project_confirmation"
    assert queued[0].subject == "Project Submission Confirmed - Autonomous Line Follower"
    assert submission.id[:8] in queued[0].body_html
    assert queued[0].body_text


@pytest.mark.asyncio
async def test_confirmation_text_body_reads_like_the_title(services, submission_form):
    submission_form["project_title"] = "Arm & Gripper <v2>"

    await services.intake.submit(submission_form)

    queued = await emails_to(services, "asha.verma@juitsolan.in")
    assert "Arm &amp; Gripper &lt;v2&gt;" in queued[0].body_html
    assert "Arm & Gripper <v2>" in queued[0].body_text
    assert "&amp;" not in queued[0].body_text
    assert "&lt;" not in queued[0].body_text


@pytest.mark.asyncio
async def test_submit_notifies_admins_who_opted_in(services, submission_form, admin, faculty):
    await services.intake.submit(submission_form)

    admin_mail = await emails_to(services, admin.email)
    assert len(admin_mail) == 1
    assert admin_mail[0].template_name == "new_project_admin"
    assert admin_mail[0].subject == "New Project: Autonomous Line Follower"

    # Faculty are not admins and get no intake email
    assert await emails_to(services, faculty.email) == []


@pytest.mark.asyncio
async def test_submit_skips_admins_who_opted_out(services, submission_form, admin):
    await services.gateway.update(
        Profile,
        admin.id,
        notification_preferences={"email_on_new_project": False},
    )
    await services.intake.submit(submission_form)
    assert await emails_to(services, admin.email) == []


@pytest.mark.asyncio
async def test_submit_requires_a_resource(services, submission_form):
    submission_form["required_resources"] = []

    with pytest.raises(ValidationError) as exc_info:
        await services.intake.submit(submission_form)

    assert "required_resources" in exc_info.value.errors
    assert await services.gateway.select(Submission) == []
    assert await emails_to(services, "asha.verma@juitsolan.in") == []


@pytest.mark.asyncio
@pytest.mark.parametrize("field,value", [
    ("description", DESCRIPTION_100[:99]),
    ("description", "d" * 1001),
    ("project_title", "t" * 101),
    ("project_title", "   "),
    ("expected_outcomes", "o" * 501),
    ("student_email", "not-an-email"),
    ("branch", "Civil"),
    ("year", "5th"),
    ("category", "Underwater Robotics"),
    ("duration", "2 weeks"),
    ("required_resources", ["Time Machine"]),
    ("consent", False),
])
async def test_submit_rejects_invalid_field(services, submission_form, field, value):
    submission_form[field] = value

    with pytest.raises(ValidationError) as exc_info:
        await services.intake.submit(submission_form)

    assert field in exc_info.value.errors
    assert await services.gateway.select(Submission) == []


@pytest.mark.asyncio
async def test_submit_accepts_longest_description(services, submission_form):
    submission_form["description"] = "d" * 1000
    submission = await services.intake.submit(submission_form)
    assert len(submission.description) == 1000


@pytest.mark.asyncio
async def test_team_size_bounds(services, submission_form):
    submission_form.update(is_team_project=True, team_size=6, team_members="A, B, C, D, E, F")
    with pytest.raises(ValidationError) as exc_info:
        await services.intake.submit(submission_form)
    assert "team_size" in exc_info.value.errors

    submission_form["team_size"] = 5
    submission = await services.intake.submit(submission_form)
    assert submission.is_team_project is True
    assert submission.team_size == 5
    assert submission.team_members == "A, B, C, D, E, F"


@pytest.mark.asyncio
async def test_solo_project_drops_team_fields(services, submission_form):
    submission_form.update(is_team_project=False, team_size=3, team_members="Ravi, Meera")

    submission = await services.intake.submit(submission_form)

    assert submission.team_size is None
    assert submission.team_members is None


@pytest.mark.asyncio
async def test_other_resources_kept_only_with_other(services, submission_form):
    submission_form["other_resources"] = "LiDAR sensor"
    submission = await services.intake.submit(submission_form)
    assert submission.other_resources is None

    submission_form["required_resources"] = ["Drone", "Other", "Drone"]
    submission = await services.intake.submit(submission_form)
    assert submission.other_resources == "LiDAR sensor"
    assert submission.required_resources == ["Drone", "Other"]


class QueueDownGateway(InMemoryGateway):
    """Stores records but cannot queue email."""

    async def queue_email(self, *args, **kwargs):
        raise TransientStoreError("email queue unavailable")


@pytest.mark.asyncio
async def test_submission_stands_when_email_cannot_be_queued(submission_form, email_backend):
    gateway = QueueDownGateway()
    services = build_services(make_settings(), gateway=gateway, email_backend=email_backend)

    submission = await services.intake.submit(submission_form)

    stored = await gateway.get(Submission, submission.id)
    assert stored is not None
    assert stored.status == SubmissionStatus.PENDING
    assert await gateway.select(EmailQueueEntry) == []


@pytest.mark.asyncio
async def test_submission_api_create(client: AsyncClient, submission_form):
    resp = await client.post("/api/v1/submissions", json=submission_form)
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["status"] == "pending"
    assert data["project_title"] == "Autonomous Line Follower"
    assert data["id"]


@pytest.mark.asyncio
async def test_submission_api_rejects_invalid_form(client: AsyncClient, submission_form):
    submission_form["required_resources"] = []
    resp = await client.post("/api/v1/submissions", json=submission_form)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_submission_api_list_requires_reviewer(client: AsyncClient, submission_form, viewer):
    await client.post("/api/v1/submissions", json=submission_form)

    resp = await client.get("/api/v1/submissions")
    assert resp.status_code == 401

    resp = await client.get("/api/v1/submissions", headers=headers_for(viewer))
    assert resp.status_code == 403
