"""Tests for role resolution and role management."""
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from labhub.core.container import build_services
from labhub.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from labhub.models.activity_log import ActivityLog
from labhub.models.profile import Profile, ProfileRole
from labhub.services.access import AccessControl
from labhub.services.activity import ActivityLogger
from labhub.services.auth import AuthSession

from tests.conftest import headers_for, make_settings


def session_for(user_id: str, email: str, name=None) -> AuthSession:
    return AuthSession(
        user_id=user_id,
        email=email,
        name=name,
        access_token="token",
        token_id="jti",
        expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
    )


@pytest.mark.asyncio
async def test_new_principal_defaults_to_view_only(services):
    profile = await services.access.resolve_profile(session_for("newuser0000001", "Visitor@Juitsolan.in"))

    assert profile.role == ProfileRole.VIEW_ONLY
    assert profile.full_name == "Visitor"
    assert not services.access.is_admin(profile)
    assert not services.access.can_review(profile)


@pytest.mark.asyncio
async def test_allowlisted_principal_gets_listed_role(sql_gateway, email_backend):
    services = build_services(
        make_settings(ROLE_ALLOWLIST={"hod.ece@juitsolan.in": "admin"}),
        gateway=sql_gateway,
        email_backend=email_backend,
    )

    profile = await services.access.resolve_profile(
        session_for("hodece00000001", "HOD.ECE@juitsolan.in", name="Head ECE")
    )

    assert profile.role == ProfileRole.ADMIN
    assert profile.full_name == "Head ECE"
    assert services.access.is_admin(profile)


@pytest.mark.asyncio
async def test_resolve_profile_is_stable(services):
    session = session_for("stable00000001", "stable@juitsolan.in")
    first = await services.access.resolve_profile(session)
    second = await services.access.resolve_profile(session)

    assert first.id == second.id == "stable00000001"
    assert len(await services.gateway.select(Profile, filters={"email": "stable@juitsolan.in"})) == 1


@pytest.mark.asyncio
async def test_role_gates(services, super_admin, admin, faculty, viewer):
    access = services.access

    assert access.is_admin(super_admin)
    assert access.is_admin(admin)
    assert not access.is_admin(faculty)
    assert not access.is_admin(None)

    assert access.require_reviewer(admin) is admin
    with pytest.raises(AuthorizationError):
        access.require_reviewer(faculty)
    with pytest.raises(AuthorizationError):
        access.require_reviewer(viewer)
    with pytest.raises(AuthorizationError):
        access.require_admin(None)

    access.require_min_role(faculty, ProfileRole.FACULTY)
    with pytest.raises(AuthorizationError):
        access.require_min_role(admin, ProfileRole.SUPER_ADMIN)


def test_faculty_can_review_when_enabled(memory_gateway):
    access = AccessControl(memory_gateway, ActivityLogger(memory_gateway), faculty_can_review=True)
    faculty = Profile(id="f", email="f@juitsolan.in", role=ProfileRole.FACULTY)
    viewer = Profile(id="v", email="v@juitsolan.in", role=ProfileRole.VIEW_ONLY)

    assert access.can_review(faculty)
    assert not access.can_review(viewer)


def test_unknown_allowlist_role_is_rejected(memory_gateway):
    with pytest.raises(ValidationError):
        AccessControl(memory_gateway, ActivityLogger(memory_gateway), role_allowlist={"a@juitsolan.in": "owner"})


@pytest.mark.asyncio
async def test_assign_role(services, super_admin, viewer):
    updated = await services.access.assign_role(super_admin, viewer.id, "faculty")

    assert updated.role == ProfileRole.FACULTY
    logs = await services.gateway.select(ActivityLog, filters={"entity_type": "profile"})
    assert len(logs) == 1
    assert logs[0].action == "Changed role to faculty"
    assert logs[0].entity_id == viewer.id
    assert logs[0].details == {"previous_role": "view_only", "role": "faculty"}


@pytest.mark.asyncio
async def test_assign_role_rules(services, super_admin, admin, viewer):
    with pytest.raises(AuthorizationError):
        await services.access.assign_role(admin, viewer.id, "admin")
    with pytest.raises(ValidationError):
        await services.access.assign_role(super_admin, viewer.id, "owner")
    with pytest.raises(NotFoundError):
        await services.access.assign_role(super_admin, "missing0000001", "admin")
    with pytest.raises(ValidationError):
        await services.access.assign_role(super_admin, super_admin.id, "admin")

    assert await services.gateway.select(ActivityLog) == []


@pytest.mark.asyncio
async def test_role_api(client: AsyncClient, super_admin, admin, viewer):
    resp = await client.patch(
        f"/api/v1/admin/profiles/{viewer.id}/role",
        headers=headers_for(admin),
        json={"role": "admin"},
    )
    assert resp.status_code == 403

    resp = await client.patch(
        f"/api/v1/admin/profiles/{viewer.id}/role",
        headers=headers_for(super_admin),
        json={"role": "admin"},
    )
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["role"] == "admin"
    assert data["is_admin"] is True
    assert data["can_review"] is True

    resp = await client.get("/api/v1/admin/activity-logs", headers=headers_for(super_admin))
    assert resp.status_code == 200
    assert [a["action"] for a in resp.json()] == ["Changed role to admin"]
