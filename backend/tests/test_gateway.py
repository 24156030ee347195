"""Contract tests run against both persistence gateways."""
from datetime import timedelta

import pytest
import pytest_asyncio

from labhub.core.config import Settings
from labhub.gateway import InMemoryGateway, SqlGateway, build_gateway
from labhub.models.base import as_utc, utcnow
from labhub.models.email_queue import EmailQueueEntry, EmailStatus
from labhub.models.profile import Profile, ProfileRole


@pytest_asyncio.fixture(params=["memory", "sql"])
async def gateway(request, memory_gateway, sql_gateway):
    return memory_gateway if request.param == "memory" else sql_gateway


@pytest.mark.asyncio
async def test_create_applies_defaults(gateway):
    profile = await gateway.create(Profile, email="a@juitsolan.in")

    assert len(profile.id) == 15
    assert profile.role == ProfileRole.VIEW_ONLY
    assert profile.notification_preferences == {"email_on_new_project": True}
    assert profile.created is not None
    assert profile.updated is not None


@pytest.mark.asyncio
async def test_get_and_missing(gateway):
    profile = await gateway.create(Profile, email="a@juitsolan.in", role=ProfileRole.ADMIN)

    fetched = await gateway.get(Profile, profile.id)
    assert fetched.email == "a@juitsolan.in"
    assert fetched.role == ProfileRole.ADMIN
    assert await gateway.get(Profile, "missing0000001") is None


@pytest.mark.asyncio
async def test_select_filters_orders_and_limits(gateway):
    now = utcnow()
    for i, role in enumerate([ProfileRole.ADMIN, ProfileRole.FACULTY, ProfileRole.ADMIN]):
        await gateway.create(Profile, email=f"p{i}@juitsolan.in", role=role, created=now + timedelta(seconds=i))

    admins = await gateway.select(Profile, filters={"role": ProfileRole.ADMIN})
    assert [p.email for p in admins] == ["p2@juitsolan.in", "p0@juitsolan.in"]

    oldest_first = await gateway.select(Profile, descending=False, limit=2)
    assert [p.email for p in oldest_first] == ["p0@juitsolan.in", "p1@juitsolan.in"]


@pytest.mark.asyncio
async def test_update(gateway):
    profile = await gateway.create(Profile, email="a@juitsolan.in")

    updated = await gateway.update(Profile, profile.id, role=ProfileRole.FACULTY)

    assert updated.role == ProfileRole.FACULTY
    assert as_utc(updated.updated) >= as_utc(profile.updated)
    assert (await gateway.get(Profile, profile.id)).role == ProfileRole.FACULTY
    assert await gateway.update(Profile, "missing0000001", role=ProfileRole.ADMIN) is None


@pytest.mark.asyncio
async def test_returned_records_are_not_live(gateway):
    profile = await gateway.create(Profile, email="a@juitsolan.in")
    profile.role = ProfileRole.SUPER_ADMIN

    assert (await gateway.get(Profile, profile.id)).role == ProfileRole.VIEW_ONLY


@pytest.mark.asyncio
async def test_queue_email(gateway):
    entry = await gateway.queue_email(
        to_email="asha.verma@juitsolan.in",
        subject="Hello",
        body_html="<p>Hello</p>",
        to_name="",
        max_attempts=5,
    )

    assert entry.status == EmailStatus.PENDING
    assert entry.attempts == 0
    assert entry.max_attempts == 5
    assert entry.to_name is None
    assert entry.scheduled_for is not None
    assert not entry.is_terminal

    stored = await gateway.select(EmailQueueEntry, filters={"status": EmailStatus.PENDING})
    assert [e.id for e in stored] == [entry.id]


@pytest.mark.asyncio
async def test_claim_only_applies_to_unchanged_rows(gateway):
    entry = await gateway.queue_email(
        to_email="asha.verma@juitsolan.in",
        subject="Hello",
        body_html="<p>Hello</p>",
    )
    expected = {"status": EmailStatus.PENDING, "attempts": 0}

    claimed = await gateway.claim(EmailQueueEntry, entry.id, expected, status=EmailStatus.SENDING, attempts=1)
    assert claimed.status == EmailStatus.SENDING
    assert claimed.attempts == 1

    # Same snapshot again: the row has moved on
    assert await gateway.claim(EmailQueueEntry, entry.id, expected, status=EmailStatus.SENDING, attempts=1) is None
    stored = await gateway.get(EmailQueueEntry, entry.id)
    assert stored.status == EmailStatus.SENDING
    assert stored.attempts == 1

    assert await gateway.claim(
        EmailQueueEntry, "missing0000001", {"status": EmailStatus.PENDING}, status=EmailStatus.SENDING
    ) is None


def test_build_gateway_picks_store_from_settings():
    memory = build_gateway(Settings(_env_file=None, USE_MOCK_STORE=True))
    assert isinstance(memory, InMemoryGateway)

    sql = build_gateway(Settings(_env_file=None, USE_MOCK_STORE=False, DEBUG=False, DATABASE_URL="sqlite+aiosqlite://"))
    assert isinstance(sql, SqlGateway)
