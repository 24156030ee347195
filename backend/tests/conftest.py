"""
Test configuration and fixtures for LabHub backend tests.
"""
import pytest
import pytest_asyncio
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from labhub.main import app
from labhub.core.config import Settings
from labhub.core.container import Services, build_services
from labhub.core.security import get_password_hash, create_access_token
from labhub.db.base import Base
from labhub.gateway import InMemoryGateway, PersistenceGateway, SqlGateway
from labhub.models.profile import Profile, ProfileRole
from labhub.models.user import User
from labhub.services.email_backends import ConsoleBackend

TEST_SECRET_KEY = "test-secret-key"
TEST_PASSWORD = "TestPass123"

# Exactly 100 characters, the shortest description intake accepts
DESCRIPTION_100 = (
    "A line following robot that uses an IR sensor array and PID control "
    "to run the lab's track at speed."
)


def make_settings(**overrides) -> Settings:
    values = dict(
        DEBUG=False,
        SECRET_KEY=TEST_SECRET_KEY,
        EMAIL_PROVIDER="console",
        SITE_URL="http://lab.test-site.in",
        FACULTY_CAN_REVIEW=False,
        REVIEW_TRANSITION_POLICY="permissive",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest_asyncio.fixture(scope="function")
async def sql_gateway(tmp_path) -> AsyncGenerator[SqlGateway, None]:
    """SQLite-backed gateway with a fresh schema per test."""
    # File-based SQLite: every aiosqlite connection must see the same DB
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    gateway = SqlGateway(engine)
    yield gateway
    await gateway.close()


@pytest.fixture
def memory_gateway() -> InMemoryGateway:
    return InMemoryGateway()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def email_backend() -> ConsoleBackend:
    return ConsoleBackend("noreply@juitsolan.in", "JUIT Robotics Lab")


@pytest_asyncio.fixture
async def services(sql_gateway: SqlGateway, settings: Settings, email_backend: ConsoleBackend) -> Services:
    return build_services(settings, gateway=sql_gateway, email_backend=email_backend)


@pytest_asyncio.fixture(scope="function")
async def client(services: Services) -> AsyncGenerator[AsyncClient, None]:
    """Test client wired to the test services (ASGITransport skips the lifespan)."""
    app.state.services = services
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    del app.state.services


async def create_staff(
    gateway: PersistenceGateway,
    email: str,
    role: ProfileRole,
    name: str = "Staff Member",
) -> Profile:
    """User plus profile sharing one id."""
    user = await gateway.create(
        User,
        email=email,
        name=name,
        password_hash=get_password_hash(TEST_PASSWORD),
    )
    return await gateway.create(
        Profile,
        id=user.id,
        email=email,
        full_name=name,
        role=role,
    )


def headers_for(profile: Profile) -> dict:
    token = create_access_token(subject=profile.id, secret_key=TEST_SECRET_KEY)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def super_admin(services: Services) -> Profile:
    return await create_staff(services.gateway, "root@juitsolan.in", ProfileRole.SUPER_ADMIN, "Lab Root")


@pytest_asyncio.fixture
async def admin(services: Services) -> Profile:
    return await create_staff(services.gateway, "incharge@juitsolan.in", ProfileRole.ADMIN, "Lab In-charge")


@pytest_asyncio.fixture
async def faculty(services: Services) -> Profile:
    return await create_staff(services.gateway, "prof.rao@juitsolan.in", ProfileRole.FACULTY, "Dr. Rao")


@pytest_asyncio.fixture
async def viewer(services: Services) -> Profile:
    return await create_staff(services.gateway, "guest@juitsolan.in", ProfileRole.VIEW_ONLY, "Guest")


@pytest.fixture
def admin_headers(admin: Profile) -> dict:
    return headers_for(admin)


@pytest.fixture
def submission_form() -> dict:
    """A valid solo proposal."""
    return {
        "student_name": "Asha Verma",
        "student_email": "asha.verma@juitsolan.in",
        "roll_number": "221030",
        "branch": "ECE",
        "year": "3rd",
        "contact_number": "+91 98160 00000",
        "is_team_project": False,
        "category": "Autonomous Robots",
        "project_title": "Autonomous Line Follower",
        "description": DESCRIPTION_100,
        "expected_outcomes": "A robot that completes the lab track under 30 seconds.",
        "duration": "1-3 months",
        "required_resources": ["Arduino & Development Kits"],
        "consent": True,
    }
