"""
Admin user seeding script.

Creates the first super admin for the lab back office. Run it once during
setup, after the database exists:

    SEED_ADMIN_EMAIL=admin@lab.example SEED_ADMIN_PASSWORD=... python scripts/seed_admin.py

Running it again is harmless; an existing user is left untouched.
"""
import asyncio
import logging
import sys

from labhub.core.config import get_settings
from labhub.core.log import configure_logging
from labhub.db.base import init_db
from labhub.gateway import SqlGateway, build_gateway
from labhub.services.seed import ensure_admin

logger = logging.getLogger("seed_admin")


async def seed_admin() -> int:
    settings = get_settings()
    if not settings.SEED_ADMIN_EMAIL or not settings.SEED_ADMIN_PASSWORD:
        logger.error("SEED_ADMIN_EMAIL and SEED_ADMIN_PASSWORD must be set")
        return 1

    gateway = build_gateway(settings)
    try:
        if isinstance(gateway, SqlGateway):
            await init_db(gateway.engine)
        user = await ensure_admin(
            gateway,
            settings.SEED_ADMIN_EMAIL,
            settings.SEED_ADMIN_PASSWORD,
            settings.SEED_ADMIN_NAME,
        )
        logger.info(f"Super admin ready: {user.email} ({user.id})")
    finally:
        await gateway.close()
    return 0


if __name__ == "__main__":
    configure_logging("INFO")
    sys.exit(asyncio.run(seed_admin()))
