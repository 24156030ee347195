"""
Email delivery worker.

Polls the email queue and delivers whatever is due. Run it next to the API:

    labhub-worker          # loop forever
    labhub-worker --once   # single drain, e.g. from cron
"""
import argparse
import asyncio
import logging

from labhub.core.config import Settings, get_settings
from labhub.core.container import Services, build_services
from labhub.core.exceptions import TransientStoreError
from labhub.core.log import configure_logging

logger = logging.getLogger(__name__)


async def run_once(services: Services) -> None:
    try:
        await services.dispatcher.drain()
    except TransientStoreError as e:
        logger.error(f"Email queue drain failed, will retry next cycle: {e.message}")


async def run_worker(settings: Settings, once: bool = False) -> None:
    services = build_services(settings)
    await services.startup()
    logger.info(
        f"Email worker started (provider={settings.EMAIL_PROVIDER}, "
        f"interval={settings.WORKER_POLL_INTERVAL_SECONDS}s)"
    )
    try:
        while True:
            await run_once(services)
            if once:
                break
            await asyncio.sleep(settings.WORKER_POLL_INTERVAL_SECONDS)
    finally:
        await services.shutdown()


def main() -> None:
    parser = argparse.ArgumentParser(description="Deliver queued LabHub emails")
    parser.add_argument("--once", action="store_true", help="drain the queue once and exit")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    try:
        asyncio.run(run_worker(settings, once=args.once))
    except KeyboardInterrupt:
        logger.info("Email worker stopped")


if __name__ == "__main__":
    main()
