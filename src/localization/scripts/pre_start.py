"""Block until PostgreSQL accepts queries, so migrations and the API can start.

Usage:
    python -m localization.scripts.pre_start
"""

import logging

from sqlalchemy import Engine, text
from sqlalchemy.exc import OperationalError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_delay,
    wait_fixed,
)

from localization.core.db import engine

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

TIMEOUT_SECONDS = 5 * 60
POLL_SECONDS = 1


@retry(
    retry=retry_if_exception_type(OperationalError),
    stop=stop_after_delay(TIMEOUT_SECONDS),
    wait=wait_fixed(POLL_SECONDS),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
def wait_for_database(db_engine: Engine) -> None:
    with db_engine.connect() as connection:
        connection.execute(text("SELECT 1"))


def main() -> None:
    logger.info("Waiting for the database at %s", engine.url.render_as_string())
    wait_for_database(engine)
    logger.info("Database is accepting queries")


if __name__ == "__main__":
    main()
