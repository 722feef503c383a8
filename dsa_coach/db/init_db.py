import logging

from dsa_coach.db.base import DATABASE_ERRORS, Base
from dsa_coach.db.session import engine
from dsa_coach import models  # noqa: F401 -- ensure models are registered with metadata

logger = logging.getLogger(__name__)


async def init_db() -> bool:
    """
    Create tables before serving traffic.

    Returns ``False`` when the database cannot be reached; the service keeps
    running without chat history persistence.
    """

    try:
        async with engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)
    except DATABASE_ERRORS as exc:
        logger.error("Database connection error: %s", exc)
        logger.warning("Continuing without database connection...")
        return False

    logger.info("Database connected successfully")
    return True
