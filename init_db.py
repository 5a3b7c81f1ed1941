"""
Create the catalog tables and load reference data.

    python init_db.py
"""
from core.config import settings
from core.db import Base, db_session, engine
from core.logging_config import get_logger, setup_logging
import models  # noqa: F401
from services.seed import seed_reference_data

logger = get_logger(__name__)


def init_db() -> dict:
    Base.metadata.create_all(bind=engine)
    with db_session() as db:
        return seed_reference_data(db)


if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL, settings.LOG_DIR or None)
    added = init_db()
    logger.info("Database ready at %s (%s)", settings.DATABASE_URL, added)
