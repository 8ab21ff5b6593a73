"""
Create Database Tables Using SQLAlchemy

This script creates the potholes table directly using SQLAlchemy's
create_all() method. This bypasses Alembic migrations and is useful for
local SQLite setups and testing.
"""
import sys
from pathlib import Path

# Add parent directory to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.potholes.db.session import Database
from src.potholes.errors import ConfigurationMissing
from src.potholes.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def main() -> int:
    """Create all database tables."""
    setup_logging()

    try:
        database = Database.from_settings()
    except ConfigurationMissing as e:
        logger.error("table_creation_aborted", reason=e.user_message)
        return 1

    logger.info("starting_table_creation", backend=database.engine.dialect.name)
    database.create_all_tables()

    if not database.health_check():
        logger.error("table_creation_health_check_failed")
        return 1

    database.close()
    logger.info("table_creation_complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
