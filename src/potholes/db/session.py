"""
Database Session Management

Provides the injected database handle: engine, connection pooling, and
session scopes. Built once at startup; an unconfigured store fails here
with ConfigurationMissing instead of at every call site.
"""
import time
from contextlib import contextmanager
from functools import wraps
from typing import Generator, Optional

from sqlalchemy import create_engine, event, exc, pool, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from config.settings import Settings, settings as default_settings
from src.potholes.errors import ConfigurationMissing
from src.potholes.utils.logger import get_logger

logger = get_logger(__name__)


@event.listens_for(pool.Pool, "invalidate")
def receive_invalidate(dbapi_conn, connection_record, exception):
    """
    Event listener for connection invalidation.

    Logs when a connection is marked as invalid and removed from pool.
    """
    logger.warning(
        "database_connection_invalidated",
        exception=str(exception) if exception else None
    )


def _build_engine(url: str, config: Settings) -> Engine:
    """
    Create an engine with pooling suited to the backend.

    SQLite engines share connections across threads and skip pool sizing;
    in-memory SQLite uses a static pool so every session sees one database.
    """
    parsed = make_url(url)

    if parsed.get_backend_name() == "sqlite":
        kwargs = {
            "connect_args": {"check_same_thread": False, "timeout": 30},
            "echo": config.database_echo,
        }
        if parsed.database in (None, "", ":memory:"):
            kwargs["poolclass"] = pool.StaticPool
        return create_engine(url, **kwargs)

    return create_engine(
        url,
        pool_size=config.database_pool_size,
        max_overflow=config.database_max_overflow,
        pool_timeout=config.database_pool_timeout,
        pool_recycle=config.database_pool_recycle,
        pool_pre_ping=True,  # Verify connections before using
        echo=config.database_echo,
    )


class Database:
    """
    Connection handle for the pothole store.

    Usage:
        database = Database.from_settings()
        with database.session_scope() as session:
            session.execute(...)
    """

    def __init__(self, url: str, config: Optional[Settings] = None):
        """
        Initialize engine and session factory.

        Args:
            url: SQLAlchemy database URL (credentials included)
            config: Settings used for pool and retry tuning
        """
        self.config = config or default_settings
        self.engine = _build_engine(url, self.config)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False
        )

        @event.listens_for(self.engine, "connect")
        def receive_connect(dbapi_conn, connection_record):
            logger.debug("database_connection_established")

        logger.info("database_initialized", backend=self.engine.dialect.name)

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "Database":
        """
        Build the handle from settings.

        Raises:
            ConfigurationMissing: If the URL or access key is absent
        """
        config = config or default_settings
        if not config.is_store_configured():
            logger.error(
                "database_configuration_missing",
                has_url=bool(config.database_url),
                has_access_key=bool(config.database_access_key)
            )
            raise ConfigurationMissing()
        return cls(config.resolved_database_url(), config)

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        Get database session with automatic cleanup.

        Commits when the block exits normally and rolls back on any error.

        Yields:
            Database session

        Raises:
            Exception: Re-raises any exception after rollback
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
            logger.debug("database_session_committed")
        except exc.SQLAlchemyError as e:
            session.rollback()
            logger.error(
                "database_session_rollback",
                error=str(e),
                error_type=type(e).__name__
            )
            raise
        except Exception as e:
            session.rollback()
            logger.warning(
                "database_session_error",
                error=str(e),
                error_type=type(e).__name__
            )
            raise
        finally:
            session.close()

    def health_check(self) -> bool:
        """
        Check database connection health.

        Returns:
            True if database is accessible, False otherwise
        """
        try:
            with self.session_scope() as session:
                session.execute(text("SELECT 1"))
            logger.info("database_health_check_success")
            return True
        except exc.SQLAlchemyError as e:
            logger.error(
                "database_health_check_failed",
                error=str(e),
                error_type=type(e).__name__
            )
            return False

    def create_all_tables(self):
        """
        Create all database tables defined in models.

        WARNING: Use Alembic migrations instead in production.
        This is only for testing and initial setup.
        """
        from src.potholes.db.base import Base, import_all_models

        import_all_models()
        Base.metadata.create_all(bind=self.engine)
        logger.info("database_tables_created")

    def drop_all_tables(self):
        """
        Drop all database tables.

        WARNING: This will delete all data! Only use in development/testing.
        """
        from src.potholes.db.base import Base, import_all_models

        import_all_models()
        Base.metadata.drop_all(bind=self.engine)
        logger.warning("all_database_tables_dropped")

    def close(self):
        """Dispose of the engine and its pooled connections."""
        self.engine.dispose()
        logger.info("database_connections_closed")


def with_retry(max_retries: int = 3, retry_delay: float = 1):
    """
    Decorator to retry database operations on transient failures.

    Args:
        max_retries: Maximum number of attempts
        retry_delay: Base delay between attempts in seconds

    Usage:
        @with_retry(max_retries=3)
        def my_database_operation(session):
            # Perform operation
            pass
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            last_exception = None

            attempts = max(1, max_retries)
            for attempt in range(attempts):
                try:
                    return func(*args, **kwargs)
                except (exc.OperationalError, exc.DisconnectionError) as e:
                    last_exception = e
                    if attempt < attempts - 1:
                        logger.warning(
                            "database_operation_retry",
                            operation=func.__name__,
                            attempt=attempt + 1,
                            max_retries=max_retries,
                            error=str(e)
                        )
                        time.sleep(retry_delay * (attempt + 1))
                    else:
                        logger.error(
                            "database_operation_failed_after_retries",
                            operation=func.__name__,
                            max_retries=max_retries,
                            error=str(e)
                        )

            raise last_exception

        return wrapper
    return decorator
