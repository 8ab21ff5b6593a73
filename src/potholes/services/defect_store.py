"""
Defect Store

Logical operations on persisted pothole records, returned as domain models.
Store failures leave this module only as PersistenceError or DefectNotFound.
"""
from typing import Callable, List, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.potholes.db.models import Pothole
from src.potholes.db.repository import PotholeRepository
from src.potholes.db.session import Database, with_retry
from src.potholes.errors import DefectNotFound, PersistenceError
from src.potholes.models.defect import Coordinates, DefectReport, RoadPosition
from src.potholes.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def to_defect_report(row: Pothole) -> DefectReport:
    """Convert an ORM row into a DefectReport."""
    return DefectReport(
        id=row.id,
        coordinates=Coordinates(latitude=row.lat, longitude=row.lng),
        location_description=row.location_desc,
        road_position=RoadPosition(row.road_position),
        report_count=row.reports_count,
        created_at=row.created_at,
    )


class DefectStore:
    """
    Persisted defect records.

    Each operation runs in its own transaction. Transient connection
    failures are retried with backoff before surfacing as PersistenceError.
    """

    def __init__(self, database: Database, repository: Optional[PotholeRepository] = None):
        """
        Initialize store.

        Args:
            database: Configured database handle
            repository: Override the query layer (for testing)
        """
        self.database = database
        self.repository = repository or PotholeRepository()
        self.max_retries = database.config.database_max_retries
        self.retry_delay = database.config.database_retry_delay_seconds

    def _run(self, operation: str, work: Callable[[Session], T], write: bool = False) -> T:
        """
        Run work in a session scope, converting store failures.

        Reads are retried on any transient failure. Writes are retried only
        when the failure happened before commit; a failed commit may already
        have been applied, so it surfaces at once instead of being replayed.
        """
        def attempt():
            executed = False
            try:
                with self.database.session_scope() as session:
                    value = work(session)
                    executed = True
                return value
            except SQLAlchemyError as e:
                if write and executed:
                    logger.error(
                        "defect_store_commit_failed",
                        operation=operation,
                        error=str(e),
                        error_type=type(e).__name__
                    )
                    raise PersistenceError(cause=e) from e
                raise

        try:
            return with_retry(self.max_retries, self.retry_delay)(attempt)()
        except SQLAlchemyError as e:
            logger.error(
                "defect_store_operation_failed",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__
            )
            raise PersistenceError(cause=e) from e

    def list_all(self) -> List[DefectReport]:
        """Full snapshot of defects, most reported first."""
        def work(session: Session) -> List[DefectReport]:
            return [to_defect_report(row) for row in self.repository.list_all(session)]

        return self._run("list_all", work)

    def find_by_description(self, description: str, case_insensitive: bool = True) -> List[DefectReport]:
        """
        Defects whose description matches, ordered by id.

        Args:
            description: Trimmed location description
            case_insensitive: Compare ignoring case

        Returns:
            Matching defects (normally zero or one)
        """
        def work(session: Session) -> List[DefectReport]:
            rows = self.repository.find_by_description(session, description, case_insensitive)
            return [to_defect_report(row) for row in rows]

        return self._run("find_by_description", work)

    def insert(
        self,
        coordinates: Coordinates,
        description: str,
        road_position: RoadPosition
    ) -> DefectReport:
        """
        Create a defect with a report count of one.

        Raises:
            PersistenceError: If the store rejects the row
        """
        def work(session: Session) -> DefectReport:
            row = self.repository.create(
                session,
                lat=coordinates.latitude,
                lng=coordinates.longitude,
                location_desc=description,
                road_position=RoadPosition(road_position).value,
            )
            return to_defect_report(row)

        report = self._run("insert", work, write=True)
        logger.info(
            "defect_inserted",
            defect_id=report.id,
            location_description=report.location_description,
            road_position=report.road_position.value
        )
        return report

    def increment_count(self, defect_id: int) -> int:
        """
        Record one more report for a defect.

        Returns:
            Updated report count

        Raises:
            DefectNotFound: If the defect no longer exists
            PersistenceError: If the update fails
        """
        new_count = self._run(
            "increment_count",
            lambda session: self.repository.increment_count(session, defect_id),
            write=True
        )
        if new_count is None:
            raise DefectNotFound()

        logger.info("defect_incremented", defect_id=defect_id, report_count=new_count)
        return new_count

    def get(self, defect_id: int) -> Optional[DefectReport]:
        """Fetch one defect by id, or None."""
        def work(session: Session) -> Optional[DefectReport]:
            row = self.repository.get_by_id(session, defect_id)
            return to_defect_report(row) if row else None

        return self._run("get", work)
