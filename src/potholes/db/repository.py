"""
Repository Pattern for Data Access

Session-level queries against the potholes table.
"""
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from src.potholes.db.models import Pothole
from src.potholes.utils.logger import get_logger

logger = get_logger(__name__)


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so a description is matched literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PotholeRepository:
    """Repository for Pothole rows."""

    def __init__(self):
        self.model = Pothole
        logger.debug("repository_initialized", model=Pothole.__name__)

    def get_by_id(self, session: Session, pothole_id: int) -> Optional[Pothole]:
        """
        Get single record by primary key.

        Args:
            session: Database session
            pothole_id: Primary key value

        Returns:
            Pothole instance or None
        """
        result = session.get(Pothole, pothole_id)
        logger.debug(
            "repository_get_by_id",
            model=Pothole.__name__,
            id=pothole_id,
            found=result is not None
        )
        return result

    def list_all(self, session: Session) -> List[Pothole]:
        """
        Get every pothole, most reported first.

        Ties are broken by id so the order is stable between refreshes.
        """
        query = select(Pothole).order_by(Pothole.reports_count.desc(), Pothole.id.asc())
        result = session.execute(query).scalars().all()
        logger.debug("repository_list_all", count=len(result))
        return list(result)

    def find_by_description(
        self,
        session: Session,
        description: str,
        case_insensitive: bool = True
    ) -> List[Pothole]:
        """
        Find potholes whose location_desc equals the description.

        Case-insensitive lookups use ILIKE, which PostgreSQL folds for the
        full Unicode range but SQLite only folds for ASCII letters.

        Args:
            session: Database session
            description: Trimmed location description
            case_insensitive: Compare ignoring case

        Returns:
            Matching rows ordered by id
        """
        if case_insensitive:
            condition = Pothole.location_desc.ilike(_escape_like(description), escape="\\")
        else:
            condition = Pothole.location_desc == description

        query = select(Pothole).where(condition).order_by(Pothole.id.asc())
        result = list(session.execute(query).scalars().all())
        logger.debug(
            "repository_find_by_description",
            description=description,
            case_insensitive=case_insensitive,
            matches=len(result)
        )
        return result

    def create(
        self,
        session: Session,
        lat: float,
        lng: float,
        location_desc: str,
        road_position: str
    ) -> Pothole:
        """
        Insert a new pothole with a report count of one.

        Returns:
            Created instance with server defaults loaded
        """
        instance = Pothole(
            lat=lat,
            lng=lng,
            location_desc=location_desc,
            road_position=road_position,
            reports_count=1,
        )
        session.add(instance)
        session.flush()
        session.refresh(instance)
        logger.info("repository_created", model=Pothole.__name__, id=instance.id)
        return instance

    def increment_count(self, session: Session, pothole_id: int) -> Optional[int]:
        """
        Add one report to a pothole.

        The increment is a single UPDATE evaluated by the database, so
        concurrent increments on the same row never lose a report.

        Args:
            session: Database session
            pothole_id: Primary key value

        Returns:
            New report count, or None if the row does not exist
        """
        stmt = (
            update(Pothole)
            .where(Pothole.id == pothole_id)
            .values(reports_count=func.coalesce(Pothole.reports_count, 1) + 1)
            .execution_options(synchronize_session=False)
        )
        result = session.execute(stmt)
        if result.rowcount == 0:
            logger.warning("repository_increment_not_found", id=pothole_id)
            return None

        new_count = session.scalar(
            select(Pothole.reports_count).where(Pothole.id == pothole_id)
        )
        logger.info("repository_incremented", id=pothole_id, reports_count=new_count)
        return new_count
