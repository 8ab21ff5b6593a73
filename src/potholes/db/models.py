"""
SQLAlchemy ORM Models

Table layout shared with the map front end: one row per known pothole.
"""
from sqlalchemy import CheckConstraint, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.potholes.db.base import Base, CreatedAtMixin

ROAD_POSITIONS = ("center", "edge", "lane_change")

class Pothole(Base, CreatedAtMixin):
    """
    Reported pothole.

    location_desc is the dedup key source; repeated reports for the same
    description raise reports_count instead of adding rows.
    """
    __tablename__ = "potholes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    lat: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="WGS84 latitude"
    )
    lng: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="WGS84 longitude"
    )
    location_desc: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Normalized location description, e.g. 'Budapest, Váci út 12'"
    )
    road_position: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="center, edge or lane_change"
    )
    reports_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        server_default="1",
        comment="Number of citizen reports for this location"
    )

    __table_args__ = (
        CheckConstraint("lat >= -90 AND lat <= 90", name="check_pothole_lat_range"),
        CheckConstraint("lng >= -180 AND lng <= 180", name="check_pothole_lng_range"),
        CheckConstraint("reports_count >= 1", name="check_pothole_reports_count_positive"),
        CheckConstraint(
            "road_position IN ({})".format(", ".join(f"'{p}'" for p in ROAD_POSITIONS)),
            name="check_pothole_road_position"
        ),
        Index("idx_potholes_location_desc", "location_desc"),
        Index("idx_potholes_reports_count", "reports_count"),
    )

    def __repr__(self) -> str:
        return f"<Pothole(id={self.id}, location_desc='{self.location_desc}', reports_count={self.reports_count})>"
