"""
Pothole Data Models

Pydantic models for defect records, submissions, and workflow results.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RoadPosition(str, Enum):
    """Where on the carriageway the pothole sits."""

    CENTER = "center"
    EDGE = "edge"
    LANE_CHANGE = "lane_change"


ROAD_POSITION_LABELS = {
    RoadPosition.CENTER: "Middle of the road",
    RoadPosition.EDGE: "Road edge",
    RoadPosition.LANE_CHANGE: "At a lane change",
}


class Coordinates(BaseModel):
    """WGS84 coordinate pair."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., description="WGS84 latitude", ge=-90, le=90)
    longitude: float = Field(..., description="WGS84 longitude", ge=-180, le=180)


class DefectReport(BaseModel):
    """
    A stored pothole with its cumulative report count.

    Attributes:
        id: Store-assigned identifier
        coordinates: Where the marker renders; never recomputed after creation
        location_description: Human-readable location, the dedup key source
        road_position: Position recorded by the first reporter
        report_count: Number of submissions that matched this record
        created_at: Creation timestamp
    """

    id: int
    coordinates: Coordinates
    location_description: str
    road_position: RoadPosition
    report_count: int = Field(1, ge=1)
    created_at: Optional[datetime] = None

    @field_validator("report_count", mode="before")
    @classmethod
    def default_missing_count(cls, value):
        """Rows written before the count column existed count as one report."""
        if value is None:
            return 1
        return value

    @property
    def latitude(self) -> float:
        return self.coordinates.latitude

    @property
    def longitude(self) -> float:
        return self.coordinates.longitude


class AddressSubmission(BaseModel):
    """
    Report typed in as an address.

    Blank fields are accepted here and rejected by the workflow's validation
    step so the caller gets a typed ValidationError.
    """

    city: str = ""
    street: str = ""
    road_position: RoadPosition = RoadPosition.CENTER
    postal_code: Optional[str] = None

    @property
    def flow(self) -> str:
        return "address"


class TapSubmission(BaseModel):
    """Report placed by tapping the map, so coordinates are already known."""

    coordinates: Coordinates
    description: str = ""
    road_position: RoadPosition = RoadPosition.CENTER

    @property
    def flow(self) -> str:
        return "tap"


class SubmissionOutcome(str, Enum):
    INSERTED = "inserted"
    INCREMENTED = "incremented"


class SubmissionResult(BaseModel):
    """Successful end of one workflow run."""

    outcome: SubmissionOutcome
    report: DefectReport
    message: str
    snapshot_size: Optional[int] = None


class Notification(BaseModel):
    """The single human-readable message emitted per submission."""

    level: str = Field(..., description="info or error")
    message: str
    code: str = Field(..., description="Outcome name or error code")
