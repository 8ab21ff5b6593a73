"""
Pydantic Schemas for API Request/Response Models

These schemas define the JSON structure for API endpoints.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.potholes.models.defect import DefectReport, RoadPosition, SubmissionResult


class PotholeOut(BaseModel):
    """Pothole as stored, with table column names."""
    id: int
    lat: float
    lng: float
    location_desc: str
    road_position: RoadPosition
    reports_count: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_report(cls, report: DefectReport) -> "PotholeOut":
        return cls(
            id=report.id,
            lat=report.latitude,
            lng=report.longitude,
            location_desc=report.location_description,
            road_position=report.road_position,
            reports_count=report.report_count,
            created_at=report.created_at,
        )


class PotholeList(BaseModel):
    total: int
    potholes: List[PotholeOut]


class AddressReportRequest(BaseModel):
    """Address form submission."""
    city: str = Field("", description="City, e.g. Budapest")
    street: str = Field("", description="Street and house number, e.g. Váci út 12")
    postal_code: Optional[str] = Field(None, description="Optional postal code used for geocoding")
    road_position: RoadPosition = RoadPosition.CENTER


class TapReportRequest(BaseModel):
    """Map tap submission."""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    description: str = Field("", description="Location description shown on the marker")
    road_position: RoadPosition = RoadPosition.CENTER


class ReportResponse(BaseModel):
    outcome: str
    message: str
    pothole: PotholeOut
    snapshot_size: Optional[int] = None

    @classmethod
    def from_result(cls, result: SubmissionResult) -> "ReportResponse":
        return cls(
            outcome=result.outcome.value,
            message=result.message,
            pothole=PotholeOut.from_report(result.report),
            snapshot_size=result.snapshot_size,
        )


class ErrorResponse(BaseModel):
    error: str
    message: str
    retryable: bool = False


class HealthCheck(BaseModel):
    status: str
    version: str
    database: str
    timestamp: datetime
