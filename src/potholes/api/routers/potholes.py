"""
Potholes Router

Endpoints for listing potholes and submitting reports.
"""
from typing import List

from fastapi import APIRouter, Depends

from src.potholes.api.dependencies import get_severity_scale, get_snapshot, get_store, get_workflow
from src.potholes.api.schemas import (
    AddressReportRequest,
    ErrorResponse,
    PotholeList,
    PotholeOut,
    ReportResponse,
    TapReportRequest,
)
from src.potholes.ingestion.workflow import IngestionWorkflow
from src.potholes.models.defect import AddressSubmission, Coordinates, TapSubmission
from src.potholes.services.defect_store import DefectStore
from src.potholes.services.severity import MapMarker, SeverityScale
from src.potholes.services.snapshot import DefectSnapshot

router = APIRouter(prefix="/api/v1/potholes", tags=["potholes"])

READ_ERRORS = {
    502: {"model": ErrorResponse, "description": "Store read failed"},
    503: {"model": ErrorResponse, "description": "Store not configured or map service unavailable"},
}

REPORT_ERRORS = {
    **READ_ERRORS,
    404: {"model": ErrorResponse, "description": "Address not found"},
    409: {"model": ErrorResponse, "description": "Matched record vanished or submission in progress"},
    422: {"model": ErrorResponse, "description": "Missing required fields"},
}


@router.get("", response_model=PotholeList, responses=READ_ERRORS)
def list_potholes(
    store: DefectStore = Depends(get_store),
    snapshot: DefectSnapshot = Depends(get_snapshot),
):
    """
    Get every known pothole, most reported first.

    The shared snapshot is republished with the fresh list.
    """
    reports = store.list_all()
    snapshot.publish(reports)
    return PotholeList(
        total=len(reports),
        potholes=[PotholeOut.from_report(r) for r in reports],
    )


@router.get("/markers", response_model=List[MapMarker], responses=READ_ERRORS)
def list_markers(
    store: DefectStore = Depends(get_store),
    scale: SeverityScale = Depends(get_severity_scale),
):
    """Severity-coloured markers for the map."""
    return scale.markers(store.list_all())


@router.post("/reports/address", response_model=ReportResponse, responses=REPORT_ERRORS)
def report_by_address(
    request: AddressReportRequest,
    workflow: IngestionWorkflow = Depends(get_workflow),
):
    """
    Report a pothole by address.

    Raises:
        ValidationError, AddressNotFound, GeocodingUnavailable, PersistenceError
    """
    result = workflow.submit(AddressSubmission(
        city=request.city,
        street=request.street,
        postal_code=request.postal_code,
        road_position=request.road_position,
    ))
    return ReportResponse.from_result(result)


@router.post("/reports/tap", response_model=ReportResponse, responses=REPORT_ERRORS)
def report_by_tap(
    request: TapReportRequest,
    workflow: IngestionWorkflow = Depends(get_workflow),
):
    """Report a pothole at a tapped map position."""
    result = workflow.submit(TapSubmission(
        coordinates=Coordinates(latitude=request.lat, longitude=request.lng),
        description=request.description,
        road_position=request.road_position,
    ))
    return ReportResponse.from_result(result)
