"""
Error Types

Typed failures surfaced by report ingestion. Every external-call failure is
converted into one of these before it reaches a caller.
"""
from typing import Optional


class PotholeError(Exception):
    """Base class for pothole reporter failures."""

    error_code = "pothole_error"
    http_status = 500
    transient = False
    default_message = "Something went wrong while processing the report."

    def __init__(self, message: Optional[str] = None, *, cause: Optional[BaseException] = None):
        self.user_message = message or self.default_message
        self.cause = cause
        super().__init__(self.user_message)


class ConfigurationMissing(PotholeError):
    """Raised when the store endpoint or access key is not configured."""

    error_code = "configuration_missing"
    http_status = 503
    default_message = "Reporting is unavailable: the report database is not configured."


class IngestionError(PotholeError):
    """Base class for failures of a single report submission."""

    error_code = "ingestion_error"


class ValidationError(IngestionError):
    """Required submission fields are missing or blank."""

    error_code = "validation_error"
    http_status = 422
    default_message = "Please fill in every required field."


class GeocodingUnavailable(IngestionError):
    """The address resolver could not be reached or answered with an error."""

    error_code = "geocoding_unavailable"
    http_status = 503
    transient = True
    default_message = "The map service is unavailable right now. Please try again later."


class AddressNotFound(IngestionError):
    """The address resolver answered but returned no candidates."""

    error_code = "address_not_found"
    http_status = 404
    default_message = "This address could not be found on the map. Check the street name."


class PersistenceError(IngestionError):
    """The store rejected or failed a read or write."""

    error_code = "persistence_error"
    http_status = 502
    transient = True
    default_message = "The report could not be saved. Please try again."


class DefectNotFound(IngestionError):
    """The record targeted by an increment no longer exists."""

    error_code = "defect_not_found"
    http_status = 409
    default_message = "The matched pothole record no longer exists."


class SubmissionInProgress(IngestionError):
    """A submission was started while another one is still running."""

    error_code = "submission_in_progress"
    http_status = 409
    default_message = "A report is already being submitted. Please wait."


class RefreshError(PersistenceError):
    """
    The report was written but the defect list could not be reloaded.

    Attributes:
        result: The committed SubmissionResult
    """

    error_code = "refresh_failed"
    default_message = "The report was saved, but the map could not be refreshed."

    def __init__(self, result, message: Optional[str] = None, *, cause: Optional[BaseException] = None):
        self.result = result
        super().__init__(message, cause=cause)
