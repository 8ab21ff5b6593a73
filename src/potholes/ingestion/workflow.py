"""
Report Ingestion Workflow

Runs one citizen submission through validation, matching, increment or
geocode-and-insert, and the defect list refresh.

Two reporters submitting the same new location at the same moment can both
miss in the matching step and both insert. Dedup is therefore at-least-once
across clients; the counter increment itself is atomic.
"""
import threading
import uuid
from enum import Enum
from typing import Callable, List, Optional, Union

from config.settings import Settings, settings as default_settings
from src.potholes.db.session import Database
from src.potholes.errors import (
    AddressNotFound,
    PersistenceError,
    PotholeError,
    RefreshError,
    SubmissionInProgress,
    ValidationError,
)
from src.potholes.geocoding.nominatim import NominatimGeocoder
from src.potholes.models.defect import (
    AddressSubmission,
    Coordinates,
    DefectReport,
    Notification,
    SubmissionOutcome,
    SubmissionResult,
    TapSubmission,
)
from src.potholes.pipelines.deduplication import DefectMatcher
from src.potholes.services.defect_store import DefectStore
from src.potholes.services.snapshot import DefectSnapshot
from src.potholes.utils.logger import bind_submission_context, clear_submission_context, get_logger

logger = get_logger(__name__)

Submission = Union[AddressSubmission, TapSubmission]
Notifier = Callable[[Notification], None]


class IngestionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    MATCHING = "matching"
    INCREMENTING = "incrementing"
    GEOCODING = "geocoding"
    INSERTING = "inserting"
    REFRESHING = "refreshing"
    ERROR = "error"


def log_notification(notification: Notification) -> None:
    """Default notifier: one log line per finished submission."""
    if notification.level == "error":
        logger.warning("submission_notification", code=notification.code, message=notification.message)
    else:
        logger.info("submission_notification", code=notification.code, message=notification.message)


class IngestionWorkflow:
    """
    State machine for a single reporting client.

    Steps run strictly in order and each call runs to completion or failure
    before returning to IDLE. A second submit while one is running raises
    SubmissionInProgress instead of being re-entered.
    """

    def __init__(
        self,
        store: DefectStore,
        geocoder: NominatimGeocoder,
        matcher: Optional[DefectMatcher] = None,
        snapshot: Optional[DefectSnapshot] = None,
        notifier: Optional[Notifier] = None,
        case_insensitive: bool = True,
    ):
        """
        Initialize workflow.

        Args:
            store: Defect store
            geocoder: Address resolver with resolve(query) -> Optional[Coordinates]
            matcher: Override the defect matcher
            snapshot: Read model refreshed after each successful write
            notifier: Receives exactly one Notification per submission
            case_insensitive: Matching policy when no matcher is given
        """
        self.store = store
        self.geocoder = geocoder
        self.matcher = matcher or DefectMatcher(store, case_insensitive=case_insensitive)
        self.normalizer = self.matcher.normalizer
        self.snapshot = snapshot or DefectSnapshot()
        self.notifier = notifier or log_notification

        self._guard = threading.Lock()
        self.state = IngestionState.IDLE
        self.history: List[IngestionState] = [IngestionState.IDLE]

    @property
    def loading(self) -> bool:
        """True while a submission is in flight."""
        return self._guard.locked()

    def submit(self, submission: Submission) -> SubmissionResult:
        """
        Run one submission to completion.

        Args:
            submission: Address or tap submission

        Returns:
            SubmissionResult describing the insert or increment

        Raises:
            SubmissionInProgress: If called while another submission runs
            IngestionError: Typed failure of any step
        """
        if not self._guard.acquire(blocking=False):
            logger.warning("submission_rejected_in_progress")
            raise SubmissionInProgress()

        bind_submission_context(uuid.uuid4().hex[:12], submission.flow)
        self.history = [IngestionState.IDLE]
        try:
            result = self._run(submission)
        except PotholeError as e:
            self._transition(IngestionState.ERROR)
            logger.warning("submission_failed", error_code=e.error_code, error=e.user_message)
            self._notify(Notification(level="error", message=e.user_message, code=e.error_code))
            raise
        except Exception as e:
            self._transition(IngestionState.ERROR)
            logger.exception("submission_failed_unexpectedly", error_type=type(e).__name__)
            self._notify(Notification(level="error", message=PotholeError.default_message, code=PotholeError.error_code))
            raise
        else:
            self._notify(Notification(level="info", message=result.message, code=result.outcome.value))
            return result
        finally:
            self._transition(IngestionState.IDLE)
            clear_submission_context()
            self._guard.release()

    def _run(self, submission: Submission) -> SubmissionResult:
        self._transition(IngestionState.VALIDATING)
        description = self._validate(submission)

        self._transition(IngestionState.MATCHING)
        existing = self.matcher.find_existing(description)

        if existing is not None:
            self._transition(IngestionState.INCREMENTING)
            result = self._increment(existing)
        else:
            coordinates = self._coordinates_for(submission, description)
            self._transition(IngestionState.INSERTING)
            report = self.store.insert(coordinates, description, submission.road_position)
            result = SubmissionResult(
                outcome=SubmissionOutcome.INSERTED,
                report=report,
                message="New pothole recorded. Thank you for the report!",
            )

        self._transition(IngestionState.REFRESHING)
        return self._refresh(result)

    def _validate(self, submission: Submission) -> str:
        """Reject blank required fields and compose the description."""
        if isinstance(submission, AddressSubmission):
            missing = [
                name for name in ("city", "street")
                if not self.normalizer.clean_description(getattr(submission, name))
            ]
            if missing:
                raise ValidationError(f"Missing required field(s): {', '.join(missing)}.")
            return self.normalizer.compose(submission.city, submission.street)

        description = self.normalizer.clean_description(submission.description)
        if not description:
            raise ValidationError("Missing required field(s): description.")
        return description

    def _increment(self, existing: DefectReport) -> SubmissionResult:
        new_count = self.store.increment_count(existing.id)
        report = existing.model_copy(update={"report_count": new_count})
        return SubmissionResult(
            outcome=SubmissionOutcome.INCREMENTED,
            report=report,
            message=f"Another report recorded for this pothole: this is report #{new_count} at this location.",
        )

    def _coordinates_for(self, submission: Submission, description: str) -> Coordinates:
        """Tap submissions carry coordinates; addresses are geocoded."""
        if isinstance(submission, TapSubmission):
            return submission.coordinates

        self._transition(IngestionState.GEOCODING)
        query = self.normalizer.geocoding_query(description, submission.postal_code)
        coordinates = self.geocoder.resolve(query)
        if coordinates is None:
            raise AddressNotFound()
        return coordinates

    def _refresh(self, result: SubmissionResult) -> SubmissionResult:
        """Reload the full defect list and publish it."""
        try:
            reports = self.store.list_all()
        except PersistenceError as e:
            raise RefreshError(result, cause=e) from e

        self.snapshot.publish(reports)
        return result.model_copy(update={"snapshot_size": len(reports)})

    def _transition(self, state: IngestionState) -> None:
        self.state = state
        self.history.append(state)
        logger.debug("ingestion_state_changed", state=state.value)

    def _notify(self, notification: Notification) -> None:
        self.notifier(notification)


def build_workflow(
    config: Optional[Settings] = None,
    snapshot: Optional[DefectSnapshot] = None,
    notifier: Optional[Notifier] = None,
    database: Optional[Database] = None,
) -> IngestionWorkflow:
    """
    Wire a workflow from settings.

    Raises:
        ConfigurationMissing: If the store is not configured
    """
    config = config or default_settings
    database = database or Database.from_settings(config)
    store = DefectStore(database)
    geocoder = NominatimGeocoder(
        base_url=config.nominatim_url,
        user_agent=config.geocoder_user_agent,
        timeout=config.geocoder_timeout_seconds,
        max_retries=config.geocoder_max_retries,
        backoff_seconds=config.geocoder_backoff_seconds,
        country_codes=config.geocoder_country_codes,
    )
    return IngestionWorkflow(
        store,
        geocoder,
        snapshot=snapshot,
        notifier=notifier,
        case_insensitive=config.match_case_insensitive,
    )
