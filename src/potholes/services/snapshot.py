"""
Defect Snapshot

Shared read model of the full defect list. Each publish replaces the list
wholesale; readers may briefly see a list older than the last write.
"""
import threading
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from src.potholes.models.defect import DefectReport
from src.potholes.utils.logger import get_logger

logger = get_logger(__name__)

Subscriber = Callable[[List[DefectReport]], None]


class DefectSnapshot:
    """Latest published defect list with change subscribers."""

    def __init__(self):
        self._lock = threading.Lock()
        self._reports: List[DefectReport] = []
        self._published_at: Optional[datetime] = None
        self._subscribers: List[Subscriber] = []

    @property
    def reports(self) -> List[DefectReport]:
        with self._lock:
            return list(self._reports)

    @property
    def published_at(self) -> Optional[datetime]:
        return self._published_at

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback run after every publish.

        Returns:
            Function that removes the subscription
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, reports: Sequence[DefectReport]) -> None:
        """Replace the snapshot and notify subscribers."""
        new_reports = list(reports)
        with self._lock:
            self._reports = new_reports
            self._published_at = datetime.now(timezone.utc)
            subscribers = list(self._subscribers)

        logger.info("defect_snapshot_published", count=len(new_reports))
        for callback in subscribers:
            callback(list(new_reports))
