"""
Severity Tiers

Maps report counts to marker tiers for the map from an ordered, named
threshold list instead of inline conditionals.
"""
from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel

from config.settings import settings
from src.potholes.models.defect import ROAD_POSITION_LABELS, DefectReport, RoadPosition

TIER_COLORS = {
    "low": "#eab308",
    "medium": "#f97316",
    "high": "#dc2626",
}
DEFAULT_COLOR = "#64748b"


class MapMarker(BaseModel):
    """Render-ready marker for one defect."""

    id: int
    lat: float
    lng: float
    label: str
    report_count: int
    road_position: RoadPosition
    road_position_label: str
    tier: str
    color: str


class SeverityScale:
    """
    Ordered (exclusive upper bound, tier) thresholds plus a top tier.

    With the default [(10, "low"), (30, "medium")] and top tier "high",
    counts 1-9 are low, 10-29 medium and 30 or more high.
    """

    def __init__(
        self,
        thresholds: Optional[Sequence[Tuple[int, str]]] = None,
        top_tier: Optional[str] = None
    ):
        thresholds = list(thresholds if thresholds is not None else settings.severity_thresholds)
        bounds = [bound for bound, _ in thresholds]
        if bounds != sorted(bounds) or len(set(bounds)) != len(bounds):
            raise ValueError(f"Severity thresholds must be strictly ascending: {bounds}")

        self.thresholds: List[Tuple[int, str]] = [(int(b), str(t)) for b, t in thresholds]
        self.top_tier = top_tier or settings.severity_top_tier

    def tier_for(self, report_count: int) -> str:
        """Tier of the first threshold whose bound exceeds the count."""
        for upper_bound, tier in self.thresholds:
            if report_count < upper_bound:
                return tier
        return self.top_tier

    def tiers(self) -> List[str]:
        """All tier names, lowest first."""
        return [tier for _, tier in self.thresholds] + [self.top_tier]

    def marker_for(self, report: DefectReport) -> MapMarker:
        tier = self.tier_for(report.report_count)
        return MapMarker(
            id=report.id,
            lat=report.latitude,
            lng=report.longitude,
            label=report.location_description,
            report_count=report.report_count,
            road_position=report.road_position,
            road_position_label=ROAD_POSITION_LABELS[report.road_position],
            tier=tier,
            color=TIER_COLORS.get(tier, DEFAULT_COLOR),
        )

    def markers(self, reports: Sequence[DefectReport]) -> List[MapMarker]:
        return [self.marker_for(report) for report in reports]
