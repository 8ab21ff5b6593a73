"""
Report Deduplication

Decides whether a submitted location already has a pothole record.
"""
from typing import List, Optional

from src.potholes.models.defect import DefectReport
from src.potholes.services.defect_store import DefectStore
from src.potholes.transformers.location_normalizer import LocationNormalizer
from src.potholes.utils.logger import get_logger

logger = get_logger(__name__)


class DefectMatcher:
    """
    Finds the existing defect for a location description.

    Matching is exact on the dedup key: case-insensitive by default, or
    case-sensitive when configured. No fuzzy or radius matching is done.
    """

    def __init__(self, store: DefectStore, case_insensitive: bool = True):
        """
        Initialize matcher.

        Args:
            store: Defect store to search
            case_insensitive: Matching policy
        """
        self.store = store
        self.case_insensitive = case_insensitive
        self.normalizer = LocationNormalizer(case_insensitive=case_insensitive)
        logger.info("defect_matcher_initialized", case_insensitive=case_insensitive)

    def find_existing(self, description: str) -> Optional[DefectReport]:
        """
        Look up the defect recorded for a description.

        Args:
            description: Candidate location description

        Returns:
            The matching defect with the lowest id, or None
        """
        cleaned = self.normalizer.clean_description(description)
        if not cleaned:
            return None

        candidates = self.store.find_by_description(cleaned, case_insensitive=self.case_insensitive)
        key = self.normalizer.dedup_key(cleaned)
        matches = self.select_matches(key, candidates)

        if not matches:
            logger.info("defect_match_not_found", description=cleaned)
            return None

        if len(matches) > 1:
            logger.warning(
                "duplicate_defects_found",
                description=cleaned,
                defect_ids=[m.id for m in matches]
            )

        match = matches[0]
        logger.info("defect_match_found", description=cleaned, defect_id=match.id)
        return match

    def select_matches(self, key: str, candidates: List[DefectReport]) -> List[DefectReport]:
        """Candidates whose dedup key equals key, lowest id first."""
        matches = [
            c for c in candidates
            if self.normalizer.dedup_key(c.location_description) == key
        ]
        return sorted(matches, key=lambda c: c.id)
