"""
Location Normalization Transformer

Builds location descriptions from form input and derives the dedup key used
to recognise repeated reports of the same pothole.
"""
import re
from typing import Optional

from src.potholes.utils.logger import get_logger

logger = get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")


class LocationNormalizer:
    """
    Normalizes location descriptions.

    Stored descriptions keep the reporter's casing ("Budapest, Váci út 12");
    the dedup key is trimmed and, by default, case-folded.
    """

    def __init__(self, case_insensitive: bool = True):
        """
        Initialize normalizer.

        Args:
            case_insensitive: Fold case when building dedup keys
        """
        self.case_insensitive = case_insensitive

    @staticmethod
    def clean_segment(value: Optional[str]) -> str:
        """Trim a segment and collapse runs of internal whitespace."""
        if not value:
            return ""
        return _WHITESPACE.sub(" ", value).strip()

    def compose(self, city: str, street: str) -> str:
        """
        Compose the stored description from city and street.

        Args:
            city: City name
            street: Street and house number

        Returns:
            "City, Street", cleaned the same way as any description the
            matcher looks up
        """
        return self.clean_description(f"{city or ''}, {street or ''}")

    def clean_description(self, description: str) -> str:
        """Clean a free-text description, segment by segment."""
        segments = [self.clean_segment(part) for part in (description or "").split(",")]
        return ", ".join(segment for segment in segments if segment)

    def dedup_key(self, description: str) -> str:
        """
        Key compared when matching against stored descriptions.

        Args:
            description: Stored or candidate description

        Returns:
            Cleaned description, case-folded in case-insensitive mode
        """
        key = self.clean_description(description)
        if self.case_insensitive:
            key = key.casefold()
        return key

    def geocoding_query(self, description: str, postal_code: Optional[str] = None) -> str:
        """
        Query text sent to the address resolver.

        The postal code narrows the lookup but is not part of the dedup key.
        """
        postal = self.clean_segment(postal_code)
        if postal:
            return f"{description}, {postal}"
        return description
