"""
Tests for LocationNormalizer
"""
from src.potholes.transformers.location_normalizer import LocationNormalizer


class TestLocationNormalizer:
    """Tests for LocationNormalizer."""

    def test_compose_trims_segments(self):
        normalizer = LocationNormalizer()
        assert normalizer.compose("  Budapest ", "  Váci út 12  ") == "Budapest, Váci út 12"

    def test_compose_collapses_inner_whitespace(self):
        normalizer = LocationNormalizer()
        assert normalizer.compose("Budapest", "Váci   út\t12") == "Budapest, Váci út 12"

    def test_compose_matches_cleaned_description(self):
        normalizer = LocationNormalizer()
        assert normalizer.compose("Budapest", "Váci út 12,") == "Budapest, Váci út 12"
        assert normalizer.compose("Budapest", "Váci út 12 , hátsó") == "Budapest, Váci út 12, hátsó"
        assert normalizer.compose("Budapest", ",") == "Budapest"

    def test_dedup_key_case_folds(self):
        normalizer = LocationNormalizer()
        assert normalizer.dedup_key("BUDAPEST, VÁCI ÚT 12") == normalizer.dedup_key("budapest, váci út 12")

    def test_dedup_key_case_sensitive(self):
        normalizer = LocationNormalizer(case_insensitive=False)
        assert normalizer.dedup_key(" Budapest ,Váci út 12 ") == "Budapest, Váci út 12"
        assert normalizer.dedup_key("budapest, Váci út 12") != normalizer.dedup_key("Budapest, Váci út 12")

    def test_clean_description_drops_empty_segments(self):
        normalizer = LocationNormalizer()
        assert normalizer.clean_description(" Budapest , , Váci út 12 ,") == "Budapest, Váci út 12"

    def test_clean_description_of_blank_text(self):
        assert LocationNormalizer().clean_description("   ") == ""

    def test_geocoding_query_appends_postal_code(self):
        normalizer = LocationNormalizer()
        assert normalizer.geocoding_query("Budapest, Váci út 12", " 1132 ") == "Budapest, Váci út 12, 1132"
        assert normalizer.geocoding_query("Budapest, Váci út 12", None) == "Budapest, Váci út 12"
