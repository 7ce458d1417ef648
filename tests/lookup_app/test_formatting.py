"""Tests for the lookup front end formatting helpers."""

from conftest import MAIN_ST_DETAIL, MAIN_ST_PREDICTIONS

from lookup_app.formatting import format_place, format_predictions, format_provenance
from prediction_cache.types import Provenance, ResolutionOutcome


class TestFormatProvenance:
    def test_cache(self):
        assert format_provenance(Provenance(from_cache=True, layer_name="firebase")) == "cache (firebase)"

    def test_external(self):
        assert format_provenance(Provenance(from_cache=False)) == "Google Places"

    def test_no_query(self):
        assert format_provenance(Provenance()) == "no query"


class TestFormatPredictions:
    def test_numbered_list(self):
        text = format_predictions(MAIN_ST_PREDICTIONS)
        assert text.splitlines() == [
            "1. 123 Main St, Springfield, IL, USA",
            "2. 123 Main St, Shelbyville, IL, USA",
        ]

    def test_empty(self):
        assert format_predictions([]) == "No suggestions."


class TestFormatPlace:
    def test_resolved_place(self):
        text = format_place(ResolutionOutcome(data=MAIN_ST_DETAIL, from_cache=True, layer_name="firebase"))

        assert "123 Main St, Springfield, IL 62701, USA" in text
        assert "39.799000, -89.644000" in text
        assert "cache (firebase)" in text

    def test_absent(self):
        assert "Could not resolve" in format_place(ResolutionOutcome(data=None))
