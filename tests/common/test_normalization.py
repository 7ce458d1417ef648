"""Tests for common.normalization module."""

from common.normalization import normalize


class TestNormalize:
    """Tests for normalize function."""

    def test_trims_and_lowercases(self):
        assert normalize("  123 Main St ") == "123 main st"

    def test_case_and_whitespace_variants_match(self):
        """Inputs differing only by case/whitespace share a key."""
        assert normalize(" Paris ") == normalize("paris") == normalize("PARIS\t")

    def test_inner_whitespace_kept(self):
        assert normalize("New  York") == "new  york"

    def test_empty_and_none(self):
        assert normalize("") == ""
        assert normalize("   ") == ""
        assert normalize(None) == ""
