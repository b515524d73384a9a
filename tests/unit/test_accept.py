"""
Unit tests for Accept header parsing and ranking.
"""

import pytest

from httpguard.http.accept import AcceptEntry, parse_accept
from httpguard.http.media_types import MediaType


def ranges(header):
    return [str(entry.media_range) for entry in parse_accept(header)]


class TestParseAccept:
    """Tests for parse_accept()."""

    @pytest.mark.parametrize("header", [None, "", "   "])
    def test_missing_header_means_anything(self, header):
        """Test a missing or blank header becomes */* with q=1."""
        entries = parse_accept(header)

        assert entries == [AcceptEntry(MediaType("*", "*"))]
        assert entries[0].quality == 1.0

    def test_single_entry(self):
        """Test a single media range."""
        entries = parse_accept("application/json")

        assert len(entries) == 1
        assert entries[0].media_range == MediaType.parse("application/json")
        assert entries[0].quality == 1.0

    def test_quality_ordering(self):
        """Test higher quality ranks first."""
        assert ranges("text/plain;q=0.5, application/json;q=0.9, text/html") == [
            "text/html",
            "application/json",
            "text/plain",
        ]

    def test_specificity_beats_header_order(self):
        """Test the parameterized entry wins at equal quality."""
        assert ranges("text/html, text/html;version=2") == [
            "text/html;version=2",
            "text/html",
        ]

    def test_wildcards_rank_last(self):
        """Test */* and type/* rank below concrete types at equal quality."""
        assert ranges("*/*, text/*, text/html") == ["text/html", "text/*", "*/*"]

    def test_header_order_breaks_ties(self):
        """Test equal quality and specificity keep header order."""
        assert ranges("application/xml, application/json") == [
            "application/xml",
            "application/json",
        ]

    def test_quality_beats_specificity(self):
        """Test a q=1 wildcard outranks a q=0.5 exact type."""
        assert ranges("text/html;q=0.5, */*") == ["*/*", "text/html"]

    @pytest.mark.parametrize("q", ["abc", "2", "-1", ""])
    def test_malformed_quality_defaults_to_one(self, q):
        """Test lenient handling of bad q values."""
        entries = parse_accept(f"application/json;q={q}")

        assert entries[0].quality == 1.0

    def test_multiple_header_values(self):
        """Test values from several Accept lines rank as one header."""
        assert ranges(["text/html;q=0.5", "application/json"]) == ["application/json", "text/html"]

    def test_empty_header_values(self):
        """Test an empty list carries no preference."""
        assert ranges([]) == ["*/*"]

    def test_zero_quality_dropped(self):
        """Test q=0 means not acceptable."""
        assert ranges("application/json;q=0, text/html") == ["text/html"]

    def test_malformed_elements_skipped(self):
        """Test invalid ranges are ignored."""
        assert ranges("html, invalid pattern, application/json") == ["application/json"]

    def test_all_elements_malformed(self):
        """Test a header of junk yields no entries."""
        assert parse_accept("garbage, ;;;") == []

    def test_media_params_kept_extensions_dropped(self):
        """Test params before q belong to the range, params after q do not."""
        entry = parse_accept("text/html;level=1;q=0.7;ext=x")[0]

        assert entry.media_range == MediaType.parse("text/html;level=1")
        assert entry.quality == 0.7

    def test_position_recorded(self):
        """Test entries remember where they appeared."""
        entries = parse_accept("text/plain, , application/json")

        assert [e.position for e in entries] == [0, 2]
