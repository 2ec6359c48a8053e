"""Unit tests for Page parsing."""

from __future__ import annotations

import pytest

from laakhay.salesforce.models import Page


class TestPageFromPayload:
    """Test Page.from_payload."""

    def test_parses_service_envelope(self):
        """Test service field names map onto the page."""
        page = Page.from_payload(
            {
                "totalSize": 6,
                "done": False,
                "nextRecordsUrl": "/services/data/v57.0/query/01g-2000",
                "records": [{"Id": "1"}, {"Id": "2"}],
            }
        )
        assert page.is_final is False
        assert page.continuation_token == "/services/data/v57.0/query/01g-2000"
        assert page.records == [{"Id": "1"}, {"Id": "2"}]
        assert page.total_size == 6

    @pytest.mark.parametrize("payload", [None, {}, [], "null", "<html>oops</html>", 42])
    def test_empty_or_non_object_is_terminal(self, payload):
        """Test empty and non-object bodies become the empty terminal page."""
        page = Page.from_payload(payload)
        assert page.is_final is True
        assert page.records == []
        assert page.continuation_token is None

    def test_malformed_fields_are_terminal(self):
        """Test a body failing validation becomes the empty terminal page."""
        page = Page.from_payload({"done": "not-a-bool", "records": "nope"})
        assert page.is_final is True
        assert page.records == []

    def test_null_records(self):
        """Test null records are treated as no records."""
        page = Page.from_payload({"done": True, "records": None})
        assert page.records == []

    def test_missing_done_defaults_to_not_final(self):
        """Test a missing done flag leaves the decision to the continuation token."""
        page = Page.from_payload({"records": [{"Id": "1"}]})
        assert page.is_final is False
        assert page.continuation_token is None

    def test_null_done_keeps_records(self):
        """Test a null done flag counts as not final and keeps the page's records."""
        page = Page.from_payload({"done": None, "records": [1, 2, 3]})
        assert page.is_final is False
        assert page.records == [1, 2, 3]
        assert page.continuation_token is None

    @pytest.mark.parametrize("total", ["many", None, [], True])
    def test_unusable_total_size_keeps_records(self, total):
        """Test an unusable totalSize is dropped without losing records."""
        page = Page.from_payload({"done": True, "totalSize": total, "records": [{"Id": "1"}]})
        assert page.total_size is None
        assert page.records == [{"Id": "1"}]

    def test_numeric_string_total_size(self):
        """Test a numeric string totalSize is read as a count."""
        assert Page.from_payload({"done": True, "totalSize": "6", "records": []}).total_size == 6

    def test_blank_continuation_token_is_none(self):
        """Test an empty continuation token counts as absent."""
        page = Page.from_payload({"done": False, "nextRecordsUrl": "", "records": []})
        assert page.continuation_token is None

    def test_page_is_frozen(self):
        """Test pages are immutable."""
        page = Page.terminal()
        with pytest.raises(Exception):
            page.is_final = False
