"""Tests for search result and attachment page extraction."""

from oic_monitor.ingestion.extraction import extract_attach_ids, parse_attachment_metadata

from conftest import attachment_page, search_page


class TestExtractAttachIds:

    def test_repeated_links_yield_each_id_once(self):
        assert extract_attach_ids(search_page(501, 502, 501)) == [501, 502]

    def test_preserves_portal_order(self):
        assert extract_attach_ids(search_page(9, 3000, 12)) == [9, 3000, 12]

    def test_matches_case_insensitively(self):
        page = '<a href="ATTACHMENT.PHP?ATTACH=77">x</a>'
        assert extract_attach_ids(page) == [77]

    def test_ignores_unrelated_links(self):
        page = '<a href="index.php?lang=en">Home</a><a href="attachment.php?lang=en">?</a>'
        assert extract_attach_ids(page) == []

    def test_empty_input(self):
        assert extract_attach_ids("") == []
        assert extract_attach_ids(None) == []


class TestParseAttachmentMetadata:

    def test_reads_pc_number_and_date(self):
        metadata = parse_attachment_metadata(attachment_page("2024-0123", "2024-03-01"))
        assert metadata.pc_number == "2024-0123"
        assert metadata.published_date == "2024-03-01"

    def test_plain_text_labels(self):
        metadata = parse_attachment_metadata("PC Number: 2019-1100 Date: 2019-06-21")
        assert metadata.pc_number == "2019-1100"
        assert metadata.published_date == "2019-06-21"

    def test_labels_split_by_markup_and_entities(self):
        page = "<td>PC&nbsp;Number:</td>\n<td><b>2023-0456</b></td><td>Date:</td><td>2023-11-02</td>"
        metadata = parse_attachment_metadata(page)
        assert metadata.pc_number == "2023-0456"
        assert metadata.published_date == "2023-11-02"

    def test_missing_fields_are_absent(self):
        metadata = parse_attachment_metadata("<html><body>Nothing here</body></html>")
        assert metadata.pc_number is None
        assert metadata.published_date is None

    def test_malformed_pc_number_is_absent(self):
        metadata = parse_attachment_metadata("PC Number: 24-123 Date: 2024-01-15")
        assert metadata.pc_number is None
        assert metadata.published_date == "2024-01-15"

    def test_impossible_date_is_absent(self):
        metadata = parse_attachment_metadata("PC Number: 2024-0001 Date: 2024-13-45")
        assert metadata.pc_number == "2024-0001"
        assert metadata.published_date is None

    def test_empty_page(self):
        metadata = parse_attachment_metadata("")
        assert metadata.pc_number is None
        assert metadata.published_date is None
