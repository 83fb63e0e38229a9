"""Tests for the nearest-fragment search and the anchor-based extractor."""

import pytest

from devapp_scraper import extractor as extractor_module
from devapp_scraper.extractor import AnchorBasedExtractor, find_anchor, find_closest_fragment
from devapp_scraper.geometry import Direction, Fragment, is_overlap
from devapp_scraper.records import NO_DESCRIPTION

DOCUMENT_URL = "https://example.com/register/2019-03.pdf"


class TestFindClosestFragment:
    """Tests for the nearest-neighbour resolver."""

    def test_finds_value_right_of_label(self, application_page):
        result = find_closest_fragment(application_page, "Dev App No", Direction.RIGHT)

        assert result.text == "123/2018"

    def test_finds_value_below_label(self, application_page):
        result = find_closest_fragment(application_page, "Property Detail", Direction.DOWN)

        assert result.text == "10 Main St"

    def test_label_match_ignores_case(self, application_page):
        result = find_closest_fragment(application_page, "DEV APP NO", Direction.RIGHT)

        assert result.text == "123/2018"

    def test_label_matches_by_prefix(self):
        fragments = [
            Fragment("Dev App No:", x=0, y=0, width=50, height=10),
            Fragment("580/1/19", x=60, y=0, width=40, height=10),
        ]

        assert find_closest_fragment(fragments, "dev app", Direction.RIGHT).text == "580/1/19"

    def test_first_matching_label_is_the_anchor(self):
        fragments = [
            Fragment("Dev App No", x=0, y=0, width=50, height=10),
            Fragment("Dev App No", x=0, y=100, width=50, height=10),
        ]

        assert find_anchor(fragments, "dev app no") is fragments[0]

    def test_missing_label_returns_none(self, application_page):
        assert find_closest_fragment(application_page, "Fees", Direction.RIGHT) is None

    def test_no_overlapping_candidate_returns_none(self):
        fragments = [
            Fragment("Dev App No", x=0, y=0, width=50, height=10),
            Fragment("123/2018", x=55, y=40, width=40, height=10),
        ]

        assert find_closest_fragment(fragments, "Dev App No", Direction.RIGHT) is None

    def test_label_is_never_its_own_neighbour(self):
        fragments = [Fragment("Property Detail", x=0, y=20, width=60, height=10)]

        assert find_closest_fragment(fragments, "Property Detail", Direction.DOWN) is None

    def test_overlapping_candidate_beats_closer_non_overlapping_one(self):
        fragments = [
            Fragment("Dev App No", x=0, y=0, width=50, height=10),
            Fragment("close but lower", x=51, y=11, width=40, height=10),
            Fragment("far on the line", x=300, y=2, width=40, height=10),
        ]

        assert find_closest_fragment(fragments, "Dev App No", Direction.RIGHT).text == "far on the line"

    def test_first_encountered_wins_a_tie(self):
        fragments = [
            Fragment("Property Detail", x=20, y=0, width=20, height=10),
            Fragment("left", x=10, y=20, width=20, height=10),
            Fragment("right", x=10, y=20, width=20, height=10),
        ]

        assert find_closest_fragment(fragments, "Property Detail", Direction.DOWN).text == "left"

    def test_result_always_overlaps_anchor(self):
        fragments = [
            Fragment("Dev App No", x=0, y=0, width=50, height=10),
            Fragment("a", x=55, y=9, width=10, height=10),
            Fragment("b", x=52, y=12, width=10, height=10),
            Fragment("c", x=70, y=-5, width=10, height=6),
        ]
        anchor = fragments[0]

        for direction in Direction:
            result = find_closest_fragment(fragments, "Dev App No", direction)
            if result is not None:
                assert is_overlap(anchor, result, direction)


class TestAnchorBasedExtractor:
    """Tests for the per-page field extraction."""

    def test_page_with_number_and_address(self, anchor_extractor, application_page):
        record = anchor_extractor.extract_page(application_page, DOCUMENT_URL)

        assert record.application_number == "123/2018"
        assert record.address == "10 Main St"
        assert record.description == NO_DESCRIPTION
        assert record.received_date == ""
        assert record.information_url == DOCUMENT_URL
        assert record.comment_url == anchor_extractor.comment_url
        assert record.scrape_date == "2019-03-20"

    def test_address_echoing_the_label_skips_the_page(self, anchor_extractor, application_page):
        application_page[3] = Fragment("Property Detail", x=0, y=35, width=60, height=10)

        assert anchor_extractor.extract_page(application_page, DOCUMENT_URL) is None

    def test_missing_address_skips_the_page(self, anchor_extractor, application_page):
        assert anchor_extractor.extract_page(application_page[:3], DOCUMENT_URL) is None

    def test_missing_application_number_skips_the_page(self, anchor_extractor, application_page):
        assert anchor_extractor.extract_page(application_page[2:], DOCUMENT_URL) is None

    def test_blank_application_number_skips_the_page(self, anchor_extractor, application_page):
        application_page[1] = Fragment("   ", x=55, y=0, width=40, height=10)

        assert anchor_extractor.extract_page(application_page, DOCUMENT_URL) is None

    def test_blank_address_skips_the_page(self, anchor_extractor, application_page):
        application_page[3] = Fragment(" ", x=0, y=35, width=60, height=10)

        assert anchor_extractor.extract_page(application_page, DOCUMENT_URL) is None

    def test_description_follows_the_application_number(self, anchor_extractor, application_page):
        application_page.append(Fragment("  Dwelling addition ", x=100, y=0, width=80, height=10))

        record = anchor_extractor.extract_page(application_page, DOCUMENT_URL)

        assert record.description == "Dwelling addition"

    def test_application_number_whitespace_is_removed(self, anchor_extractor, application_page):
        application_page[1] = Fragment(" 580 / 123 / 18 ", x=55, y=0, width=40, height=10)

        record = anchor_extractor.extract_page(application_page, DOCUMENT_URL)

        assert record.application_number == "580/123/18"

    def test_address_keeps_inner_whitespace(self, anchor_extractor, application_page):
        application_page[3] = Fragment(" 10  Main St ", x=0, y=35, width=60, height=10)

        record = anchor_extractor.extract_page(application_page, DOCUMENT_URL)

        assert record.address == "10  Main St"

    @pytest.mark.parametrize("text, expected", [("5/03/2019", "2019-03-05"), ("32/13/2019", ""), ("", "")])
    def test_received_date(self, anchor_extractor, application_page, text, expected):
        application_page += [
            Fragment("Application Rec'd Council", x=200, y=50, width=120, height=10),
            Fragment(text, x=330, y=50, width=50, height=10),
        ]

        record = anchor_extractor.extract_page(application_page, DOCUMENT_URL)

        assert record.received_date == expected

    def test_pages_are_independent(self, anchor_extractor, application_page):
        second_page = [
            Fragment("Dev App No", x=0, y=0, width=50, height=10),
            Fragment("456/2018", x=55, y=0, width=40, height=10),
            Fragment("Property Detail", x=0, y=20, width=60, height=10),
            Fragment("2 High St", x=0, y=35, width=60, height=10),
        ]
        continuation_page = [Fragment("Fees", x=0, y=0, width=30, height=10)]

        records = anchor_extractor.extract_pages([application_page, continuation_page, second_page], DOCUMENT_URL)

        assert [r.application_number for r in records] == ["123/2018", "456/2018"]

    def test_parallel_extraction_keeps_page_order(self, application_page):
        pages = []
        for number in range(6):
            page = list(application_page)
            page[1] = Fragment(f"{number}/2018", x=55, y=0, width=40, height=10)
            pages.append(page)

        records = AnchorBasedExtractor("mailto:council@example.com", max_workers=4).extract_pages(pages, DOCUMENT_URL)

        assert [r.application_number for r in records] == [f"{n}/2018" for n in range(6)]

    def test_address_continuing_on_next_page_is_not_merged(self, anchor_extractor, application_page):
        """Each page stands alone, unlike the row-clustered extractor."""
        overflow = [Fragment("MOUNT BARKER SA 5251", x=0, y=0, width=90, height=10)]

        records = anchor_extractor.extract_pages([application_page, overflow], DOCUMENT_URL)

        assert len(records) == 1
        assert records[0].address == "10 Main St"

    def test_extract_decodes_the_document(self, anchor_extractor, application_page, monkeypatch):
        monkeypatch.setattr(extractor_module, "read_fragments", lambda data: [application_page, []])

        records = anchor_extractor.extract(b"%PDF", DOCUMENT_URL)

        assert [r.to_dict()["address"] for r in records] == ["10 Main St"]
