# extractor.py - page extractors that turn positioned text into records

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import List, Optional, Sequence

from .geometry import INFINITE_DISTANCE, Direction, Fragment, calculate_distance, is_overlap
from .pdf_process import read_fragments
from .records import (
    NO_DESCRIPTION,
    ExtractedRecord,
    normalize_application_number,
    parse_received_date,
    today_iso,
)

logger = logging.getLogger(__name__)

APPLICATION_NUMBER_LABEL = "Dev App No"
RECEIVED_DATE_LABEL = "Application Rec'd Council"
ADDRESS_LABEL = "Property Detail"


def find_anchor(fragments: Sequence[Fragment], label: str) -> Optional[Fragment]:
    """First fragment whose text starts with the label, ignoring case."""
    label = label.lower()
    for fragment in fragments:
        if fragment.text.lower().startswith(label):
            return fragment
    return None


def find_closest_fragment(fragments: Sequence[Fragment], label: str, direction: Direction) -> Optional[Fragment]:
    """
    Find the fragment closest to the labelled anchor in the given direction.

    Only fragments overlapping the anchor in that direction are candidates, and
    a candidate must be strictly closer than the best so far to replace it, so
    the first one wins a tie. Returns None when there is no anchor or no
    candidate at a finite distance.
    """
    anchor = find_anchor(fragments, label)
    if anchor is None:
        return None

    closest = None
    closest_distance = INFINITE_DISTANCE
    for fragment in fragments:
        if not is_overlap(anchor, fragment, direction):
            continue
        distance = calculate_distance(anchor, fragment, direction)
        if distance < closest_distance:
            closest = fragment
            closest_distance = distance
    return closest


class PageExtractor(ABC):
    """Turns a PDF document into development application records."""

    name = ""

    def __init__(self, comment_url: str, today: Optional[date] = None):
        self.comment_url = comment_url
        self.today = today

    @abstractmethod
    def extract(self, pdf_bytes: bytes, information_url: str) -> List[ExtractedRecord]:
        ...


class AnchorBasedExtractor(PageExtractor):
    """
    Locates each field by its proximity to a known label on the page.

    Every page is evaluated independently and yields at most one record, so an
    application that overflows onto a following page only keeps the fields
    found on its first page.
    """

    name = "anchor"

    def __init__(self, comment_url: str, today: Optional[date] = None, max_workers: int = 1):
        super().__init__(comment_url, today)
        self.max_workers = max_workers

    def extract_page(self, fragments: Sequence[Fragment], information_url: str) -> Optional[ExtractedRecord]:
        application_number_fragment = find_closest_fragment(fragments, APPLICATION_NUMBER_LABEL, Direction.RIGHT)
        description_fragment = None
        if application_number_fragment is not None:
            description_fragment = find_closest_fragment(fragments, application_number_fragment.text, Direction.RIGHT)
        received_date_fragment = find_closest_fragment(fragments, RECEIVED_DATE_LABEL, Direction.RIGHT)
        address_fragment = find_closest_fragment(fragments, ADDRESS_LABEL, Direction.DOWN)

        # The address search can land back on the label itself when nothing is below it
        if (application_number_fragment is None or
                application_number_fragment.text.strip() == "" or
                address_fragment is None or
                address_fragment.text.strip() == "" or
                address_fragment.text.strip().lower().startswith(ADDRESS_LABEL.lower())):
            return None

        description = NO_DESCRIPTION
        if description_fragment is not None and description_fragment.text.strip() != "":
            description = description_fragment.text.strip()

        received_date = ""
        if received_date_fragment is not None:
            received_date = parse_received_date(received_date_fragment.text)

        return ExtractedRecord(
            application_number=normalize_application_number(application_number_fragment.text),
            address=address_fragment.text.strip(),
            description=description,
            information_url=information_url,
            comment_url=self.comment_url,
            scrape_date=today_iso(self.today),
            received_date=received_date,
        )

    def extract_pages(self, pages: Sequence[Sequence[Fragment]], information_url: str) -> List[ExtractedRecord]:
        """Extract every page, in page order; pages share no state so they may run in parallel."""
        if self.max_workers > 1 and len(pages) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(executor.map(lambda page: self.extract_page(page, information_url), pages))
        else:
            results = [self.extract_page(page, information_url) for page in pages]

        records = []
        for page_num, record in enumerate(results, start=1):
            if record is None:
                logger.debug(f"Page {page_num}: no development application found")
                continue
            records.append(record)
        return records

    def extract(self, pdf_bytes: bytes, information_url: str) -> List[ExtractedRecord]:
        return self.extract_pages(read_fragments(pdf_bytes), information_url)
