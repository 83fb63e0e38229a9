"""Shared fixtures for the extractor tests."""

from datetime import date

import fitz
import pytest

from devapp_scraper.extractor import AnchorBasedExtractor
from devapp_scraper.geometry import Fragment
from devapp_scraper.rows import RowClusteredExtractor

COMMENT_URL = "mailto:council@example.com"
DOCUMENT_URL = "https://example.com/register/2019-03.pdf"
TODAY = date(2019, 3, 20)


@pytest.fixture
def anchor_extractor():
    return AnchorBasedExtractor(COMMENT_URL, today=TODAY)


@pytest.fixture
def row_extractor():
    return RowClusteredExtractor(COMMENT_URL, today=TODAY)


@pytest.fixture
def application_page():
    """A register page with a number, an address and no description or received date."""
    return [
        Fragment("Dev App No", x=0, y=0, width=50, height=10),
        Fragment("123/2018", x=55, y=0, width=40, height=10),
        Fragment("Property Detail", x=0, y=20, width=60, height=10),
        Fragment("10 Main St", x=0, y=35, width=60, height=10),
    ]


@pytest.fixture
def make_pdf():
    """Build a PDF from a list of pages, each a list of (text, x, baseline_y)."""
    def _make_pdf(pages):
        doc = fitz.open()
        for texts in pages:
            page = doc.new_page(width=595, height=842)
            for text, x, y in texts:
                page.insert_text((x, y), text, fontsize=10, fontname="helv")
        data = doc.tobytes()
        doc.close()
        return data
    return _make_pdf
