# rows.py - reconstructs table rows from text runs by vertical proximity
#
# The clustering follows pdf2table by Sam Decrock (MIT License,
# https://github.com/SamDecrock/pdf2table).

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .extractor import PageExtractor
from .geometry import TextRun
from .pdf_process import read_text_runs
from .records import ExtractedRecord, normalize_application_number, parse_received_date, today_iso

logger = logging.getLogger(__name__)

# A first cell starting with one of these is a title reference, which ends the address
TITLE_REFERENCE_PREFIXES = ("LOT:", "ALT:", "A:", "U:", "PCE:", "SEC:")


@dataclass
class Row:
    y: float
    entries: List[Tuple[str, float]] = field(default_factory=list)

    def add(self, text_run: TextRun):
        for text in text_run.runs:
            self.entries.append((text, text_run.x))


def smallest_y_separation(text_runs: Sequence[TextRun]) -> float:
    """Smallest positive vertical gap between two runs sharing an x co-ordinate, or 0."""
    same_x: Dict[float, List[float]] = defaultdict(list)
    for text_run in text_runs:
        same_x[text_run.x].append(text_run.y)

    smallest = None
    for ys in same_x.values():
        for i in range(len(ys)):
            for j in range(i + 1, len(ys)):
                distance = abs(ys[j] - ys[i])
                if distance > 0 and (smallest is None or distance < smallest):
                    smallest = distance
    return smallest if smallest is not None else 0.0


def build_rows(text_runs: Sequence[TextRun], tolerance: Optional[float] = None) -> List[Row]:
    """
    Group one page's runs into rows, each sorted by x, the rows sorted by y.

    A run joins the most recently created row whose y is strictly within the
    tolerance of its own, otherwise it starts a new row.
    """
    if tolerance is None:
        tolerance = smallest_y_separation(text_runs)

    rows: List[Row] = []
    for text_run in text_runs:
        for row in reversed(rows):
            if row.y - tolerance < text_run.y < row.y + tolerance:
                row.add(text_run)
                break
        else:
            row = Row(y=text_run.y)
            row.add(text_run)
            rows.append(row)

    for row in rows:
        row.entries.sort(key=lambda entry: entry[1])
    rows.sort(key=lambda row: row.y)
    return rows


def convert_pages_to_rows(pages: Sequence[Sequence[TextRun]]) -> List[List[str]]:
    """Flatten every page's rows, in order, into rows of plain text."""
    flattened = []
    for page_num, text_runs in enumerate(pages, start=1):
        rows = build_rows(text_runs)
        logger.debug(f"Page {page_num}: {len(text_runs)} text run(s) in {len(rows)} row(s)")
        for row in rows:
            flattened.append([text for text, _ in row.entries])
    return flattened


class RowClusteredExtractor(PageExtractor):
    """
    Reads applications off reconstructed rows with a small state machine.

    Unlike the anchor-based extractor the state carries across page breaks, so
    an address continuing on the next page is still captured.
    """

    name = "rows"

    def extract_rows(self, rows: Sequence[Sequence[str]], information_url: str) -> List[ExtractedRecord]:
        records = []
        record = None
        is_address = False

        for row in rows:
            text = row[0].strip().lower() if row else ""

            if text.startswith("dev app no") and len(row) >= 3:
                record = ExtractedRecord(
                    application_number=normalize_application_number(row[1]),
                    address="",
                    description=row[2].strip(),
                    information_url=information_url,
                    comment_url=self.comment_url,
                    scrape_date=today_iso(self.today),
                )
                records.append(record)
                is_address = False
                continue

            if record is None:
                continue

            if not is_address and text.startswith("property detail"):
                is_address = True
            elif is_address and (text == "" or text.startswith("fees")):
                is_address = False
                record = None
            elif is_address and text.startswith("property detail") and len(row) >= 2:
                self._append_address(record, row[1])
            elif is_address and row[0].strip().startswith(TITLE_REFERENCE_PREFIXES):
                is_address = False
                record = None
            elif is_address:
                self._append_address(record, row[0])

            if record is not None and record.received_date == "":
                record.received_date = self._find_received_date(row)

        return records

    @staticmethod
    def _append_address(record: ExtractedRecord, text: str):
        text = text.strip()
        record.address = text if record.address == "" else f"{record.address} {text}"

    @staticmethod
    def _find_received_date(row: Sequence[str]) -> str:
        for index in range(len(row) - 1):
            if row[index].strip().lower().startswith("application rec'd council"):
                received_date = parse_received_date(row[index + 1])
                if received_date:
                    return received_date
        return ""

    def extract_text_runs(self, pages: Sequence[Sequence[TextRun]], information_url: str) -> List[ExtractedRecord]:
        return self.extract_rows(convert_pages_to_rows(pages), information_url)

    def extract(self, pdf_bytes: bytes, information_url: str) -> List[ExtractedRecord]:
        return self.extract_text_runs(read_text_runs(pdf_bytes), information_url)
