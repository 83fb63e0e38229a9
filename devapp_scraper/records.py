# records.py - the extracted development application record

import re
from dataclasses import dataclass, asdict
from datetime import date
from typing import Dict, Optional

NO_DESCRIPTION = "No description provided"

# D/MM/YYYY, the leading zero of the day may be omitted
RECEIVED_DATE_PATTERN = re.compile(r"([0-9]{1,2})/([0-9]{2})/([0-9]{4})")

WHITESPACE_PATTERN = re.compile(r"\s")


@dataclass
class ExtractedRecord:
    application_number: str
    address: str
    description: str
    information_url: str
    comment_url: str
    scrape_date: str
    received_date: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def parse_received_date(text: Optional[str]) -> str:
    """
    Strictly parse a D/MM/YYYY date and return it as YYYY-MM-DD.

    Anything that does not match the pattern exactly, or is not a real calendar
    date, yields an empty string.
    """
    if text is None:
        return ""
    match = RECEIVED_DATE_PATTERN.fullmatch(text.strip())
    if not match:
        return ""
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return ""


def normalize_application_number(text: str) -> str:
    return WHITESPACE_PATTERN.sub("", text.strip())


def today_iso(today: Optional[date] = None) -> str:
    return (today or date.today()).isoformat()
