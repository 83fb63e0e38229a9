# database.py - sqlite store for development application records

import logging
import sqlite3
from pathlib import Path

from .records import ExtractedRecord

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS data (
  council_reference TEXT PRIMARY KEY,
  address TEXT,
  description TEXT,
  info_url TEXT,
  comment_url TEXT,
  date_scraped TEXT,
  date_received TEXT,
  on_notice_from TEXT,
  on_notice_to TEXT
);
"""


def connect_db(db_path: Path) -> sqlite3.Connection:
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.executescript(SCHEMA_SQL)
    conn.commit()
    return conn


def insert_record(conn: sqlite3.Connection, record: ExtractedRecord) -> bool:
    """Insert the record unless its application number is already stored."""
    cursor = conn.execute(
        "INSERT OR IGNORE INTO data "
        "(council_reference, address, description, info_url, comment_url, date_scraped, date_received) "
        "VALUES (:application_number, :address, :description, :information_url, :comment_url, "
        ":scrape_date, :received_date)",
        record.to_dict(),
    )
    conn.commit()
    summary = (f'application "{record.application_number}" with address "{record.address}" '
               f'and description "{record.description}"')
    if cursor.rowcount > 0:
        logger.info(f"    Inserted: {summary} into the database.")
        return True
    logger.info(f"    Skipped: {summary} because it was already present in the database.")
    return False
