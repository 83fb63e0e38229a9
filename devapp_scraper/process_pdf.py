# process_pdf.py - retrieves register documents and stores their applications

import json
import logging
import random
import time
from pathlib import Path
from typing import Callable, List, Optional, Sequence
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from . import config
from .database import connect_db, insert_record
from .extractor import AnchorBasedExtractor, PageExtractor
from .pdf_process import text_runs_from_pdf2json
from .records import ExtractedRecord
from .rows import RowClusteredExtractor

logger = logging.getLogger(__name__)

EXTRACTORS = {
    AnchorBasedExtractor.name: AnchorBasedExtractor,
    RowClusteredExtractor.name: RowClusteredExtractor,
}


def create_extractor(strategy: str, comment_url: str = config.COMMENT_URL,
                     workers: int = config.PAGE_WORKERS) -> PageExtractor:
    """Build the extractor for a strategy name. Only the anchor strategy spreads pages over workers."""
    if strategy == AnchorBasedExtractor.name:
        return AnchorBasedExtractor(comment_url, max_workers=workers)
    return EXTRACTORS[strategy](comment_url)


def create_session(proxy_url: Optional[str] = config.PROXY_URL) -> requests.Session:
    session = requests.Session()
    if proxy_url:
        session.proxies.update({"http": proxy_url, "https": proxy_url})
    return session


def fetch_document_urls(session: requests.Session, url: str) -> List[str]:
    """Absolute URLs of the PDF documents linked from the register page, without duplicates."""
    logger.info(f"Retrieving page: {url}")
    response = session.get(url, timeout=config.REQUEST_TIMEOUT)
    response.raise_for_status()
    soup = BeautifulSoup(response.text, "html.parser")

    pdf_urls = []
    for link in soup.select(config.PDF_LINK_SELECTOR):
        pdf_url = urljoin(url, link["href"])
        if pdf_url not in pdf_urls:
            pdf_urls.append(pdf_url)
    return pdf_urls


def select_document_urls(pdf_urls: Sequence[str], rng: random.Random = None,
                         limit: int = config.MAX_DOCUMENTS) -> List[str]:
    """The first (most recent) document plus randomly chosen others, up to the limit."""
    if not pdf_urls or limit <= 0:
        return []
    rng = rng or random.Random()
    others = list(pdf_urls[1:])
    return [pdf_urls[0]] + rng.sample(others, min(limit - 1, len(others)))


def polite_delay(rng: random.Random = None, sleep: Callable[[float], None] = time.sleep) -> float:
    rng = rng or random.Random()
    seconds = config.DELAY_BASE_SECONDS + rng.randrange(config.DELAY_RANDOM_SECONDS)
    sleep(seconds)
    return seconds


def download_document(session: requests.Session, url: str) -> bytes:
    logger.info(f"Retrieving document: {url}")
    response = session.get(url, timeout=config.REQUEST_TIMEOUT)
    response.raise_for_status()
    return response.content


def process_document(extractor: PageExtractor, pdf_bytes: bytes, url: str) -> List[ExtractedRecord]:
    """Extract the records of one document; a document that cannot be parsed yields none."""
    logger.info(f"Parsing document: {url}")
    try:
        records = extractor.extract(pdf_bytes, url)
    except Exception as e:
        logger.error(f"Failed to parse {url}: {e}", exc_info=True)
        return []
    logger.info(f"Parsed {len(records)} development application(s) from document: {url}")
    return records


def process_file(path: Path, strategy: str = AnchorBasedExtractor.name,
                 comment_url: str = config.COMMENT_URL,
                 workers: int = config.PAGE_WORKERS) -> List[ExtractedRecord]:
    """
    Extract records from a local PDF, or from a pdf2json export (.json).

    A pdf2json export carries no fragment sizes, so it is always read with the
    row-clustered extractor.
    """
    path = Path(path)
    information_url = path.resolve().as_uri()
    if path.suffix.lower() == ".json":
        if strategy != RowClusteredExtractor.name:
            logger.warning(f"{path.name} is a pdf2json export, using the {RowClusteredExtractor.name} strategy")
        extractor = RowClusteredExtractor(comment_url)
        try:
            with open(path, "r", encoding="utf-8") as f:
                pages = text_runs_from_pdf2json(json.load(f))
            return extractor.extract_text_runs(pages, information_url)
        except Exception as e:
            logger.error(f"Failed to parse {path}: {e}", exc_info=True)
            return []

    extractor = create_extractor(strategy, comment_url, workers)
    return process_document(extractor, path.read_bytes(), information_url)


def store_records(db_path: Path, records: Sequence[ExtractedRecord]) -> int:
    conn = connect_db(db_path)
    try:
        return sum(1 for record in records if insert_record(conn, record))
    finally:
        conn.close()


def run(url: str = config.DEVELOPMENT_APPLICATIONS_URL,
        db_path: Path = Path(config.DATABASE_PATH),
        strategy: str = AnchorBasedExtractor.name,
        limit: int = config.MAX_DOCUMENTS,
        workers: int = config.PAGE_WORKERS,
        delay: bool = True,
        session: requests.Session = None,
        rng: random.Random = None) -> int:
    """Scrape the register and store new applications. Returns the number inserted."""
    session = session or create_session()
    rng = rng or random.Random()
    extractor = create_extractor(strategy, config.COMMENT_URL, workers)

    pdf_urls = fetch_document_urls(session, url)
    if not pdf_urls:
        logger.warning("No PDF URLs were found on the page.")
        return 0

    inserted = 0
    for pdf_url in select_document_urls(pdf_urls, rng, limit):
        if delay:
            polite_delay(rng)
        try:
            pdf_bytes = download_document(session, pdf_url)
        except requests.RequestException as e:
            logger.error(f"Failed to retrieve {pdf_url}: {e}", exc_info=True)
            continue
        records = process_document(extractor, pdf_bytes, pdf_url)
        inserted += store_records(db_path, records)
    return inserted
