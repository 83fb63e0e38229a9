# __main__.py - command-line entry point for scraping the register

import argparse
import logging
import sys
from pathlib import Path

import requests

from . import config
from .process_pdf import EXTRACTORS, process_file, run, store_records

logger = logging.getLogger("devapp_scraper")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scrape development applications from the council register PDFs.")
    parser.add_argument("--url", default=config.DEVELOPMENT_APPLICATIONS_URL, help="Register page linking the PDFs")
    parser.add_argument("--database", type=Path, default=Path(config.DATABASE_PATH), help="sqlite database file")
    parser.add_argument("--strategy", choices=sorted(EXTRACTORS), default="anchor",
                        help="anchor: nearest-label lookup per page; rows: row reconstruction")
    parser.add_argument("--file", type=Path, help="Process a local PDF or pdf2json .json file instead of the register")
    parser.add_argument("--limit", type=int, default=config.MAX_DOCUMENTS, help="Documents to process per run")
    parser.add_argument("--workers", type=int, default=config.PAGE_WORKERS,
                        help="Threads for per-page extraction (anchor strategy only)")
    parser.add_argument("--no-delay", action="store_true", help="Do not pause between requests")
    parser.add_argument("--verbose", action="store_true", help="Log debug output")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')

    if args.file is not None:
        records = process_file(args.file, args.strategy, workers=args.workers)
        inserted = store_records(args.database, records)
        logger.info(f"Inserted {inserted} of {len(records)} development application(s) from {args.file}")
        return 0

    try:
        inserted = run(url=args.url, db_path=args.database, strategy=args.strategy,
                       limit=args.limit, workers=args.workers, delay=not args.no_delay)
    except requests.RequestException as e:
        logger.error(f"Could not read the register page {args.url}: {e}", exc_info=True)
        return 1
    logger.info(f"Complete. Inserted {inserted} new development application(s).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
