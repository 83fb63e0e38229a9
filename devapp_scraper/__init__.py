"""Extracts development applications from council register PDFs by text position."""

from .extractor import AnchorBasedExtractor, PageExtractor, find_closest_fragment
from .geometry import Direction, Fragment, TextRun, calculate_distance, is_overlap
from .records import ExtractedRecord, parse_received_date
from .rows import RowClusteredExtractor, build_rows, convert_pages_to_rows, smallest_y_separation

__all__ = [
    "AnchorBasedExtractor",
    "Direction",
    "ExtractedRecord",
    "Fragment",
    "PageExtractor",
    "RowClusteredExtractor",
    "TextRun",
    "build_rows",
    "calculate_distance",
    "convert_pages_to_rows",
    "find_closest_fragment",
    "is_overlap",
    "parse_received_date",
    "smallest_y_separation",
]
