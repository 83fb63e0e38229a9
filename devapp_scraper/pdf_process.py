# pdf_process.py - decodes PDF documents into positioned text per page

import io
import logging
from typing import Any, Dict, List
from urllib.parse import unquote

import fitz  # PyMuPDF
from PyPDF2 import PdfReader

from .geometry import Fragment, TextRun

logger = logging.getLogger(__name__)


def read_fragments(pdf_bytes: bytes) -> List[List[Fragment]]:
    """
    Decode every page of a PDF into text fragments using PyMuPDF.

    Each non-empty span becomes one fragment positioned by its bounding box
    (top-left origin), in the order PyMuPDF emits them.
    """
    pages = []
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        for page_num, page in enumerate(doc):
            fragments = []
            for block in page.get_text("dict").get("blocks", []):
                if block.get("type", 0) != 0: continue  # image block
                for line in block.get("lines", []):
                    for span in line.get("spans", []):
                        text = span.get("text", "")
                        if not text.strip(): continue
                        x0, y0, x1, y1 = span["bbox"]
                        fragments.append(Fragment(text=text, x=x0, y=y0, width=x1 - x0, height=y1 - y0))
            logger.debug(f"Page {page_num + 1}: {len(fragments)} fragment(s)")
            pages.append(fragments)
    return pages


def read_text_runs(pdf_bytes: bytes) -> List[List[TextRun]]:
    """
    Decode every page of a PDF into text runs using PyPDF2's text visitor.

    The run position is the origin of the text matrix mapped through the current
    transformation matrix, with y flipped so the origin is the top of the page.
    """
    reader = PdfReader(io.BytesIO(pdf_bytes))
    pages = []
    for page_num, page in enumerate(reader.pages):
        page_top = float(page.mediabox.top)
        runs: List[TextRun] = []

        def visitor(text, cm, tm, font_dict, font_size):
            text = text.strip() if text else ""
            if not text: return
            x = tm[4] * cm[0] + tm[5] * cm[2] + cm[4]
            y = tm[4] * cm[1] + tm[5] * cm[3] + cm[5]
            runs.append(TextRun(x=round(x, 3), y=round(page_top - y, 3), runs=(text,)))

        page.extract_text(visitor_text=visitor)
        logger.debug(f"Page {page_num + 1}: {len(runs)} text run(s)")
        pages.append(runs)
    return pages


def text_runs_from_pdf2json(tree: Dict[str, Any]) -> List[List[TextRun]]:
    """Convert a pdf2json JSON tree into text runs, URL-decoding every sub-run."""
    form_image = tree.get("formImage", tree)
    pages = []
    for page in form_image.get("Pages", []):
        runs = []
        for text in page.get("Texts", []):
            decoded = tuple(unquote(r.get("T", "")) for r in text.get("R", []))
            runs.append(TextRun(x=float(text["x"]), y=float(text["y"]), runs=decoded))
        pages.append(runs)
    return pages
