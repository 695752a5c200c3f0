from __future__ import annotations
import logging
import re
import fitz  # pymupdf

from app.errors import ExtractionError

logger = logging.getLogger(__name__)


def _clean_text(t: str) -> str:
    t = t.replace("\x00", " ")
    t = re.sub(r"[ \t]+", " ", t)
    t = re.sub(r"\n{3,}", "\n\n", t)
    return t.strip()


def extract_text_from_pdf_bytes(data: bytes) -> str:
    """
    Read every page of an in-memory PDF and return its plain text.
    Raises ExtractionError if the bytes are not a readable PDF. An empty
    string is a valid result here; callers decide what "no text" means.
    """
    if not data:
        raise ExtractionError("Could not read PDF file: empty upload")
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        raise ExtractionError(f"Could not read PDF file: {e}") from e

    try:
        chunks = []
        for page in doc:
            chunks.append(page.get_text("text"))
    except (RuntimeError, ValueError) as e:
        raise ExtractionError(f"Could not read PDF file: {e}") from e
    finally:
        doc.close()

    text = _clean_text("\n".join(chunks))
    logger.debug("Extracted %d chars from %d-byte PDF", len(text), len(data))
    return text
