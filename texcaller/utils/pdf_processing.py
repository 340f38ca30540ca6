"""PDF inspection helpers for conversion results."""

import io
from typing import Optional

from PyPDF2 import PdfReader


def page_count(pdf_bytes: bytes) -> Optional[int]:
    """Get page count from in-memory PDF bytes, or None if unreadable."""
    try:
        reader = PdfReader(io.BytesIO(pdf_bytes))
        return len(reader.pages)
    except Exception:
        return None
