"""
Shared utilities for texcaller.

Common functionality used across contexts:
- Logger setup with provenance
- PDF inspection
"""

from texcaller.utils.logger import setup_logger
from texcaller.utils.pdf_processing import page_count

__all__ = ["setup_logger", "page_count"]
