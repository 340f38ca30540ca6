"""
texcaller - Convert TeX and LaTeX sources to DVI or PDF

Runs the TeX engine inside a throwaway workspace as often as needed until the
auxiliary (.aux) output stops changing, then hands back the rendered document
together with a human-readable diagnostic.

Architecture:
- Rendering Context: workspace lifecycle, engine runs, diagnostics
- Templating Context: escaping plain text for embedding in LaTeX markup
"""

from loguru import logger

from texcaller.contexts.rendering import (
    ConversionRequest,
    ConversionResult,
    convert,
    run_conversion,
)
from texcaller.contexts.templating import escape_latex

__version__ = "0.1.0"

# Silent by default; setup_logger() turns texcaller logging back on
logger.disable("texcaller")

__all__ = [
    "convert",
    "run_conversion",
    "ConversionRequest",
    "ConversionResult",
    "escape_latex",
]
