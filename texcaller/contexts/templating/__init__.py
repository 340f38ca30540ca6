"""
Templating Context

Responsibilities:
- Makes plain text safe for embedding in LaTeX markup

Owns: LaTeX special-character escaping
Never: Runs the TeX engine
"""

from texcaller.contexts.templating.escaping import LATEX_ESCAPES, escape_latex

__all__ = ["escape_latex", "LATEX_ESCAPES"]
