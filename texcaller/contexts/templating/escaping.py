"""
LaTeX escaping for untrusted text.

Every character with a special meaning to LaTeX is replaced in a single pass,
so replacements are never escaped a second time.
"""

LATEX_ESCAPES = {
    "$": r"\$",
    "%": r"\%",
    "&": r"\&",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "[": "{[}",
    "]": "{]}",
    '"': "{''}",
    "\\": r"\textbackslash{}",
    "~": r"\textasciitilde{}",
    "<": r"\textless{}",
    ">": r"\textgreater{}",
    "^": r"\textasciicircum{}",
    # Breaks the ?` and !` ligatures
    "`": "{}`",
    "\n": "\\\\",
}

_ESCAPE_TABLE = str.maketrans(LATEX_ESCAPES)


def escape_latex(text: str) -> str:
    """
    Escape a string for direct use in LaTeX.

    Characters without special meaning pass through unchanged.

    Args:
        text: Plain text

    Returns:
        LaTeX source that typesets as the given text

    Example:
        >>> escape_latex("100% & $5_free")
        '100\\\\% \\\\& \\\\$5\\\\_free'
    """
    return text.translate(_ESCAPE_TABLE)
