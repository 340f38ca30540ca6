"""
Rendering Context

Responsibilities:
- Validates conversion requests and picks the TeX engine
- Owns the temporary workspace (creation, staging, recursive removal)
- Runs the engine until the auxiliary output stabilizes
- Collects the engine log into the diagnostic

Owns: engine invocation, workspace files, diagnostics
Never: Parses or validates TeX markup
"""

from texcaller.contexts.rendering.compiler import (
    DEFAULT_MAX_RUNS,
    ENGINES,
    ConversionRequest,
    ConversionResult,
    convert,
    run_conversion,
)
from texcaller.contexts.rendering.exceptions import (
    ArgumentError,
    ConversionError,
    ConvergenceError,
    FileIOError,
    ProcessError,
    WorkspaceError,
)

__all__ = [
    "convert",
    "run_conversion",
    "ConversionRequest",
    "ConversionResult",
    "DEFAULT_MAX_RUNS",
    "ENGINES",
    "ConversionError",
    "ArgumentError",
    "WorkspaceError",
    "FileIOError",
    "ProcessError",
    "ConvergenceError",
]
