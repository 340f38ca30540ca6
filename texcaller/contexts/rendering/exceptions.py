"""Exceptions raised inside the rendering context.

The public conversion API never lets these escape: run_conversion() turns
every ConversionError into the diagnostic string of its result.
"""

from pathlib import Path
from typing import Optional


class ConversionError(Exception):
    """
    Base class for all conversion failures.

    Attributes:
        message: Human-readable description, used verbatim as diagnostic
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ArgumentError(ConversionError):
    """
    Exception raised when a conversion request is rejected before any side effect.

    Attributes:
        source_format: Requested source format
        dest_format: Requested destination format
        max_runs: Requested run limit
    """

    def __init__(
        self,
        message: str,
        source_format: Optional[str] = None,
        dest_format: Optional[str] = None,
        max_runs: Optional[int] = None,
    ):
        self.source_format = source_format
        self.dest_format = dest_format
        self.max_runs = max_runs
        super().__init__(message)


class WorkspaceError(ConversionError):
    """
    Exception raised when a temporary workspace cannot be created or removed.

    Attributes:
        path: Directory (or template) the failure refers to
    """

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)


class FileIOError(ConversionError):
    """
    Exception raised when reading or writing a workspace file fails.

    Attributes:
        path: File that could not be transferred
        operation: Failing phase ("open", "seek", "size", "allocate", "read",
            "write", "close")
    """

    def __init__(self, message: str, path: Optional[Path] = None, operation: Optional[str] = None):
        self.path = path
        self.operation = operation
        super().__init__(message)


class ProcessError(ConversionError):
    """
    Exception raised when an engine run cannot be started or does not exit cleanly.

    Attributes:
        command: Engine command name
        returncode: Exit status for a non-zero exit
        signal: Signal number when the engine was killed
    """

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        returncode: Optional[int] = None,
        signal: Optional[int] = None,
    ):
        self.command = command
        self.returncode = returncode
        self.signal = signal
        super().__init__(message)


class ConvergenceError(ConversionError):
    """
    Exception raised when the auxiliary output never stabilizes.

    Attributes:
        max_runs: Run limit that was exhausted
    """

    def __init__(self, message: str, max_runs: Optional[int] = None):
        self.max_runs = max_runs
        super().__init__(message)
