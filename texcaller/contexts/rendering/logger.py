"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from loguru directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from texcaller.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(
    log_dir: Optional[Path] = None, engine: Optional[str] = None, verbose: bool = False
) -> Optional[Path]:
    """
    Setup logger for rendering context.

    Args:
        log_dir: Directory for this rendering session (None for console only)
        engine: Engine command recorded in the provenance header
        verbose: Show DEBUG messages on the console

    Returns:
        Path to log file, or None when logging to the console only
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={"Engine": engine} if engine else None,
        verbose=verbose,
    )


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_conversion_start(
    engine: str, source_format: str, dest_format: str, source_size: int, max_runs: int
) -> None:
    """Log start of a conversion with context."""
    _log_info(f"Converting {source_format} to {dest_format} with {engine}")
    _log_debug(f"  Source: {source_size} bytes")
    _log_debug(f"  Max runs: {max_runs}")


def log_conversion_result(
    result,  # ConversionResult
    elapsed_time: float,
    transcript: Optional[str] = None,
    verbose: bool = False,
) -> None:
    """
    Log conversion result with diagnostics.

    Args:
        result: ConversionResult from run_conversion()
        elapsed_time: Time taken to convert
        transcript: Engine log transcript, if one was produced
        verbose: Dump the transcript even on success
    """
    if result.success:
        _log_success(f"Conversion succeeded after {result.runs} runs ({elapsed_time:.2f}s)")
        if result.page_count is not None:
            _log_debug(f"  Pages: {result.page_count}")
    else:
        # First line only, the transcript follows below
        summary = result.info.splitlines()[0] if result.info else ""
        _log_error(f"Conversion failed ({elapsed_time:.2f}s): {summary}")

    # Use opt(raw=True) so multi-line engine output is not prefixed line by line
    if transcript and (verbose or not result.success):
        logger.opt(raw=True).debug(
            f"\n{'=' * 80}\nENGINE LOG:\n{'=' * 80}\n{transcript}\n"
        )
