"""
Generic logger setup utilities.

Provides reusable loguru configuration with provenance tracking.
Context-specific wrappers should be defined in contexts/{context}/logger.py.
The library is silent until an entry point such as the CLI calls
setup_logger(), which also configures the sinks.
"""

import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

# Default level colors for console output
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}


def setup_logger(
    context_name: str,
    log_dir: Optional[Path] = None,
    extra_provenance: dict = None,
    verbose: bool = False,
) -> Optional[Path]:
    """
    Configure loguru for a context with provenance tracking.

    Sets up console output and, when a log directory is given, a DEBUG-level
    log file, then logs execution provenance (script, command, working
    directory, Python version, etc.).

    Args:
        context_name: Context identifier (e.g., "render")
        log_dir: Directory for this logging session (None for console only)
        extra_provenance: Additional key-value pairs for provenance header
        verbose: Show DEBUG messages on the console (default: INFO and above)

    Returns:
        Path to log file, or None when logging to the console only

    Example:
        from texcaller.utils.logger import setup_logger

        log_file = setup_logger(
            context_name="render",
            log_dir=Path("outs/logs"),
            extra_provenance={"Engine": "pdflatex"}
        )
    """
    logger.enable("texcaller")

    # Remove default logger
    logger.remove()

    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    log_file = None
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(exist_ok=True, parents=True)
        log_file = log_dir / f"{context_name}.log"

        # File handler captures everything
        logger.add(
            log_file, format="{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}", level="DEBUG"
        )

    logger.add(
        sys.stderr,
        format="{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>",
        level="DEBUG" if verbose else "INFO",
        colorize=True,
    )

    log_provenance(extra_provenance)

    return log_file


def log_provenance(extra_context: dict = None) -> None:
    """
    Log execution provenance to current logger.

    Logs standard context (script, command, working directory, Python version)
    plus any additional context provided.

    Args:
        extra_context: Additional key-value pairs to log
    """
    logger.debug("=" * 80)
    logger.debug(f"Script: {sys.argv[0]}")
    logger.debug(f"Command: {' '.join(sys.argv)}")
    logger.debug(f"Working directory: {Path.cwd()}")
    logger.debug(f"Python: {sys.version.split()[0]}")

    if extra_context:
        for key, value in extra_context.items():
            logger.debug(f"{key}: {value}")

    logger.debug("=" * 80)
