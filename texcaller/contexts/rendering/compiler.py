"""
TeX/LaTeX Conversion Module

Converts TeX or LaTeX sources to DVI or PDF by running the matching engine
inside a temporary workspace until the .aux file stops changing.
"""

import os
import subprocess
import time
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from dotenv import load_dotenv

from texcaller.contexts.rendering.exceptions import (
    ArgumentError,
    ConversionError,
    ConvergenceError,
    FileIOError,
    ProcessError,
    WorkspaceError,
)
from texcaller.contexts.rendering.file_transfer import read_file, write_file
from texcaller.contexts.rendering.logger import (
    _log_debug,
    _log_error,
    _log_info,
    _log_warning,
    log_conversion_result,
    log_conversion_start,
)
from texcaller.contexts.rendering.workspace import (
    SOURCE_FILENAME,
    Workspace,
    create_workspace,
    remove_directory_recursively,
)
from texcaller.utils.pdf_processing import page_count

load_dotenv()


def max_runs_from_env() -> int:
    """Default run limit from $TEXCALLER_MAX_RUNS, or 5 if unset or empty."""
    return int(os.getenv("TEXCALLER_MAX_RUNS") or 5)


DEFAULT_MAX_RUNS = max_runs_from_env()

# (source format, destination format) -> engine command
ENGINES = {
    ("TeX", "DVI"): "tex",
    ("TeX", "PDF"): "pdftex",
    ("LaTeX", "DVI"): "latex",
    ("LaTeX", "PDF"): "pdflatex",
}

# Non-interactive, no \write18, stop at the first error, file:line:error messages
ENGINE_OPTIONS = [
    "-interaction=batchmode",
    "-halt-on-error",
    "-no-shell-escape",
    "-file-line-error",
]

# TeX engines write their transcripts in latin-1 (font metadata is not UTF-8)
LOG_ENCODING = "latin-1"


@dataclass(frozen=True)
class ConversionRequest:
    """
    Immutable description of one conversion.

    Attributes:
        source: TeX or LaTeX source (a str is encoded as UTF-8)
        source_format: "TeX" or "LaTeX"
        dest_format: "DVI" or "PDF"
        max_runs: Upper bound on engine runs (at least 2)
    """

    source: bytes
    source_format: str
    dest_format: str
    max_runs: int = DEFAULT_MAX_RUNS

    def __post_init__(self):
        if isinstance(self.source, str):
            object.__setattr__(self, "source", self.source.encode("utf-8"))

    @property
    def engine(self) -> str:
        """Engine command for the format pair; raises ArgumentError if there is none."""
        try:
            return ENGINES[(self.source_format, self.dest_format)]
        except KeyError:
            raise ArgumentError(
                f'Unable to convert from "{self.source_format}" to "{self.dest_format}".',
                source_format=self.source_format,
                dest_format=self.dest_format,
            ) from None

    def validate(self) -> str:
        """
        Check the request without touching the filesystem.

        A single run can never prove that the output is stable, so at least
        two runs must be allowed.

        Returns:
            Engine command to run

        Raises:
            ArgumentError: If the format pair is unknown or max_runs < 2
        """
        engine = self.engine
        if self.max_runs < 2:
            raise ArgumentError(
                f"Argument max_runs is {self.max_runs}, but must be >= 2.",
                max_runs=self.max_runs,
            )
        return engine


@dataclass
class ConversionResult:
    """
    Result of a conversion.

    Attributes:
        output: Rendered DVI or PDF bytes (None if conversion failed)
        info: Diagnostic, always set. Describes the output on success and
            the cause on failure, followed by the engine log if one exists
        runs: Run after which the .aux file was stable (None if failed)
        page_count: Number of pages of a PDF output (None otherwise)
    """

    output: Optional[bytes] = None
    info: str = ""
    runs: Optional[int] = None
    page_count: Optional[int] = None

    @property
    def success(self) -> bool:
        return self.output is not None


def _run_engine(engine: str, workspace: Workspace) -> None:
    """
    Run the engine once on the workspace source and wait for it.

    The engine gets no access to our standard streams; everything it has to
    say ends up in the log file.

    Raises:
        ProcessError: If the engine cannot be started, is killed by a
            signal or exits with a non-zero status
    """
    cmd = [engine, *ENGINE_OPTIONS, SOURCE_FILENAME]
    try:
        result = subprocess.run(
            cmd,
            cwd=workspace.path,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError as e:
        raise ProcessError(
            f'Unable to start command "{engine}": {e.strerror or e}.', command=engine
        ) from e

    # Negative return codes mean the process was killed by that signal
    if result.returncode < 0:
        signal_number = -result.returncode
        raise ProcessError(
            f'Command "{engine}" was terminated by signal {signal_number}.',
            command=engine,
            signal=signal_number,
        )
    if result.returncode != 0:
        raise ProcessError(
            f'Command "{engine}" terminated with exit status {result.returncode}.',
            command=engine,
            returncode=result.returncode,
        )


def _read_aux(workspace: Workspace) -> Optional[bytes]:
    """Read the .aux file, or None if the engine did not write one."""
    try:
        return read_file(workspace.aux_path)
    except FileIOError as e:
        _log_debug(f"  No auxiliary output: {e.message}")
        return None


def _run_until_stable(request: ConversionRequest, engine: str, workspace: Workspace) -> ConversionResult:
    """
    Stage the source and run the engine until two runs agree on the .aux file.

    Raises:
        FileIOError: If the source cannot be staged or the output is missing
        ProcessError: If an engine run fails
        ConvergenceError: If max_runs is exhausted
    """
    write_file(workspace.source_path, request.source)

    # A missing and an empty .aux file count as the same
    previous_aux = None
    for run in range(1, request.max_runs + 1):
        _run_engine(engine, workspace)
        aux = _read_aux(workspace)

        if (aux or b"") == (previous_aux or b""):
            output = read_file(workspace.dest_path(request.dest_format))
            _log_info(f"Auxiliary output stable after run {run}")
            return ConversionResult(
                output=output,
                info=(
                    f"Generated {request.dest_format} ({len(output)} bytes)"
                    f" from {request.source_format} ({len(request.source)} bytes)"
                    f" after {run} runs."
                ),
                runs=run,
                page_count=page_count(output) if request.dest_format == "PDF" else None,
            )

        _log_debug(f"Run {run}: auxiliary output changed ({len(aux or b'')} bytes)")
        previous_aux = aux

    _log_warning(f"Auxiliary output still changing after {request.max_runs} runs")
    raise ConvergenceError(
        f"Output didn't stabilize after {request.max_runs} runs.", max_runs=request.max_runs
    )


def _append_transcript(info: str, workspace: Workspace) -> Tuple[str, Optional[str]]:
    """
    Append the engine log to the diagnostic.

    Returns:
        Tuple of (diagnostic, transcript or None if there was no log)
    """
    try:
        transcript = read_file(workspace.log_path).decode(LOG_ENCODING)
    except FileIOError:
        return info, None

    if not info:
        return transcript, transcript
    return f"{info}\n\n{transcript}", transcript


def run_conversion(request: ConversionRequest, verbose: bool = False) -> ConversionResult:
    """
    Convert a TeX or LaTeX source to DVI or PDF.

    Validates the request, creates a fresh workspace, runs the engine until
    the auxiliary output stabilizes and always removes the workspace again.
    Failures never raise; they are reported through the result's diagnostic.

    If the workspace cannot be removed, that failure replaces whatever the
    conversion produced: the output is dropped and the diagnostic names the
    removal error.

    Args:
        request: What to convert and how
        verbose: Dump the engine log to the debug log even on success

    Returns:
        ConversionResult with output bytes on success and a diagnostic in
        every case
    """
    start_time = time.time()

    try:
        engine = request.validate()
    except ArgumentError as e:
        _log_error(e.message)
        return ConversionResult(info=e.message)

    log_conversion_start(
        engine, request.source_format, request.dest_format, len(request.source), request.max_runs
    )

    try:
        workspace = create_workspace()
    except WorkspaceError as e:
        _log_error(e.message)
        return ConversionResult(info=e.message)

    result = ConversionResult()
    transcript = None
    try:
        try:
            result = _run_until_stable(request, engine, workspace)
        except ConversionError as e:
            result = ConversionResult(info=e.message)
        result.info, transcript = _append_transcript(result.info, workspace)
    finally:
        try:
            remove_directory_recursively(workspace.path)
            _log_debug(f"Removed workspace {workspace.path}")
        except WorkspaceError as e:
            _log_error(f"Workspace cleanup failed: {e.message}")
            result = ConversionResult(info=e.message)

    log_conversion_result(result, time.time() - start_time, transcript, verbose=verbose)
    return result


def convert(
    source: Union[bytes, str],
    source_format: str,
    dest_format: str,
    max_runs: int = DEFAULT_MAX_RUNS,
) -> Tuple[Optional[bytes], str]:
    """
    Convert a TeX or LaTeX source to DVI or PDF.

    Args:
        source: Document source (str is encoded as UTF-8)
        source_format: "TeX" or "LaTeX"
        dest_format: "DVI" or "PDF"
        max_runs: Upper bound on engine runs (at least 2)

    Returns:
        Tuple of (output bytes or None on failure, diagnostic)

    Example:
        >>> pdf, info = convert(r"\\documentclass{article}...", "LaTeX", "PDF", 5)
        >>> info
        'Generated PDF (12345 bytes) from LaTeX (89 bytes) after 2 runs.'
    """
    result = run_conversion(ConversionRequest(source, source_format, dest_format, max_runs))
    return result.output, result.info
