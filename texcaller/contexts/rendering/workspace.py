"""
Temporary workspace management.

Each conversion runs inside its own uniquely named directory holding four
fixed file slots. The directory is created right before use and removed
recursively exactly once at the end of the conversion.
"""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from texcaller.contexts.rendering.exceptions import WorkspaceError
from texcaller.contexts.rendering.logger import _log_debug

load_dotenv()

# Used when TMPDIR is unset or empty
DEFAULT_TEMP_DIR = Path("/tmp")
WORKSPACE_PREFIX = "texcaller-temp-"

# Fixed names of all files the engine reads or writes
JOB_NAME = "texput"
SOURCE_FILENAME = f"{JOB_NAME}.tex"
AUX_FILENAME = f"{JOB_NAME}.aux"
LOG_FILENAME = f"{JOB_NAME}.log"
DEST_SUFFIXES = {"DVI": ".dvi", "PDF": ".pdf"}


def resolve_temp_dir() -> Path:
    """Return the base directory for workspaces: $TMPDIR, or /tmp if unset or empty."""
    tmpdir = os.getenv("TMPDIR")
    if not tmpdir:
        return DEFAULT_TEMP_DIR
    return Path(tmpdir)


@dataclass(frozen=True)
class Workspace:
    """
    An isolated directory owned by a single conversion.

    Attributes:
        path: Directory containing the source, aux, log and destination files
    """

    path: Path

    @property
    def source_path(self) -> Path:
        return self.path / SOURCE_FILENAME

    @property
    def aux_path(self) -> Path:
        return self.path / AUX_FILENAME

    @property
    def log_path(self) -> Path:
        return self.path / LOG_FILENAME

    def dest_path(self, dest_format: str) -> Path:
        """Path of the engine output for a destination format ("DVI" or "PDF")."""
        return self.path / f"{JOB_NAME}{DEST_SUFFIXES[dest_format]}"


def create_workspace(base_dir: Optional[Union[str, Path]] = None) -> Workspace:
    """
    Create a uniquely named workspace directory.

    Args:
        base_dir: Parent directory (default: resolve_temp_dir())

    Returns:
        The new Workspace

    Raises:
        WorkspaceError: If the directory cannot be created
    """
    base_dir = resolve_temp_dir() if base_dir is None else Path(base_dir)
    try:
        path = tempfile.mkdtemp(prefix=WORKSPACE_PREFIX, dir=base_dir)
    except OSError as e:
        template = f"{base_dir}/{WORKSPACE_PREFIX}XXXXXX"
        raise WorkspaceError(
            f'Unable to create temporary directory from template "{template}": '
            f"{e.strerror or e}.",
            Path(template),
        ) from e

    _log_debug(f"Created workspace {path}")
    return Workspace(Path(path))


def remove_directory_recursively(dirname: Union[str, Path]) -> None:
    """
    Remove a directory tree like ``rm -r``.

    Keeps going after errors on individual entries and remembers only the
    first one. If the directory itself is removed in the end, those errors
    no longer matter and the call succeeds. Otherwise the earliest recorded
    error is raised, or the failure of the final removal if nothing was
    recorded before it.

    Args:
        dirname: Directory to remove

    Raises:
        WorkspaceError: If the directory still exists afterwards
    """
    first_error: Optional[str] = None

    try:
        with os.scandir(dirname) as entries:
            for entry in entries:
                name = os.path.join(dirname, entry.name)
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                except OSError:
                    is_dir = False
                if is_dir:
                    try:
                        remove_directory_recursively(name)
                    except WorkspaceError as e:
                        if first_error is None:
                            first_error = e.message
                else:
                    try:
                        os.unlink(name)
                    except OSError as e:
                        if first_error is None:
                            first_error = f'Unable to remove file "{name}": {e.strerror or e}.'
    except OSError as e:
        if first_error is None:
            first_error = f'Unable to read directory entries of "{dirname}": {e.strerror or e}.'

    try:
        os.rmdir(dirname)
    except OSError as e:
        if first_error is None:
            first_error = f'Unable to remove directory "{dirname}": {e.strerror or e}.'
        raise WorkspaceError(first_error, Path(dirname)) from e
