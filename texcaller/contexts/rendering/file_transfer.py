"""
Buffered file transfer for workspace files.

Whole-file reads and writes with exact byte counts. Every failure raises
FileIOError naming the file, the failing phase and the system error text;
callers never see a partially read buffer.
"""

import os
from contextlib import suppress
from pathlib import Path
from typing import BinaryIO, Union

from texcaller.contexts.rendering.exceptions import FileIOError

PathLike = Union[str, Path]


def _reason(error: OSError) -> str:
    return error.strerror or str(error)


def read_file(path: PathLike) -> bytes:
    """
    Read a file completely.

    The size is measured up front by seeking to the end, and the read must
    return exactly that many bytes.

    Args:
        path: File to read

    Returns:
        Complete file content

    Raises:
        FileIOError: If opening, measuring, reading or closing fails, or
            the read comes up short
    """
    try:
        file = open(path, "rb")
    except OSError as e:
        raise FileIOError(
            f'Unable to open file "{path}" for reading: {_reason(e)}.', path, "open"
        ) from e

    try:
        data = _read_exactly(file, path)
    except FileIOError:
        with suppress(OSError):
            file.close()
        raise

    try:
        file.close()
    except OSError as e:
        raise FileIOError(
            f'Unable to close file "{path}" after reading: {_reason(e)}.', path, "close"
        ) from e

    return data


def _read_exactly(file: BinaryIO, path: PathLike) -> bytes:
    try:
        file.seek(0, os.SEEK_END)
    except OSError as e:
        raise FileIOError(
            f'Unable to seek to end of file "{path}": {_reason(e)}.', path, "seek"
        ) from e

    try:
        size = file.tell()
    except OSError as e:
        raise FileIOError(
            f'Unable to obtain size of file "{path}": {_reason(e)}.', path, "size"
        ) from e

    try:
        file.seek(0, os.SEEK_SET)
    except OSError as e:
        raise FileIOError(
            f'Unable to seek back to start of file "{path}": {_reason(e)}.', path, "seek"
        ) from e

    try:
        data = file.read(size)
    except MemoryError as e:
        raise FileIOError(
            f'Unable to allocate buffer for reading file "{path}": Out of memory.',
            path,
            "allocate",
        ) from e
    except OSError as e:
        raise FileIOError(
            f'Unable to read {size} bytes from file "{path}": {_reason(e)}.', path, "read"
        ) from e

    if len(data) != size:
        raise FileIOError(
            f'Unable to read {size} bytes from file "{path}": Got only {len(data)} bytes.',
            path,
            "read",
        )

    return data


def write_file(path: PathLike, data: bytes) -> int:
    """
    Write a buffer completely into a file.

    An existing file is truncated on open, so a failed write never leaves
    the old content behind.

    Args:
        path: File to write to
        data: Bytes to write

    Returns:
        Number of bytes written

    Raises:
        FileIOError: If opening, writing or closing fails, or fewer bytes
            than requested were written
    """
    try:
        file = open(path, "wb")
    except OSError as e:
        raise FileIOError(
            f'Unable to open file "{path}" for writing: {_reason(e)}.', path, "open"
        ) from e

    try:
        try:
            written = file.write(data)
        except OSError as e:
            raise FileIOError(
                f'Unable to write {len(data)} bytes to file "{path}": {_reason(e)}.',
                path,
                "write",
            ) from e
        if written != len(data):
            raise FileIOError(
                f'Unable to write {len(data)} bytes to file "{path}": '
                f"Only {written} bytes were written.",
                path,
                "write",
            )
    except FileIOError:
        with suppress(OSError):
            file.close()
        raise

    # Buffered data is flushed here, so disk-full errors surface on close
    try:
        file.close()
    except OSError as e:
        raise FileIOError(
            f'Unable to close file "{path}" after writing: {_reason(e)}.', path, "close"
        ) from e

    return written
