"""
Unit tests for buffered file transfer.

Tests read_file() and write_file() in texcaller.contexts.rendering.file_transfer.
"""

import io

import pytest

from texcaller.contexts.rendering import file_transfer
from texcaller.contexts.rendering.exceptions import FileIOError
from texcaller.contexts.rendering.file_transfer import read_file, write_file


class ShortReadFile(io.BytesIO):
    """In-memory file whose read() delivers only half of what was asked for."""

    def read(self, size=-1):
        return super().read(size // 2)


class ShortWriteFile(io.BytesIO):
    """In-memory file whose write() accepts only the first byte."""

    def write(self, data):
        return super().write(data[:1])


class TestReadFile:
    """Tests for read_file function."""

    @pytest.mark.unit
    def test_read_binary_content(self, tmp_path):
        """Test that arbitrary bytes are returned unchanged."""
        path = tmp_path / "data.bin"
        content = bytes(range(256)) * 4
        path.write_bytes(content)

        assert read_file(path) == content

    @pytest.mark.unit
    def test_read_empty_file(self, tmp_path):
        path = tmp_path / "empty.aux"
        path.write_bytes(b"")

        assert read_file(path) == b""

    @pytest.mark.unit
    def test_read_missing_file(self, tmp_path):
        """Test that a missing file names the path and the open phase."""
        path = tmp_path / "texput.aux"

        with pytest.raises(FileIOError) as exc_info:
            read_file(path)

        assert exc_info.value.operation == "open"
        assert exc_info.value.path == path
        assert str(exc_info.value) == (
            f'Unable to open file "{path}" for reading: No such file or directory.'
        )

    @pytest.mark.unit
    def test_read_directory(self, tmp_path):
        with pytest.raises(FileIOError) as exc_info:
            read_file(tmp_path)

        assert exc_info.value.operation == "open"

    @pytest.mark.unit
    def test_short_read_is_an_error(self, tmp_path, monkeypatch):
        """Test that fewer bytes than the measured size is reported, not truncated."""
        path = tmp_path / "texput.pdf"
        monkeypatch.setattr(
            file_transfer, "open", lambda *args: ShortReadFile(b"0123456789"), raising=False
        )

        with pytest.raises(FileIOError) as exc_info:
            read_file(path)

        assert exc_info.value.operation == "read"
        assert str(exc_info.value) == (
            f'Unable to read 10 bytes from file "{path}": Got only 5 bytes.'
        )


class TestWriteFile:
    """Tests for write_file function."""

    @pytest.mark.unit
    def test_write_returns_byte_count(self, tmp_path):
        path = tmp_path / "texput.tex"
        source = b"\\relax Hello\n\\bye\n"

        assert write_file(path, source) == len(source)
        assert path.read_bytes() == source

    @pytest.mark.unit
    def test_write_truncates_existing_file(self, tmp_path):
        """Test that old content never survives an overwrite."""
        path = tmp_path / "texput.tex"
        path.write_bytes(b"a much longer previous content")

        write_file(path, b"short")

        assert path.read_bytes() == b"short"

    @pytest.mark.unit
    def test_write_into_missing_directory(self, tmp_path):
        path = tmp_path / "missing" / "texput.tex"

        with pytest.raises(FileIOError) as exc_info:
            write_file(path, b"x")

        assert exc_info.value.operation == "open"
        assert str(exc_info.value) == (
            f'Unable to open file "{path}" for writing: No such file or directory.'
        )

    @pytest.mark.unit
    def test_partial_write_is_an_error(self, tmp_path, monkeypatch):
        path = tmp_path / "texput.tex"
        monkeypatch.setattr(
            file_transfer, "open", lambda *args: ShortWriteFile(), raising=False
        )

        with pytest.raises(FileIOError) as exc_info:
            write_file(path, b"abc")

        assert exc_info.value.operation == "write"
        assert str(exc_info.value) == (
            f'Unable to write 3 bytes to file "{path}": Only 1 bytes were written.'
        )
