"""Unit tests for the texcaller command-line interface."""

import subprocess
import sys
from pathlib import Path

import pytest
from loguru import logger
from typer.testing import CliRunner

from texcaller.cli import app
from texcaller.contexts.rendering import compiler

runner = CliRunner()

RENDERED = b"%rendered%"


def fake_engine(cmd, cwd=None, **kwargs):
    """Engine stand-in that succeeds on the first run without an .aux file."""
    (Path(cwd) / "texput.log").write_bytes(b"fake log\n")
    (Path(cwd) / "texput.pdf").write_bytes(RENDERED)
    (Path(cwd) / "texput.dvi").write_bytes(RENDERED)
    return subprocess.CompletedProcess(cmd, 0)


@pytest.fixture(autouse=True)
def restore_logger():
    """The convert command reconfigures loguru; restore the silent library default afterwards."""
    yield
    logger.remove()
    logger.add(sys.stderr)
    logger.disable("texcaller")


@pytest.fixture
def source_file(tmp_path, monkeypatch):
    base = tmp_path / "tmp"
    base.mkdir()
    monkeypatch.setenv("TMPDIR", str(base))
    monkeypatch.setattr(compiler.subprocess, "run", fake_engine)

    path = tmp_path / "doc.tex"
    path.write_text("\\documentclass{article}\\begin{document}Hi\\end{document}\n")
    return path


@pytest.mark.unit
def test_no_command_shows_help():
    result = runner.invoke(app, [])

    assert result.exit_code == 0
    assert "convert" in result.output
    assert "escape" in result.output


@pytest.mark.unit
def test_escape_argument():
    result = runner.invoke(app, ["escape", "100% & $5_free"])

    assert result.exit_code == 0
    assert result.output == "100\\% \\& \\$5\\_free"


@pytest.mark.unit
def test_escape_stdin():
    result = runner.invoke(app, ["escape"], input="R&D\n")

    assert result.exit_code == 0
    assert result.output == "R\\&D\\\\"


@pytest.mark.unit
def test_convert_writes_output_next_to_source(source_file):
    result = runner.invoke(app, ["convert", str(source_file)])

    assert result.exit_code == 0
    assert "Conversion succeeded" in result.output
    assert "Generated PDF (10 bytes) from LaTeX" in result.output
    assert source_file.with_suffix(".pdf").read_bytes() == RENDERED


@pytest.mark.unit
def test_convert_explicit_output_and_format(source_file, tmp_path):
    target = tmp_path / "out.dvi"

    result = runner.invoke(
        app, ["convert", str(source_file), "--from", "TeX", "--to", "DVI", "-o", str(target)]
    )

    assert result.exit_code == 0
    assert target.read_bytes() == RENDERED


@pytest.mark.unit
def test_convert_writes_log_file(source_file, tmp_path):
    log_dir = tmp_path / "logs"

    result = runner.invoke(app, ["convert", str(source_file), "--log-dir", str(log_dir)])

    assert result.exit_code == 0
    log_text = (log_dir / "render.log").read_text()
    assert "[render] Converting LaTeX to PDF with pdflatex" in log_text


@pytest.mark.unit
def test_convert_verbose_logs_engine_transcript(source_file, tmp_path):
    log_dir = tmp_path / "logs"

    result = runner.invoke(
        app, ["convert", str(source_file), "--verbose", "--log-dir", str(log_dir)]
    )

    assert result.exit_code == 0
    log_text = (log_dir / "render.log").read_text()
    assert "ENGINE LOG:" in log_text
    assert "fake log" in log_text
    assert "[render] Conversion succeeded after 1 runs" in log_text


@pytest.mark.unit
def test_convert_failure_exit_code(source_file):
    result = runner.invoke(app, ["convert", str(source_file), "--max-runs", "1"])

    assert result.exit_code == 1
    assert "Conversion failed" in result.output
    assert "Argument max_runs is 1, but must be >= 2." in result.output
    assert not source_file.with_suffix(".pdf").exists()


@pytest.mark.unit
def test_convert_missing_input(tmp_path):
    result = runner.invoke(app, ["convert", str(tmp_path / "missing.tex")])

    assert result.exit_code != 0
