"""
texcaller command-line interface

Commands:
    convert - Convert a TeX or LaTeX file to DVI or PDF
    escape  - Escape plain text for use in LaTeX

Examples:\n

    texcaller convert paper.tex                      # LaTeX to PDF next to the source

    texcaller convert plain.tex --from TeX --to DVI  # Plain TeX to DVI

    texcaller convert paper.tex --max-runs 3 -v      # Verbose, at most three runs

    echo 'R&D costs $5' | texcaller escape            # Escape stdin
"""

import sys
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from texcaller.contexts.rendering import (
    DEFAULT_MAX_RUNS,
    ENGINES,
    ConversionRequest,
    run_conversion,
)
from texcaller.contexts.rendering.exceptions import FileIOError
from texcaller.contexts.rendering.file_transfer import read_file, write_file
from texcaller.contexts.rendering.logger import setup_rendering_logger
from texcaller.contexts.templating import escape_latex

OUTPUT_SUFFIXES = {"DVI": ".dvi", "PDF": ".pdf"}

app = typer.Typer(
    help="Convert TeX/LaTeX sources to DVI or PDF and escape text for LaTeX",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("convert")
def convert_command(
    input_file: Annotated[
        Path,
        typer.Argument(help="TeX or LaTeX source file", exists=True, dir_okay=False),
    ],
    source_format: Annotated[
        str,
        typer.Option("--from", "-f", help="Source format: TeX or LaTeX"),
    ] = "LaTeX",
    dest_format: Annotated[
        str,
        typer.Option("--to", "-t", help="Destination format: DVI or PDF"),
    ] = "PDF",
    max_runs: Annotated[
        int,
        typer.Option(
            "--max-runs",
            "-n",
            help="Maximum number of engine runs (at least 2)",
        ),
    ] = DEFAULT_MAX_RUNS,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output file (default: input with .dvi/.pdf suffix)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug output and the full engine log"),
    ] = False,
    log_dir: Annotated[
        Optional[Path],
        typer.Option("--log-dir", help="Also write a render.log into this directory"),
    ] = None,
):
    """
    Convert a TeX or LaTeX file to DVI or PDF.

    Runs the engine until the .aux file stops changing and prints the
    diagnostic (including the engine log on failure).

    Examples:\n

        $ texcaller convert paper.tex                  # LaTeX to PDF

        $ texcaller convert paper.tex --to DVI         # LaTeX to DVI

        $ texcaller convert paper.tex -o out/paper.pdf # Explicit output path
    """
    setup_rendering_logger(
        log_dir=log_dir, engine=ENGINES.get((source_format, dest_format)), verbose=verbose
    )

    try:
        source = read_file(input_file)
    except FileIOError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"\nConverting: {input_file}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"{source_format} -> {dest_format}, at most {max_runs} runs")
    typer.echo("")

    result = run_conversion(
        ConversionRequest(source, source_format, dest_format, max_runs), verbose=verbose
    )

    if not result.success:
        typer.secho("✗ Conversion failed", fg=typer.colors.RED, bold=True)
        typer.echo(result.info)
        raise typer.Exit(code=1)

    if output is None:
        output = input_file.with_suffix(OUTPUT_SUFFIXES[dest_format])
    try:
        write_file(output, result.output)
    except FileIOError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho("✓ Conversion succeeded", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  {result.info.splitlines()[0]}")
    if result.page_count is not None:
        typer.echo(f"  Pages: {result.page_count}")
    typer.echo(f"  Output: {output}")
    typer.echo("")


@app.command("escape")
def escape_command(
    text: Annotated[
        Optional[str],
        typer.Argument(help="Text to escape (default: read from stdin)"),
    ] = None,
):
    """
    Escape plain text for use in LaTeX.

    Examples:\n

        $ texcaller escape '100% & $5_free'

        $ cat notes.txt | texcaller escape
    """
    if text is None:
        text = sys.stdin.read()
    typer.echo(escape_latex(text), nl=False)


if __name__ == "__main__":
    app()
