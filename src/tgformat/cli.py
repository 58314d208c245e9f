"""Command-line interface for tgformat."""

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from tgformat import __version__
from tgformat.config import get_settings
from tgformat.core.session import SUPPORTED_EXTENSIONS, EditorSession, SessionError
from tgformat.formats import SUPPORTED_FORMATS, get_exporter

OUTPUT_SUFFIX = "-telegram"

app = typer.Typer(
    name="tgformat",
    help="Sanitize rich text and export it as Telegram HTML, MarkdownV2 or a quoted literal.",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"tgformat v{__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool, log_level: str) -> None:
    """Route library logging through rich on stderr."""
    level = logging.DEBUG if verbose else log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def generate_output_path(
    input_path: Path, format_name: str, output_dir: Optional[Path] = None
) -> Path:
    """Generate output path with -telegram suffix and the format's extension."""
    extension = get_exporter(format_name).extension
    output_name = f"{input_path.stem}{OUTPUT_SUFFIX}{extension}"

    if output_dir:
        return output_dir / output_name
    return input_path.parent / output_name


def process_file(
    input_path: Path,
    output_path: Optional[Path],
    format_name: str,
    to_stdout: bool,
    verbose: bool,
) -> bool:
    """Export a single file. Returns True on success."""
    if not input_path.exists():
        console.print(f"[red]Error:[/red] File not found: {input_path}")
        return False

    ext = input_path.suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        console.print(
            f"[yellow]Skipping:[/yellow] {input_path.name} "
            f"(unsupported format: {ext})"
        )
        return False

    settings = get_settings()
    try:
        session = EditorSession.from_file(input_path)
        result = session.export(format_name)
    except SessionError as e:
        console.print(f"[red]Error processing {input_path.name}:[/red] {e}")
        if verbose:
            console.print_exception()
        return False

    if to_stdout:
        typer.echo(result.text)
        return True

    if output_path is None:
        output_path = generate_output_path(input_path, format_name)

    if verbose:
        console.print(f"[blue]Processing:[/blue] {input_path}")
        console.print(f"[blue]Output:[/blue] {output_path}")

    try:
        output_path.write_text(result.text, encoding=settings.encoding)
    except OSError as e:
        console.print(f"[red]Error writing {output_path}:[/red] {e}")
        return False

    console.print(f"[green]{result.action}:[/green] {output_path}")
    return True


def process_folder(
    folder_path: Path,
    format_name: str,
    verbose: bool,
    recursive: bool = True,
) -> tuple[int, int]:
    """Export all supported files in a folder. Returns (success_count, fail_count)."""
    if not folder_path.is_dir():
        console.print(f"[red]Error:[/red] Not a directory: {folder_path}")
        return 0, 0

    files: list[Path] = []
    for ext in SUPPORTED_EXTENSIONS:
        if recursive:
            files.extend(folder_path.rglob(f"*{ext}"))
        else:
            files.extend(folder_path.glob(f"*{ext}"))

    # Skip our own output from earlier runs
    files = sorted(f for f in files if not f.stem.endswith(OUTPUT_SUFFIX))

    if not files:
        console.print(
            f"[yellow]No supported files found in {folder_path}[/yellow]\n"
            f"Supported formats: {', '.join(SUPPORTED_EXTENSIONS)}"
        )
        return 0, 0

    console.print(f"[blue]Found {len(files)} file(s) to export[/blue]")

    success_count = 0
    fail_count = 0

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Exporting files...", total=len(files))

        for file_path in files:
            progress.update(task, description=f"Exporting {file_path.name}...")
            if process_file(file_path, None, format_name, False, verbose):
                success_count += 1
            else:
                fail_count += 1
            progress.advance(task)

    return success_count, fail_count


@app.command()
def main(
    path: Path = typer.Argument(
        ...,
        help="HTML/text file or folder to export",
        exists=True,
    ),
    format_name: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help=f"Export format: {', '.join(SUPPORTED_FORMATS)} (default: html)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path (for single file only)",
    ),
    to_stdout: bool = typer.Option(
        False,
        "--stdout",
        "-s",
        help="Print the export instead of writing a file (single file only)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Sanitize pasted HTML or plain text and export it for Telegram.

    Examples:

        tgformat message.html

        tgformat message.html --format markdown --stdout

        tgformat notes.txt --format literal -o notes-calc.txt

        tgformat /path/to/folder --format markdown
    """
    try:
        settings = get_settings()
    except ValidationError as e:
        console.print(f"[red]Error:[/red] Invalid configuration: {escape(str(e))}")
        raise typer.Exit(1)

    configure_logging(verbose, settings.log_level)
    use_format = (format_name or settings.default_format).lower()

    if use_format not in SUPPORTED_FORMATS:
        console.print(
            f"[red]Error:[/red] Unsupported export format: {use_format}. "
            f"Supported formats: {', '.join(SUPPORTED_FORMATS)}"
        )
        raise typer.Exit(1)

    if path.is_file():
        success = process_file(path, output, use_format, to_stdout, verbose)
        raise typer.Exit(0 if success else 1)

    if output is not None or to_stdout:
        console.print(
            "[yellow]Warning:[/yellow] --output and --stdout are ignored in folder mode. "
            f"Files will be saved alongside originals with {OUTPUT_SUFFIX} suffix."
        )

    success, fail = process_folder(path, use_format, verbose)
    console.print(f"\n[bold]Complete:[/bold] {success} succeeded, {fail} failed")
    raise typer.Exit(0 if fail == 0 else 1)


if __name__ == "__main__":
    app()
