"""Main CLI entry point for the canvas-pages command.

This module provides the Typer application behind the canvas-pages
command-line tool. Offline commands (inspect, normalize, markdown) work on
canvas markup saved in local files; pull and push move that markup to and
from a SharePoint page.
"""

import logging
import sys
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

import typer

from canvas_pages import __version__
from canvas_pages.canvas.config import DEFAULT_CONFIG, CanvasConfig, ConfigLoader
from canvas_pages.canvas.page import ClientSidePage
from canvas_pages.cli.errors import InputFileError
from canvas_pages.cli.models import ExitCode
from canvas_pages.cli.output import OutputHandler
from canvas_pages.content_converter.markdown_converter import MarkdownConverter
from canvas_pages.page_operations.page_store import SharePointPageStore
from canvas_pages.sharepoint_client.errors import (
    APIUnreachableError,
    CanvasPagesError,
    InvalidCredentialsError,
)

app = typer.Typer(
    name="canvas-pages",
    help="""Inspect, normalize and sync the canvas content of SharePoint modern pages.

QUICK START:
  canvas-pages inspect page.html                          # Show sections, columns, controls
  canvas-pages normalize page.html -o clean.html          # Re-render canvas markup
  canvas-pages markdown page.html                         # Export text as markdown
  canvas-pages pull /sites/dev/SitePages/home.aspx -o page.html
  canvas-pages push /sites/dev/SitePages/home.aspx page.html

Remote commands read SHAREPOINT_SITE_URL and SHAREPOINT_ACCESS_TOKEN from the
environment or a .env file.""",
    add_completion=False,
    rich_markup_mode=None,
)

logger = logging.getLogger(__name__)

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="YAML file with canvas rendering settings",
    metavar="PATH",
)
VERBOSITY_OPTION = typer.Option(
    0,
    "--verbosity",
    "-v",
    help="Verbosity level: 0=summary, 1=info, 2=debug",
)
LOGDIR_OPTION = typer.Option(
    None,
    "--logdir",
    help="Directory for log files (creates timestamped log file)",
)
NO_COLOR_OPTION = typer.Option(
    False,
    "--no-color",
    help="Disable colored output",
)


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'canvas_pages' namespace logger to avoid affecting
    third-party libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("canvas_pages")
    app_logger.setLevel(level)

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"canvas-pages_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _exit_code_for(error: Exception) -> ExitCode:
    if isinstance(error, InvalidCredentialsError):
        return ExitCode.AUTH_ERROR
    if isinstance(error, APIUnreachableError):
        return ExitCode.NETWORK_ERROR
    return ExitCode.GENERAL_ERROR


@contextmanager
def _reporting_errors(output: OutputHandler, operation: str) -> Iterator[None]:
    """Turn library errors raised inside the block into exit codes."""
    try:
        yield
    except typer.Exit:
        raise
    except (CanvasPagesError, ValueError) as e:
        logger.error(f"{operation} failed: {e}")
        output.error(f"{operation} failed: {e}")
        raise typer.Exit(_exit_code_for(e))
    except Exception as e:
        logger.exception(f"Unexpected error during {operation.lower()}")
        output.error(f"Unexpected error: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)


def _load_config(config_path: Optional[str]) -> CanvasConfig:
    if not config_path:
        return DEFAULT_CONFIG
    return ConfigLoader.load(config_path)


def _read_file(file_path: str) -> str:
    try:
        return Path(file_path).read_text(encoding="utf-8")
    except OSError as e:
        raise InputFileError(file_path, "read", e.strerror or str(e)) from e


def _write_result(text: str, output_path: Optional[str], output: OutputHandler) -> None:
    """Write text to output_path, or to stdout when no path is given."""
    if not output_path:
        typer.echo(text)
        return
    try:
        Path(output_path).write_text(text, encoding="utf-8")
    except OSError as e:
        raise InputFileError(output_path, "write", e.strerror or str(e)) from e
    output.success(f"Wrote {output_path}")


def _setup(verbosity: int, logdir: Optional[str], no_color: bool) -> OutputHandler:
    _configure_logging(verbosity, logdir)
    return OutputHandler(verbosity=verbosity, no_color=no_color)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"canvas-pages {__version__}")
        raise typer.Exit(ExitCode.SUCCESS)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Inspect, normalize and sync the canvas content of SharePoint modern pages."""


@app.command()
def inspect(
    file: str = typer.Argument(..., help="File containing canvas markup"),
    config: Optional[str] = CONFIG_OPTION,
    verbosity: int = VERBOSITY_OPTION,
    logdir: Optional[str] = LOGDIR_OPTION,
    no_color: bool = NO_COLOR_OPTION,
) -> None:
    """Show the sections, columns and controls of a canvas."""
    output = _setup(verbosity, logdir, no_color)

    with _reporting_errors(output, "Inspect"):
        page = ClientSidePage(config=_load_config(config))
        page.parse(_read_file(file))

        output.print_page_tree(page, title=file)
        if page.skipped_controls:
            output.warning(
                f"Skipped {page.skipped_controls} control(s) of unsupported type"
            )
        control_count = sum(1 for _ in page.iter_controls())
        output.info(f"{len(page.sections)} section(s), {control_count} control(s)")


@app.command()
def normalize(
    file: str = typer.Argument(..., help="File containing canvas markup"),
    output_path: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the normalized markup here instead of stdout",
        metavar="PATH",
    ),
    config: Optional[str] = CONFIG_OPTION,
    verbosity: int = VERBOSITY_OPTION,
    logdir: Optional[str] = LOGDIR_OPTION,
    no_color: bool = NO_COLOR_OPTION,
) -> None:
    """Parse a canvas and render it back in canonical form."""
    output = _setup(verbosity, logdir, no_color)

    with _reporting_errors(output, "Normalize"):
        page = ClientSidePage(config=_load_config(config))
        page.parse(_read_file(file))
        _write_result(page.render(), output_path, output)


@app.command()
def markdown(
    file: str = typer.Argument(..., help="File containing canvas markup"),
    output_path: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the markdown here instead of stdout",
        metavar="PATH",
    ),
    config: Optional[str] = CONFIG_OPTION,
    verbosity: int = VERBOSITY_OPTION,
    logdir: Optional[str] = LOGDIR_OPTION,
    no_color: bool = NO_COLOR_OPTION,
) -> None:
    """Export the text of a canvas as markdown."""
    output = _setup(verbosity, logdir, no_color)

    with _reporting_errors(output, "Markdown export"):
        page = ClientSidePage(config=_load_config(config))
        page.parse(_read_file(file))
        _write_result(MarkdownConverter().page_to_markdown(page), output_path, output)


@app.command()
def pull(
    page_ref: str = typer.Argument(
        ..., help="Server-relative URL of the page, e.g. /sites/dev/SitePages/home.aspx"
    ),
    output_path: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the canvas markup here instead of stdout",
        metavar="PATH",
    ),
    config: Optional[str] = CONFIG_OPTION,
    verbosity: int = VERBOSITY_OPTION,
    logdir: Optional[str] = LOGDIR_OPTION,
    no_color: bool = NO_COLOR_OPTION,
) -> None:
    """Download a page's canvas markup."""
    output = _setup(verbosity, logdir, no_color)

    with _reporting_errors(output, "Pull"):
        canvas_config = _load_config(config)
        store = SharePointPageStore()
        with output.spinner(f"Fetching {page_ref}..."):
            page = ClientSidePage.from_store(store, page_ref, config=canvas_config)

        output.info(f"Comments disabled: {page.comments_disabled}")
        _write_result(page.render(), output_path, output)


@app.command()
def push(
    page_ref: str = typer.Argument(
        ..., help="Server-relative URL of the page, e.g. /sites/dev/SitePages/home.aspx"
    ),
    file: str = typer.Argument(..., help="File containing canvas markup"),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show the markup that would be saved without saving it",
    ),
    config: Optional[str] = CONFIG_OPTION,
    verbosity: int = VERBOSITY_OPTION,
    logdir: Optional[str] = LOGDIR_OPTION,
    no_color: bool = NO_COLOR_OPTION,
) -> None:
    """Replace a page's canvas with the markup in FILE."""
    output = _setup(verbosity, logdir, no_color)

    with _reporting_errors(output, "Push"):
        canvas_config = _load_config(config)
        markup = _read_file(file)

        if dry_run:
            page = ClientSidePage(page_ref=page_ref, config=canvas_config).parse(markup)
            output.info(f"Dry run: {page_ref} not modified")
            typer.echo(page.render())
            return

        store = SharePointPageStore()
        page = ClientSidePage(store, page_ref, config=canvas_config).parse(markup)
        with output.spinner(f"Saving {page_ref}..."):
            result = page.save()

        output.success(f"Saved canvas of {result.page_ref}")
        if result.etag:
            output.info(f"ETag: {result.etag}")


if __name__ == "__main__":
    app()
