"""Main CLI entry point for image-relay command.

This module provides the Typer application that serves as the entry point
for the image-relay command-line tool. It uses options on the main command
rather than subcommands for a simpler user experience.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer

from src.cli.errors import InitError
from src.cli.init_command import InitCommand
from src.cli.models import ExitCode, RelayMode
from src.cli.output import OutputHandler
from src.cli.relay_command import RelayCommand

VERSION = "0.1.0"

app = typer.Typer(
    name="image-relay",
    help="Upload and download the images referenced by Markdown notes.",
    add_completion=False,
    rich_markup_mode=None,  # Disable Rich markup to avoid compatibility issues
    no_args_is_help=False,
)

# Module logger
logger = logging.getLogger(__name__)

# Help message for when no arguments provided
GETTING_STARTED_MESSAGE = """image-relay <note.md>                         # Upload all images of a note
image-relay <note.md> --download              # Download all remote images of a note
image-relay --folder <dir> [--download]       # Same for every note in a folder
image-relay <note.md> --image <img>           # Upload one image file
image-relay <note.md> --embed <img> ...       # Upload and append images
image-relay --init [--vault <dir>]            # Write default configuration
--help                                        # Show all options

Uploads go to a PicGo-compatible service (default http://127.0.0.1:36677/upload)."""


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:  # verbosity >= 2
        level = logging.DEBUG

    app_logger = logging.getLogger("src")
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
        log_file = log_path / f"image-relay_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _run_init(vault: str, verbosity: int, no_color: bool) -> None:
    """Run initialization command.

    Args:
        vault: Vault root directory
        verbosity: Verbosity level
        no_color: Whether to disable colored output
    """
    _configure_logging(verbosity)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        output.info(f"Initializing configuration in {vault}...")

        init_cmd = InitCommand()
        init_cmd.run(vault=vault)

        output.success("Configuration initialized successfully")
        output.info(f"  Config file: {init_cmd.config_path}")
        output.info("")
        output.info("Next steps:")
        output.info("  1. Review .image-relay/config.yaml")
        output.info("  2. Run 'image-relay <note.md>' to upload its images")

        raise typer.Exit(ExitCode.SUCCESS)

    except InitError as e:
        logger.error(f"Initialization failed: {e}")
        output.error(f"Initialization failed: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    except typer.Exit:
        raise

    except Exception as e:
        logger.exception("Unexpected error during initialization")
        output.error(f"Unexpected error: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)


def _select_mode(
    document: Optional[str],
    folder: Optional[str],
    download: bool,
    image: Optional[str],
    embed: Optional[List[str]],
) -> RelayMode:
    """Pick the operation from the given arguments.

    Raises:
        typer.BadParameter: If the combination is not valid
    """
    if folder is not None:
        if document is not None or image is not None or embed:
            raise typer.BadParameter("--folder cannot be combined with a document, --image or --embed")
        return RelayMode.DOWNLOAD_FOLDER if download else RelayMode.UPLOAD_FOLDER

    if document is None:
        raise typer.BadParameter("A document path or --folder is required")

    if image is not None and embed:
        raise typer.BadParameter("--image and --embed cannot be used together")

    if download and (image is not None or embed):
        raise typer.BadParameter("--download cannot be combined with --image or --embed")

    if image is not None:
        return RelayMode.UPLOAD_IMAGE
    if embed:
        return RelayMode.EMBED
    return RelayMode.DOWNLOAD if download else RelayMode.UPLOAD


def _run_relay(
    mode: RelayMode,
    vault: str,
    document: Optional[str],
    folder: Optional[str],
    image: Optional[str],
    embed: Optional[List[str]],
    logdir: Optional[str],
    verbosity: int,
    no_color: bool,
) -> None:
    """Run a relay operation and exit with its code."""
    _configure_logging(verbosity, logdir)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    relay_cmd = RelayCommand(vault=vault, output_handler=output)
    exit_code = relay_cmd.run(
        mode,
        document=document,
        folder=folder,
        image=image,
        embed=embed,
    )

    raise typer.Exit(exit_code)


@app.command()
def main_command(
    document: Optional[str] = typer.Argument(
        None,
        help="Markdown document to process",
    ),
    init: bool = typer.Option(
        False,
        "--init",
        help="Write a default configuration into the vault",
    ),
    vault: str = typer.Option(
        ".",
        "--vault",
        help="Vault root directory",
        metavar="DIR",
    ),
    folder: Optional[str] = typer.Option(
        None,
        "--folder",
        help="Process every Markdown document directly inside this folder",
        metavar="DIR",
    ),
    download: bool = typer.Option(
        False,
        "--download",
        help="Download remote images instead of uploading local ones",
    ),
    image: Optional[str] = typer.Option(
        None,
        "--image",
        help="Upload only this image file and rewrite its references",
        metavar="IMG",
    ),
    embed: Optional[List[str]] = typer.Option(
        None,
        "--embed",
        help="Upload an image and append it to the document (can be used multiple times)",
        metavar="IMG",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Upload and download the images referenced by Markdown notes.

    \b
    QUICK START:
      image-relay note.md                      # Upload all images of a note
      image-relay note.md --download           # Download its remote images
      image-relay --folder notes               # Upload images of every note
      image-relay --folder notes --download    # Download for every note
      image-relay note.md --image shot.png     # Upload one image file
      image-relay note.md --embed a.png        # Upload and append an image
      image-relay --init --vault ./notes       # Write default configuration
    """
    if version:
        typer.echo(f"image-relay version {VERSION}")
        raise typer.Exit()

    if init:
        _run_init(vault, verbosity, no_color)
        return

    if document is None and folder is None:
        if image is None and not embed and not download:
            typer.echo(GETTING_STARTED_MESSAGE)
            raise typer.Exit()

    try:
        mode = _select_mode(document, folder, download, image, embed)
    except typer.BadParameter as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    _run_relay(mode, vault, document, folder, image, embed, logdir, verbosity, no_color)


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
