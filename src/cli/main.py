"""Main CLI entry point for confluence-publish command.

This module provides the Typer application that serves as the entry point
for the confluence-publish command-line tool.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from src.cli.models import ExitCode
from src.cli.output import OutputHandler
from src.cli.publish_command import PublishCommand
from src.file_mapper.config_loader import DEFAULT_CONFIG_PATH

__version__ = "0.1.0"

app = typer.Typer(
    name="confluence-publish",
    help="""Publish a folder of Markdown files to a Confluence page tree.

QUICK START:
  confluence-publish                      # Publish every file below local_path
  confluence-publish docs/guide.md        # Publish a single file
  confluence-publish -v 1                 # Show what is created and updated""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=False,
)

# Module logger
logger = logging.getLogger(__name__)


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
    app_logger.handlers.clear()

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
        log_file = log_path / f"confluence-publish_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


@app.command()
def main_command(
    file: Optional[str] = typer.Argument(
        None,
        help="Optional markdown file to publish (publishes only this file)",
    ),
    config: str = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config",
        help="Path to the configuration file",
        metavar="PATH",
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
        min=0,
        max=2,
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
    """Publish a folder of Markdown files to a Confluence page tree.

    \b
    Pages are created below the configured parent page, mirroring the
    folder structure. Unchanged pages are not updated.

    \b
    EXIT CODES:
      0  all pages published
      1  configuration or other error
      2  one or more pages failed
      3  authentication failure
      4  network or API failure
    """
    if version:
        typer.echo(f"confluence-publish version {__version__}")
        raise typer.Exit()

    _configure_logging(verbosity, logdir)

    output = OutputHandler(verbosity=verbosity, no_color=no_color)
    command = PublishCommand(config_path=config, output_handler=output)
    exit_code = command.run(file)

    raise typer.Exit(int(exit_code))


def main() -> None:
    """Main entry point for the CLI application."""
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
