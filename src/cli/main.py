"""Main CLI entry point for confluence-publish command.

This module provides the Typer application that serves as the entry point
for the confluence-publish command-line tool. It uses options on the main
command rather than subcommands for a simpler user experience.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from src.cli.output import OutputHandler
from src.cli.publish_command import PublishCommand
from src.publisher.config_loader import ConfigLoader

# Create Typer app
app = typer.Typer(
    name="confluence-publish",
    help="""Publish a rendered page tree to a Confluence space.

EXAMPLE:
  confluence-publish --model build/confluence-content-model.yaml
  confluence-publish --model model.yaml --config publish.yaml -v 1""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=True,
)

# Module logger
logger = logging.getLogger(__name__)

VERSION = "0.1.0"

# Verbosity flag to log level; anything above 1 means DEBUG
LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}

LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Attach handlers to the 'src' logger for the requested verbosity.

    Third-party loggers and the root logger are not touched.

    Args:
        verbosity: 0 logs warnings, 1 adds info, 2 or more adds debug
        logdir: Directory receiving a timestamped log file (optional)
    """
    level = LOG_LEVELS.get(verbosity, logging.DEBUG)
    publish_logger = logging.getLogger("src")
    publish_logger.setLevel(level)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    stderr_handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)8s] %(message)s", datefmt=LOG_DATE_FORMAT)
    )
    publish_logger.addHandler(stderr_handler)

    if not logdir:
        return

    log_dir = Path(logdir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"confluence-publish_{datetime.now():%Y%m%d_%H%M%S}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt=LOG_DATE_FORMAT)
    )
    publish_logger.addHandler(file_handler)
    logger.info(f"Writing log to {log_file}")


@app.command()
def main_command(
    model: Optional[str] = typer.Option(
        None,
        "--model",
        "-m",
        help="Path to the content model file (YAML or JSON)",
        metavar="FILE",
    ),
    config: str = typer.Option(
        ConfigLoader.DEFAULT_CONFIG_PATH,
        "--config",
        "-c",
        help="Path to the publish configuration file",
        metavar="FILE",
    ),
    continue_on_error: bool = typer.Option(
        False,
        "--continue-on-error",
        help="Keep publishing the remaining top-level pages when one fails",
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
    """Publish a rendered page tree to a Confluence space.

    \b
    Credentials are read from CONFLUENCE_URL, CONFLUENCE_USER and
    CONFLUENCE_API_TOKEN (a .env file in the working directory is loaded).
    """
    if version:
        typer.echo(f"confluence-publish version {VERSION}")
        raise typer.Exit()

    if model is None:
        typer.echo("Error: Missing required option: --model", err=True)
        raise typer.Exit(1)

    _configure_logging(verbosity, logdir)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    command = PublishCommand(config_path=config, output_handler=output)
    exit_code = command.run(model, continue_on_error=continue_on_error)

    raise typer.Exit(int(exit_code))


def main() -> None:
    """Main entry point for the CLI application."""
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
