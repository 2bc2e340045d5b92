"""Command-line interface for publishing page trees to Confluence.

This package provides the `confluence-publish` CLI tool that loads the
publish configuration and content model, runs the publisher and reports a
summary with an exit code describing the outcome.
"""

from .publish_command import PublishCommand, exit_code_for
from .models import ExitCode
from .errors import CLIError, ConfigNotFoundError

__all__ = [
    'PublishCommand',
    'exit_code_for',
    'ExitCode',
    'CLIError',
    'ConfigNotFoundError',
]
