"""Command-line interface for publishing markdown to Confluence.

This package provides the `confluence-publish` CLI tool, which runs the
publisher over a configured folder with a progress spinner, a summary of
the outcome, and meaningful exit codes.
"""

from .publish_command import PublishCommand
from .models import ExitCode
from .errors import CLIError, ConfigNotFoundError

__all__ = [
    'PublishCommand',
    'ExitCode',
    'CLIError',
    'ConfigNotFoundError',
]
