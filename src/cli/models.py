"""Data models for CLI operations."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes of the confluence-publish command.

    - SUCCESS (0): Every page was published
    - GENERAL_ERROR (1): General error (config issues, validation failures)
    - PUBLISH_FAILURES (2): The run completed but one or more pages failed
    - AUTH_ERROR (3): Authentication or authorization failure
    - NETWORK_ERROR (4): Network connectivity or API availability issues

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    PUBLISH_FAILURES = 2
    AUTH_ERROR = 3
    NETWORK_ERROR = 4
