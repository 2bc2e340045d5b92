"""Data models for CLI operations."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    These exit codes provide meaningful feedback about the operation result:
    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): General error (config issues, invalid model, request failures)
    - AMBIGUOUS_REMOTE_STATE (2): Several remote pages or attachments match one local item
    - AUTH_ERROR (3): Authentication or authorization failure
    - NETWORK_ERROR (4): Network connectivity or API availability issues

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    AMBIGUOUS_REMOTE_STATE = 2
    AUTH_ERROR = 3
    NETWORK_ERROR = 4
