"""Error codes for process exit status.

The CI host only sees the exit status of the step, so these values are the
contract between a failed invocation and the workflow that ran it.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success
    - 1: User error (missing or invalid inputs)
    - 4: API error (hosting service rejected a call or was unreachable)
    - 5: I/O error (output file could not be written)
    """

    OK = 0
    USER_ERROR = 1
    API_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
