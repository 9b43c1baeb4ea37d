"""POSIX-conventional exit codes for CLI error paths.

Every ``SystemExit`` raised by a command carries one of these values so
scripts can tell a rejected message apart from a broken network or a
missing API key.

Contents:
    * :class:`ExitCode` - IntEnum of all exit codes used by this application.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """POSIX-conventional exit codes for CLI error paths.

    Values follow sysexits.h and errno conventions where applicable:

    * 0-1: generic success / failure
    * 2: ENOENT
    * 22: EINVAL
    * 69: EX_UNAVAILABLE, the API rejected the message
    * 74: EX_IOERR, the request never got a response
    * 78: EX_CONFIG

    Example:
        >>> int(ExitCode.API_FAILURE)
        69
        >>> ExitCode.CONFIG_ERROR
        <ExitCode.CONFIG_ERROR: 78>
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    FILE_NOT_FOUND = 2
    INVALID_ARGUMENT = 22
    API_FAILURE = 69
    TRANSPORT_FAILURE = 74
    CONFIG_ERROR = 78


__all__ = ["ExitCode"]
