from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit statuses shared by every program."""

    SUCCESS = 0
    USAGE = 1
    NETWORK = 2


class ProtocolError(Exception):
    """Structured exception carrying the exit code its process should end with."""

    exit_code: ExitCode = ExitCode.NETWORK

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class UsageError(ProtocolError):
    """Bad argument count or an unusable port/length argument."""

    exit_code = ExitCode.USAGE


class ConfigError(UsageError):
    """Configuration value that cannot be coerced or is out of range."""


class ValidationError(ProtocolError):
    """Input text or key rejected before any network I/O."""

    exit_code = ExitCode.USAGE


class NetworkError(ProtocolError):
    """Socket creation, resolution, bind, listen or connect failure."""

    exit_code = ExitCode.NETWORK


class AuthRejection(ProtocolError):
    exit_code = ExitCode.NETWORK


class FrameError(ProtocolError):
    """Malformed or oversized length field."""

    exit_code = ExitCode.NETWORK


class PartialTransferError(ProtocolError):
    """A frame transfer moved fewer bytes than the protocol requires."""

    exit_code = ExitCode.NETWORK

    def __init__(self, expected: int, actual: int, what: str = "data") -> None:
        self.expected = expected
        self.actual = actual
        self.what = what
        super().__init__(f"only {actual} of {expected} bytes of {what} were transferred")


__all__ = [
    "ExitCode",
    "ProtocolError",
    "UsageError",
    "ConfigError",
    "ValidationError",
    "NetworkError",
    "AuthRejection",
    "FrameError",
    "PartialTransferError",
]
