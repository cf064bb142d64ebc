from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn

from shared.protocol.constants import MAX_PORT, MIN_PORT, RECOMMENDED_MIN_PORT
from shared.protocol.errors import ProtocolError, UsageError

logger = logging.getLogger(__name__)


class UsageParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError (exit 1) instead of exiting with status 2."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(f"{message}\n{self.format_usage().strip()}")


def parse_port(text: str) -> int:
    try:
        port = int(text)
    except ValueError:
        raise UsageError(f"invalid port {text!r}") from None
    if not (MIN_PORT <= port <= MAX_PORT):
        raise UsageError(f"invalid port {port}")
    if port < RECOMMENDED_MIN_PORT:
        logger.warning("recommended to use a port number above %s (got %s)", RECOMMENDED_MIN_PORT, port)
    return port


def parse_length(text: str) -> int:
    try:
        length = int(text)
    except ValueError:
        raise UsageError(f"invalid length {text!r}") from None
    if length < 1:
        raise UsageError("keylength must be greater than 0")
    return length


def report_error(prog: str, exc: ProtocolError) -> int:
    """Print a fatal diagnostic to stderr and return the matching exit status."""
    print(f"{prog}: ERROR, {exc}", file=sys.stderr)
    return int(exc.exit_code)


__all__ = ["UsageParser", "parse_port", "parse_length", "report_error"]
