from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple, Union

from .cipher import is_valid_text
from .constants import ENCODING, MAX_PAYLOAD_SIZE
from .errors import ValidationError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_first_line(path: PathLike) -> str:
    """Return the file's content up to (not including) its first line terminator."""
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ValidationError(f"opening file '{path}': {exc.strerror or exc}") from exc
    line = raw.split(b"\n", 1)[0]
    if line.endswith(b"\r"):
        line = line[:-1]
    try:
        return line.decode(ENCODING)
    except UnicodeDecodeError as exc:
        raise ValidationError(f"'{path}' contains bad characters") from exc


def load_validated_text(path: PathLike) -> Tuple[str, int]:
    """
    Load one line of cipher text from `path`.

    Returns the symbols and their count. Empty content, characters outside the
    alphabet, and lengths the wire length field cannot carry raise ValidationError.
    """
    symbols = read_first_line(path)
    if not symbols:
        raise ValidationError(f"'{path}' cannot be empty")
    if not is_valid_text(symbols):
        raise ValidationError(f"'{path}' contains bad characters")
    if len(symbols) > MAX_PAYLOAD_SIZE:
        raise ValidationError(f"'{path}' is longer than {MAX_PAYLOAD_SIZE} symbols")
    logger.debug("Loaded %s symbols from %s", len(symbols), path)
    return symbols, len(symbols)


def validate_lengths(text_length: int, key_length: int, key_path: PathLike = "key") -> None:
    if key_length < text_length:
        raise ValidationError(f"key '{key_path}' is too short")


__all__ = ["read_first_line", "load_validated_text", "validate_lengths"]
