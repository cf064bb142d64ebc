from __future__ import annotations

from collections.abc import Callable
from typing import Dict, Union

from .constants import ALPHABET, ALPHABET_SIZE
from .errors import ValidationError
from .roles import Role, normalize_role

_SYMBOL_VALUES: Dict[str, int] = {symbol: value for value, symbol in enumerate(ALPHABET)}

Transform = Callable[[str, str], str]


def symbol_to_int(symbol: str) -> int:
    """Map a symbol onto 0-26 (space is 0, A is 1, Z is 26)."""
    try:
        return _SYMBOL_VALUES[symbol]
    except KeyError:
        raise ValidationError(f"{symbol!r} is not in the cipher alphabet") from None


def int_to_symbol(value: int) -> str:
    return ALPHABET[value % ALPHABET_SIZE]


def is_valid_text(text: str) -> bool:
    return all(symbol in _SYMBOL_VALUES for symbol in text)


def _check_key(text: str, key: str) -> None:
    if len(key) < len(text):
        raise ValidationError(f"key of length {len(key)} cannot pad text of length {len(text)}")


def encrypt(plain: str, key: str) -> str:
    """One-time-pad encryption: (plain + key) mod 27, symbol by symbol."""
    _check_key(plain, key)
    return "".join(
        int_to_symbol((symbol_to_int(p) + symbol_to_int(k)) % ALPHABET_SIZE)
        for p, k in zip(plain, key)
    )


def decrypt(cipher: str, key: str) -> str:
    """Inverse of :func:`encrypt`; adds 27 back before the final mod so no result goes negative."""
    _check_key(cipher, key)
    return "".join(
        int_to_symbol(((symbol_to_int(c) - symbol_to_int(k)) % ALPHABET_SIZE + ALPHABET_SIZE) % ALPHABET_SIZE)
        for c, k in zip(cipher, key)
    )


TRANSFORMS: Dict[Role, Transform] = {
    Role.ENCRYPT: encrypt,
    Role.DECRYPT: decrypt,
}


def transform_for_role(role: Union[str, Role]) -> Transform:
    return TRANSFORMS[normalize_role(role)]


__all__ = [
    "symbol_to_int",
    "int_to_symbol",
    "is_valid_text",
    "encrypt",
    "decrypt",
    "TRANSFORMS",
    "transform_for_role",
]
