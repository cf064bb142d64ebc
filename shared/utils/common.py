from __future__ import annotations

import secrets

from shared.protocol.constants import ALPHABET


def generate_key(length: int) -> str:
    """Draw `length` symbols uniformly from the cipher alphabet."""
    if length < 1:
        raise ValueError("key length must be greater than 0")
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


__all__ = ["generate_key"]
