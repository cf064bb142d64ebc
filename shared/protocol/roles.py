from __future__ import annotations

from enum import StrEnum
from typing import Dict, Optional, Union

from .constants import ENCODING


class Role(StrEnum):
    """The two cipher directions a daemon/client pair can serve."""

    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


class RoleToken(StrEnum):
    """
    Fixed identity literals a client presents when it connects.
    This is a routing gate between the two daemon roles, not a credential.
    """

    ENCRYPT = "otp_enc"
    DECRYPT = "otp_dec"


class AuthResult(StrEnum):
    PASS = "PASS"
    FAIL = "FAIL"


ROLE_TOKENS: Dict[Role, RoleToken] = {
    Role.ENCRYPT: RoleToken.ENCRYPT,
    Role.DECRYPT: RoleToken.DECRYPT,
}


def normalize_role(role: Union[str, Role]) -> Role:
    """Convert enum/string into a Role."""
    return role if isinstance(role, Role) else Role(str(role))


def token_for_role(role: Union[str, Role]) -> RoleToken:
    return ROLE_TOKENS[normalize_role(role)]


def token_bytes(role: Union[str, Role]) -> bytes:
    return token_for_role(role).value.encode(ENCODING)


def role_for_token(raw: bytes) -> Optional[Role]:
    """Map a received token to the role it claims, or None for unknown bytes."""
    try:
        token = RoleToken(raw.decode(ENCODING))
    except (UnicodeDecodeError, ValueError):
        return None
    for role, candidate in ROLE_TOKENS.items():
        if candidate is token:
            return role
    return None


__all__ = [
    "Role",
    "RoleToken",
    "AuthResult",
    "ROLE_TOKENS",
    "normalize_role",
    "token_for_role",
    "token_bytes",
    "role_for_token",
]
