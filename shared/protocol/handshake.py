"""
Role handshake run at the start of every connection.

The client sends its 7-byte role token and the server answers with a 4-byte
PASS/FAIL literal. The check is a plain string comparison that keeps clients
from reaching the wrong daemon; it carries no secret and authenticates nothing.
"""

from __future__ import annotations

import logging
from typing import Union

from .constants import AUTH_RESULT_LEN, ENCODING, ROLE_TOKEN_LEN
from .errors import AuthRejection, PartialTransferError
from .framing import Channel, recv_exact, send_exact
from .roles import AuthResult, Role, token_bytes, token_for_role

logger = logging.getLogger(__name__)


async def receive_token(channel: Channel) -> bytes:
    return await recv_exact(channel, ROLE_TOKEN_LEN, "role token")


def check_token(raw: bytes, role: Union[str, Role]) -> AuthResult:
    """Return PASS only when the token is the one the given daemon role accepts."""
    return AuthResult.PASS if raw == token_bytes(role) else AuthResult.FAIL


async def send_result(channel: Channel, result: AuthResult) -> None:
    await send_exact(channel, result.value.encode(ENCODING), "auth result")


async def client_handshake(channel: Channel, role: Union[str, Role]) -> None:
    """Present our token and raise AuthRejection unless the daemon answers PASS."""
    await send_exact(channel, token_bytes(role), "role token")
    try:
        raw = await recv_exact(channel, AUTH_RESULT_LEN, "auth result")
    except PartialTransferError as exc:
        raise AuthRejection(f"no answer to {token_for_role(role)}: {exc}") from exc
    if raw != AuthResult.PASS.value.encode(ENCODING):
        raise AuthRejection(f"daemon refused {token_for_role(role)} (answered {raw!r})")
    logger.debug("Handshake accepted for %s", token_for_role(role))


__all__ = ["receive_token", "check_token", "send_result", "client_handshake"]
