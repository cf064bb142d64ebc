from __future__ import annotations

import asyncio
import logging
from typing import Tuple

from shared.protocol.constants import MAX_PAYLOAD_SIZE
from shared.protocol.errors import ProtocolError, ValidationError
from shared.protocol.framing import recv_exact, recv_length, send_exact
from shared.protocol.handshake import check_token, receive_token, send_result
from shared.protocol.messages import CipherRequest
from shared.protocol.roles import AuthResult, Role, role_for_token

from .connection import ConnectionContext, SessionState

logger = logging.getLogger(__name__)


def cipher_payloads(role: Role, text: bytes, key: bytes) -> bytes:
    """Validate a received text/key pair and return the ciphered result bytes."""
    return CipherRequest.from_wire(text, key).apply(role).text_bytes


class ConnectionSession:
    """
    Daemon side of one connection:
    token -> PASS/FAIL -> text frame -> key frame -> one result payload.

    Any short transfer, malformed length field or invalid payload aborts this
    connection only. The channel itself is closed by whoever spawned the session.
    Validation and ciphering run in the loop's executor so a large request does
    not hold up other connections.
    """

    def __init__(self, ctx: ConnectionContext, max_payload: int = MAX_PAYLOAD_SIZE) -> None:
        self.ctx = ctx
        self.max_payload = max_payload

    async def run(self) -> SessionState:
        ctx = self.ctx
        try:
            if not await self._handshake():
                ctx.advance(SessionState.CLOSED)
                return ctx.state
            text, key = await self._receive_request()
            loop = asyncio.get_running_loop()
            result = await loop.run_in_executor(None, cipher_payloads, ctx.role, text, key)
            await send_exact(ctx.channel, result, "result")
            ctx.advance(SessionState.RESULT_SENT)
            ctx.advance(SessionState.CLOSED)
            logger.info("Served %s %s symbols for %s", ctx.role, ctx.text_length, ctx.peername)
        except ProtocolError as exc:
            logger.warning("Aborted connection from %s while %s: %s", ctx.peername, ctx.state, exc)
            ctx.advance(SessionState.FAILED)
        return ctx.state

    async def _handshake(self) -> bool:
        ctx = self.ctx
        raw = await receive_token(ctx.channel)
        ctx.advance(SessionState.TOKEN_RECEIVED)
        result = check_token(raw, ctx.role)
        await send_result(ctx.channel, result)
        if result is AuthResult.FAIL:
            ctx.advance(SessionState.REJECTED)
            logger.warning(
                "Rejected %s: token %r (%s) presented to the %s daemon",
                ctx.peername,
                raw,
                role_for_token(raw) or "unknown role",
                ctx.role,
            )
            return False
        ctx.advance(SessionState.ACCEPTED)
        return True

    async def _receive_request(self) -> Tuple[bytes, bytes]:
        ctx = self.ctx
        ctx.text_length = await recv_length(ctx.channel, "text length")
        self._check_cap(ctx.text_length, "text")
        text = await recv_exact(ctx.channel, ctx.text_length, "text")
        ctx.advance(SessionState.TEXT_RECEIVED)

        ctx.key_length = await recv_length(ctx.channel, "key length")
        if ctx.key_length < ctx.text_length:
            raise ValidationError(f"key length {ctx.key_length} is shorter than text length {ctx.text_length}")
        self._check_cap(ctx.key_length, "key")
        key = await recv_exact(ctx.channel, ctx.key_length, "key")
        ctx.advance(SessionState.KEY_RECEIVED)
        return text, key

    def _check_cap(self, length: int, what: str) -> None:
        if length > self.max_payload:
            raise ValidationError(f"{what} length {length} exceeds the {self.max_payload} byte limit")


__all__ = ["ConnectionSession", "cipher_payloads"]
