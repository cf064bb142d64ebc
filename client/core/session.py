from __future__ import annotations

import logging
from typing import Union

from shared.protocol.errors import FrameError, ValidationError
from shared.protocol.framing import recv_exact, send_frame
from shared.protocol.handshake import client_handshake
from shared.protocol.messages import CipherRequest, CipherResult
from shared.protocol.roles import Role, normalize_role

from .network import NetworkClient

logger = logging.getLogger(__name__)


class ClientSession:
    """Drives the client side of exactly one request over one connection."""

    def __init__(self, network_client: NetworkClient, role: Union[str, Role]) -> None:
        self.network = network_client
        self.role = normalize_role(role)

    async def run(self, request: CipherRequest) -> CipherResult:
        """
        Handshake, send the text frame then the key frame, and read back a result
        exactly as long as the text. The connection is closed on every exit path.
        """
        try:
            channel = await self.network.connect()
            await client_handshake(channel, self.role)
            await send_frame(channel, request.text_bytes, "text")
            await send_frame(channel, request.key_bytes, "key")
            raw = await recv_exact(channel, len(request.text), "result")
        finally:
            await self.network.close()

        try:
            result = CipherResult.from_wire(raw)
        except ValidationError as exc:
            raise FrameError(f"daemon sent an invalid result: {exc}") from exc
        logger.debug("Received %s result symbols", len(result.text))
        return result


__all__ = ["ClientSession"]
