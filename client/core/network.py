from __future__ import annotations

import asyncio
import logging
import socket
from typing import Any, Dict, Optional

from client.config import CLIENT_CONFIG
from shared.protocol.errors import NetworkError
from shared.protocol.framing import Channel

logger = logging.getLogger(__name__)


class NetworkClient:
    """One TCP connection to one daemon. No reconnect, no retry."""

    def __init__(self, port: int, config: Optional[Dict[str, Any]] = None) -> None:
        self.config = config or CLIENT_CONFIG
        self.host: str = self.config["server_host"]
        self.port: int = int(port)
        self.connect_timeout: float = float(self.config.get("connect_timeout") or 0)
        self.channel: Optional[Channel] = None

    async def connect(self) -> Channel:
        if self.channel is not None:
            return self.channel
        try:
            opening = asyncio.open_connection(self.host, self.port)
            if self.connect_timeout > 0:
                reader, writer = await asyncio.wait_for(opening, self.connect_timeout)
            else:
                reader, writer = await opening
        except socket.gaierror as exc:
            raise NetworkError(f"no such host {self.host}: {exc}") from exc
        except (OSError, asyncio.TimeoutError) as exc:
            raise NetworkError(f"could not connect to {self.host}:{self.port}: {exc}") from exc
        self.channel = Channel(reader=reader, writer=writer)
        logger.info("Connected to %s:%s", self.host, self.port)
        return self.channel

    async def close(self) -> None:
        if self.channel is None:
            return
        await self.channel.close()
        self.channel = None
        logger.debug("Network client closed")
