from __future__ import annotations

import asyncio
import logging
from typing import Optional, Set, Union

from shared.protocol.constants import LISTEN_BACKLOG, MAX_PAYLOAD_SIZE
from shared.protocol.errors import NetworkError
from shared.protocol.framing import Channel
from shared.protocol.roles import Role, normalize_role

from .connection import ConnectionContext, SessionState
from .session import ConnectionSession

logger = logging.getLogger(__name__)


class CipherDaemon:
    """
    Accept loop for one daemon role.

    Every accepted connection runs as its own task holding its own context, so a
    slow or stuck peer only stalls that task. Finished tasks are dropped from the
    live set by a done-callback, which never blocks the accept loop.
    """

    def __init__(
        self,
        host: str,
        port: int,
        role: Union[str, Role],
        backlog: int = LISTEN_BACKLOG,
        session_timeout: float = 0.0,
        max_payload: int = MAX_PAYLOAD_SIZE,
    ) -> None:
        self.host = host
        self.port = port
        self.role = normalize_role(role)
        self.backlog = backlog
        self.session_timeout = session_timeout
        self.max_payload = max_payload
        self._server: Optional[asyncio.AbstractServer] = None
        self._units: Set[asyncio.Task] = set()

    async def start(self) -> None:
        try:
            self._server = await asyncio.start_server(
                self._handle_client,
                self.host,
                self.port,
                backlog=self.backlog,
                reuse_address=True,
            )
        except OSError as exc:
            raise NetworkError(f"on binding {self.host}:{self.port}: {exc.strerror or exc}") from exc
        self.port = self._server.sockets[0].getsockname()[1]
        logger.info("%s daemon listening on %s:%s (backlog %s)", self.role, self.host, self.port, self.backlog)

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        assert self._server is not None
        await self._server.serve_forever()

    async def stop(self) -> None:
        if self._server:
            self._server.close()
        for task in list(self._units):
            task.cancel()
        if self._units:
            await asyncio.gather(*self._units, return_exceptions=True)
        if self._server:
            await self._server.wait_closed()
            self._server = None
        logger.info("%s daemon on port %s stopped", self.role, self.port)

    @property
    def active_sessions(self) -> int:
        return len(self._units)

    async def _handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        task = asyncio.current_task()
        if task is not None:
            self._units.add(task)
            task.add_done_callback(self._reap)

        channel = Channel(reader=reader, writer=writer)
        ctx = ConnectionContext(channel=channel, role=self.role, peername=channel.peername)
        logger.debug("Accepted %s (%s live sessions)", ctx.peername, self.active_sessions)
        try:
            session = ConnectionSession(ctx, self.max_payload)
            if self.session_timeout > 0:
                await asyncio.wait_for(session.run(), self.session_timeout)
            else:
                await session.run()
        except asyncio.TimeoutError:
            logger.warning("Session for %s timed out after %.1fs while %s", ctx.peername, ctx.elapsed(), ctx.state)
            if not ctx.is_finished():
                ctx.advance(SessionState.FAILED)
        except asyncio.CancelledError:
            # cancelled by stop()
            logger.info("Session for %s cancelled while %s", ctx.peername, ctx.state)
            if not ctx.is_finished():
                ctx.advance(SessionState.FAILED)
        except Exception as exc:
            logger.exception("Unhandled error for %s: %s", ctx.peername, exc)
        finally:
            await channel.close()
            logger.debug("Connection from %s closed (%s)", ctx.peername, ctx.state)

    def _reap(self, task: asyncio.Task) -> None:
        self._units.discard(task)
        logger.debug("Reaped %s, %s sessions still running", task.get_name(), len(self._units))


__all__ = ["CipherDaemon"]
