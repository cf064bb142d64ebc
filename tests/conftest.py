from __future__ import annotations

import asyncio
import threading

import pytest

from server.core import CipherDaemon


@pytest.fixture
def running_daemon():
    """Start daemons on ephemeral ports in a background event loop."""
    started = []

    def _start(role) -> int:
        loop = asyncio.new_event_loop()
        daemon = CipherDaemon("127.0.0.1", 0, role)
        loop.run_until_complete(daemon.start())
        thread = threading.Thread(target=loop.run_forever, daemon=True)
        thread.start()
        started.append((loop, daemon, thread))
        return daemon.port

    yield _start

    for loop, daemon, thread in started:
        asyncio.run_coroutine_threadsafe(daemon.stop(), loop).result(timeout=5)
        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout=5)
        loop.close()
