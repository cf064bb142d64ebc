from __future__ import annotations

from typing import Optional


class FakeWriter:
    """Collects written bytes; drain fails once more than `fail_after` bytes were written."""

    def __init__(self, fail_after: Optional[int] = None) -> None:
        self.data = bytearray()
        self.fail_after = fail_after
        self.closed = False

    def write(self, data: bytes) -> None:
        self.data.extend(data)

    async def drain(self) -> None:
        if self.fail_after is not None and len(self.data) > self.fail_after:
            raise ConnectionResetError("peer went away")

    def get_extra_info(self, name: str, default=None):
        return ("127.0.0.1", 40000) if name == "peername" else default

    def is_closing(self) -> bool:
        return self.closed

    def close(self) -> None:
        self.closed = True

    async def wait_closed(self) -> None:
        return None
