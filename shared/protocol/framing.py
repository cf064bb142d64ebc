from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Union

from .constants import ENCODING, LENGTH_FIELD_WIDTH, MAX_PAYLOAD_SIZE, TRANSFER_CHUNK_SIZE
from .errors import FrameError, PartialTransferError

logger = logging.getLogger(__name__)


class Direction(StrEnum):
    SEND = "send"
    RECEIVE = "receive"


@dataclass
class Channel:
    """One connected byte stream, owned by exactly one session."""

    reader: asyncio.StreamReader
    writer: asyncio.StreamWriter

    @property
    def peername(self) -> str:
        return str(self.writer.get_extra_info("peername"))

    async def close(self) -> None:
        if self.writer.is_closing():
            return
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except (ConnectionError, OSError) as exc:
            logger.debug("Error during channel cleanup for %s: %s", self.peername, exc)


async def transfer_all(
    channel: Channel,
    buffer: Union[bytes, bytearray],
    length: int,
    direction: Direction,
) -> int:
    """
    Move exactly `length` bytes through the channel, looping over partial reads/writes.

    Stops early when the peer closes or the stream fails and returns the short count;
    deciding whether a short count is fatal is left to the caller. A receive buffer is
    emptied first and only grows as bytes arrive, so a partial fill never exposes
    stale content and an announced length alone allocates nothing.
    """
    if direction is Direction.RECEIVE:
        if not isinstance(buffer, bytearray):
            raise TypeError("receive buffer must be a bytearray")
        del buffer[:]

    total = 0
    remaining = length
    try:
        while remaining > 0:
            step = min(remaining, TRANSFER_CHUNK_SIZE)
            if direction is Direction.SEND:
                channel.writer.write(bytes(buffer[total : total + step]))
                await channel.writer.drain()
                moved = step
            else:
                chunk = await channel.reader.read(step)
                moved = len(chunk)
                if not moved:
                    break
                buffer.extend(chunk)
            total += moved
            remaining -= moved
            logger.debug("%s %s bytes (total %s, remaining %s)", direction, moved, total, remaining)
    except (ConnectionError, OSError) as exc:
        logger.debug("%s stopped after %s of %s bytes: %s", direction, total, length, exc)

    logger.debug("%s %s out of %s bytes", direction, total, length)
    return total


async def send_exact(channel: Channel, data: bytes, what: str = "data") -> None:
    sent = await transfer_all(channel, data, len(data), Direction.SEND)
    if sent != len(data):
        raise PartialTransferError(len(data), sent, what)


async def recv_exact(channel: Channel, length: int, what: str = "data") -> bytes:
    buffer = bytearray()
    received = await transfer_all(channel, buffer, length, Direction.RECEIVE)
    if received != length:
        raise PartialTransferError(length, received, what)
    return bytes(buffer)


def encode_length(length: int) -> bytes:
    """Encode a payload length as a zero-padded 9-digit ASCII field."""
    if not (0 <= length <= MAX_PAYLOAD_SIZE):
        raise FrameError(f"length {length} does not fit a {LENGTH_FIELD_WIDTH}-digit field")
    return f"{length:0{LENGTH_FIELD_WIDTH}d}".encode(ENCODING)


def decode_length(field: bytes) -> int:
    """
    Decode a 9-byte length field.
    Accepts zero-padded digits as well as digits followed by NUL fill.
    """
    if len(field) != LENGTH_FIELD_WIDTH:
        raise FrameError(f"length field must be {LENGTH_FIELD_WIDTH} bytes, got {len(field)}")
    digits = field.rstrip(b"\0")
    if not digits or not digits.isdigit():
        raise FrameError(f"malformed length field {field!r}")
    return int(digits)


async def send_length(channel: Channel, length: int, what: str = "length") -> None:
    await send_exact(channel, encode_length(length), what)


async def recv_length(channel: Channel, what: str = "length") -> int:
    return decode_length(await recv_exact(channel, LENGTH_FIELD_WIDTH, what))


async def send_frame(channel: Channel, payload: bytes, what: str = "payload") -> None:
    """Write one length field followed by its payload."""
    await send_length(channel, len(payload), f"{what} length")
    await send_exact(channel, payload, what)


async def recv_frame(channel: Channel, what: str = "payload") -> bytes:
    length = await recv_length(channel, f"{what} length")
    return await recv_exact(channel, length, what)


__all__ = [
    "Direction",
    "Channel",
    "transfer_all",
    "send_exact",
    "recv_exact",
    "encode_length",
    "decode_length",
    "send_length",
    "recv_length",
    "send_frame",
    "recv_frame",
]
