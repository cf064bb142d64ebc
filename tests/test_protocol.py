import asyncio
import tracemalloc

import pytest

from shared.protocol import (
    AuthRejection,
    AuthResult,
    Channel,
    Direction,
    FrameError,
    PartialTransferError,
    Role,
    RoleToken,
    check_token,
    client_handshake,
    decode_length,
    encode_length,
    recv_exact,
    recv_frame,
    role_for_token,
    send_frame,
    transfer_all,
)
from shared.protocol.constants import AUTH_RESULT_LEN, LENGTH_FIELD_WIDTH, MAX_PAYLOAD_SIZE, ROLE_TOKEN_LEN, TRANSFER_CHUNK_SIZE

from .helpers import FakeWriter


def _channel(data: bytes = b"", eof: bool = True, writer: FakeWriter = None) -> Channel:
    reader = asyncio.StreamReader()
    if data:
        reader.feed_data(data)
    if eof:
        reader.feed_eof()
    return Channel(reader=reader, writer=writer or FakeWriter())


def test_token_and_result_widths():
    assert all(len(token.value) == ROLE_TOKEN_LEN for token in RoleToken)
    assert all(len(result.value) == AUTH_RESULT_LEN for result in AuthResult)


def test_role_for_token():
    assert role_for_token(b"otp_enc") is Role.ENCRYPT
    assert role_for_token(b"otp_dec") is Role.DECRYPT
    assert role_for_token(b"otp_xyz") is None
    assert role_for_token(b"\xff\xfe") is None


def test_check_token_gates_roles():
    assert check_token(b"otp_enc", Role.ENCRYPT) is AuthResult.PASS
    assert check_token(b"otp_dec", Role.ENCRYPT) is AuthResult.FAIL
    assert check_token(b"otp_dec", Role.DECRYPT) is AuthResult.PASS
    assert check_token(b"otp_enc", Role.DECRYPT) is AuthResult.FAIL


def test_encode_length_is_fixed_width():
    assert encode_length(5) == b"000000005"
    assert encode_length(0) == b"000000000"
    assert encode_length(MAX_PAYLOAD_SIZE) == b"999999999"
    assert len(encode_length(123456)) == LENGTH_FIELD_WIDTH


def test_encode_length_rejects_values_the_field_cannot_hold():
    with pytest.raises(FrameError):
        encode_length(MAX_PAYLOAD_SIZE + 1)
    with pytest.raises(FrameError):
        encode_length(-1)


def test_decode_length_accepts_zero_and_nul_padding():
    assert decode_length(b"000000005") == 5
    assert decode_length(b"5\0\0\0\0\0\0\0\0") == 5
    assert decode_length(b"123456789") == 123456789


@pytest.mark.parametrize("field", [b"\0" * 9, b"12a456789", b"-00000005", b"12345", b"0000000001"])
def test_decode_length_rejects_malformed_fields(field):
    with pytest.raises(FrameError):
        decode_length(field)


def test_receive_reassembles_partial_reads():
    async def scenario():
        channel = _channel(eof=False)
        loop = asyncio.get_running_loop()
        channel.reader.feed_data(b"ABC")
        loop.call_later(0.01, channel.reader.feed_data, b"DE")
        return await recv_exact(channel, 5)

    assert asyncio.run(scenario()) == b"ABCDE"


def test_short_frame_is_detected():
    async def scenario():
        return await recv_frame(_channel(b"000000005AB"))

    with pytest.raises(PartialTransferError) as excinfo:
        asyncio.run(scenario())
    assert excinfo.value.expected == 5
    assert excinfo.value.actual == 2


def test_short_receive_returns_count_and_clears_buffer():
    async def scenario():
        buffer = bytearray(b"STALE")
        moved = await transfer_all(_channel(b"AB"), buffer, 5, Direction.RECEIVE)
        return moved, bytes(buffer)

    moved, buffer = asyncio.run(scenario())
    assert moved == 2
    assert buffer == b"AB"


def test_announced_length_allocates_only_what_arrives():
    async def scenario():
        with pytest.raises(PartialTransferError):
            await recv_frame(_channel(b"300000000AB"))

    tracemalloc.start()
    try:
        asyncio.run(scenario())
        _, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()
    assert peak < 10 * 1024 * 1024


def test_send_stops_when_peer_resets():
    async def scenario():
        writer = FakeWriter(fail_after=TRANSFER_CHUNK_SIZE)
        payload = b"A" * (TRANSFER_CHUNK_SIZE * 2)
        return await transfer_all(_channel(writer=writer), payload, len(payload), Direction.SEND)

    assert asyncio.run(scenario()) == TRANSFER_CHUNK_SIZE


def test_send_frame_writes_length_then_payload():
    async def scenario():
        writer = FakeWriter()
        await send_frame(_channel(writer=writer), b"HELLO")
        return bytes(writer.data)

    assert asyncio.run(scenario()) == b"000000005HELLO"


def test_client_handshake_rejected():
    async def scenario():
        writer = FakeWriter()
        channel = _channel(b"FAIL", writer=writer)
        with pytest.raises(AuthRejection):
            await client_handshake(channel, Role.DECRYPT)
        return bytes(writer.data)

    assert asyncio.run(scenario()) == b"otp_dec"


def test_client_handshake_without_answer_is_rejection():
    async def scenario():
        await client_handshake(_channel(b"PA"), Role.ENCRYPT)

    with pytest.raises(AuthRejection):
        asyncio.run(scenario())


def test_client_handshake_accepted():
    async def scenario():
        await client_handshake(_channel(b"PASS"), Role.ENCRYPT)

    asyncio.run(scenario())
