"""
Shared protocol package that centralizes role tokens, the one-time-pad cipher,
length-prefixed framing, the role handshake and input validation for both
daemons and clients.
"""

from .cipher import decrypt, encrypt, int_to_symbol, is_valid_text, symbol_to_int, transform_for_role
from .constants import ALPHABET, ENCODING, LENGTH_FIELD_WIDTH, LISTEN_BACKLOG, MAX_PAYLOAD_SIZE
from .errors import (
    AuthRejection,
    ConfigError,
    ExitCode,
    FrameError,
    NetworkError,
    PartialTransferError,
    ProtocolError,
    UsageError,
    ValidationError,
)
from .framing import (
    Channel,
    Direction,
    decode_length,
    encode_length,
    recv_exact,
    recv_frame,
    recv_length,
    send_exact,
    send_frame,
    send_length,
    transfer_all,
)
from .handshake import check_token, client_handshake, receive_token, send_result
from .messages import CipherRequest, CipherResult
from .roles import AuthResult, Role, RoleToken, normalize_role, role_for_token, token_for_role
from .validator import load_validated_text, read_first_line, validate_lengths

__all__ = [
    "encrypt",
    "decrypt",
    "symbol_to_int",
    "int_to_symbol",
    "is_valid_text",
    "transform_for_role",
    "ALPHABET",
    "ENCODING",
    "LENGTH_FIELD_WIDTH",
    "LISTEN_BACKLOG",
    "MAX_PAYLOAD_SIZE",
    "ExitCode",
    "ProtocolError",
    "UsageError",
    "ConfigError",
    "ValidationError",
    "NetworkError",
    "AuthRejection",
    "FrameError",
    "PartialTransferError",
    "Channel",
    "Direction",
    "transfer_all",
    "send_exact",
    "recv_exact",
    "encode_length",
    "decode_length",
    "send_length",
    "recv_length",
    "send_frame",
    "recv_frame",
    "receive_token",
    "check_token",
    "send_result",
    "client_handshake",
    "CipherRequest",
    "CipherResult",
    "Role",
    "RoleToken",
    "AuthResult",
    "normalize_role",
    "token_for_role",
    "role_for_token",
    "load_validated_text",
    "read_first_line",
    "validate_lengths",
]
