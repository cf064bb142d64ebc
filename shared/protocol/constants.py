"""Protocol-wide constants shared by client and server."""

ENCODING = "ascii"
ALPHABET = " ABCDEFGHIJKLMNOPQRSTUVWXYZ"  # index == symbol value, space is 0
ALPHABET_SIZE = len(ALPHABET)

ROLE_TOKEN_LEN = 7
AUTH_RESULT_LEN = 4
LENGTH_FIELD_WIDTH = 9
MAX_PAYLOAD_SIZE = 10**LENGTH_FIELD_WIDTH - 1

LISTEN_BACKLOG = 5
TRANSFER_CHUNK_SIZE = 64 * 1024
MIN_PORT = 0
MAX_PORT = 65535
RECOMMENDED_MIN_PORT = 50000

__all__ = [
    "ENCODING",
    "ALPHABET",
    "ALPHABET_SIZE",
    "ROLE_TOKEN_LEN",
    "AUTH_RESULT_LEN",
    "LENGTH_FIELD_WIDTH",
    "MAX_PAYLOAD_SIZE",
    "LISTEN_BACKLOG",
    "TRANSFER_CHUNK_SIZE",
    "MIN_PORT",
    "MAX_PORT",
    "RECOMMENDED_MIN_PORT",
]
