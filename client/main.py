from __future__ import annotations

import asyncio
import logging
import sys
from typing import Dict, List, Optional

from client.config import CLIENT_CONFIG, load_config
from client.core import ClientSession, NetworkClient
from shared.protocol.errors import ExitCode, ProtocolError
from shared.protocol.messages import CipherRequest, CipherResult
from shared.protocol.roles import Role
from shared.protocol.validator import load_validated_text, validate_lengths
from shared.utils.cli import UsageParser, parse_port, report_error

PROGRAMS: Dict[Role, str] = {
    Role.ENCRYPT: "encryption-client",
    Role.DECRYPT: "decryption-client",
}

TEXT_NAMES: Dict[Role, str] = {
    Role.ENCRYPT: "plaintext",
    Role.DECRYPT: "ciphertext",
}


def load_request(text_path: str, key_path: str) -> CipherRequest:
    """Read and validate both files before any network I/O happens."""
    text, text_length = load_validated_text(text_path)
    key, key_length = load_validated_text(key_path)
    validate_lengths(text_length, key_length, key_path)
    return CipherRequest.build(text, key)


async def run_client(role: Role, request: CipherRequest, port: int) -> CipherResult:
    session = ClientSession(NetworkClient(port), role)
    return await session.run(request)


def main(role: Role, argv: Optional[List[str]] = None) -> int:
    prog = PROGRAMS[role]
    text_name = TEXT_NAMES[role]
    try:
        load_config()
        logging.basicConfig(level=CLIENT_CONFIG["log_level"])

        parser = UsageParser(prog=prog, description=f"Send a {text_name} file and key to the {role} daemon.")
        parser.add_argument(text_name, help=f"file holding the {text_name} on its first line")
        parser.add_argument("key", help="file holding the one-time pad on its first line")
        parser.add_argument("port", type=parse_port, help="port the daemon listens on")
        args = parser.parse_args(argv)

        request = load_request(getattr(args, text_name), args.key)
        result = asyncio.run(run_client(role, request, args.port))
    except ProtocolError as exc:
        return report_error(prog, exc)

    print(result.text)
    return int(ExitCode.SUCCESS)


def encryption_client() -> None:
    sys.exit(main(Role.ENCRYPT))


def decryption_client() -> None:
    sys.exit(main(Role.DECRYPT))
