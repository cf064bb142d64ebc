from __future__ import annotations

import asyncio
import logging
import sys
from typing import Dict, List, Optional

from server.config import SERVER_CONFIG, load_server_config
from server.core import CipherDaemon
from shared.protocol.errors import ExitCode, ProtocolError
from shared.protocol.roles import Role
from shared.utils.cli import UsageParser, parse_port, report_error

PROGRAMS: Dict[Role, str] = {
    Role.ENCRYPT: "encryption-daemon",
    Role.DECRYPT: "decryption-daemon",
}


async def run_daemon(role: Role, port: int) -> None:
    daemon = CipherDaemon(
        SERVER_CONFIG["host"],
        port,
        role,
        backlog=SERVER_CONFIG["backlog"],
        session_timeout=SERVER_CONFIG["session_timeout"],
        max_payload=SERVER_CONFIG["max_payload"],
    )
    await daemon.start()
    try:
        await daemon.serve_forever()
    finally:
        await daemon.stop()


def main(role: Role, argv: Optional[List[str]] = None) -> int:
    prog = PROGRAMS[role]
    parser = UsageParser(prog=prog, description=f"One-time-pad {role} daemon.")
    parser.add_argument("port", type=parse_port, help="TCP port to listen on")
    try:
        load_server_config()
        logging.basicConfig(level=SERVER_CONFIG["log_level"])
        args = parser.parse_args(argv)
        asyncio.run(run_daemon(role, args.port))
    except ProtocolError as exc:
        return report_error(prog, exc)
    except KeyboardInterrupt:
        pass
    return int(ExitCode.SUCCESS)


def encryption_daemon() -> None:
    sys.exit(main(Role.ENCRYPT))


def decryption_daemon() -> None:
    sys.exit(main(Role.DECRYPT))

