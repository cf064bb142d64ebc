from __future__ import annotations

import sys
from typing import List, Optional

from shared.protocol.errors import ExitCode, ProtocolError
from shared.utils.cli import UsageParser, parse_length, report_error
from shared.utils.common import generate_key

PROG = "keygen"


def main(argv: Optional[List[str]] = None) -> int:
    parser = UsageParser(prog=PROG, description="Print a random one-time pad followed by a newline.")
    parser.add_argument("keylength", type=parse_length, help="number of symbols to generate")
    try:
        args = parser.parse_args(argv)
    except ProtocolError as exc:
        return report_error(PROG, exc)
    print(generate_key(args.keylength))
    return int(ExitCode.SUCCESS)


def keygen() -> None:
    sys.exit(main())
