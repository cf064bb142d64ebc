from .cli import UsageParser, parse_length, parse_port, report_error
from .common import generate_key

__all__ = ["UsageParser", "parse_port", "parse_length", "report_error", "generate_key"]
