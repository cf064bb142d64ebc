from .connection import ConnectionContext, SessionState
from .server import CipherDaemon
from .session import ConnectionSession

__all__ = ["ConnectionContext", "SessionState", "ConnectionSession", "CipherDaemon"]
