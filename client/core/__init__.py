from .network import NetworkClient
from .session import ClientSession

__all__ = ["NetworkClient", "ClientSession"]
