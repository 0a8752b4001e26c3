"""Cache admin collaborator protocols."""

from .store_server_client import ServerHandle, StoreServerClient
from .store_value_client import StoreValueClient

__all__ = [
    "ServerHandle",
    "StoreServerClient",
    "StoreValueClient",
]
