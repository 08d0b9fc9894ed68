"""Table engines and the filter panel session."""

from .client_table import ClientTableEngine
from .filter_session import FilterSession, SessionState
from .server_table import ServerTableEngine

__all__ = [
    "ClientTableEngine",
    "ServerTableEngine",
    "FilterSession",
    "SessionState",
]
