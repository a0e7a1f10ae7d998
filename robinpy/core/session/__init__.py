"""
Session management module.

Provides the session lifecycle (authenticate, save, load, logout) and
persistent storage for Robinhood sessions.
"""
from .protocols import SessionStorage
from .models import Credentials, Session, SessionRecord
from .json_session import JSONSession
from .memory_session import MemorySession
from .manager import SessionManager

__all__ = [
    'SessionStorage',
    'Credentials',
    'Session',
    'SessionRecord',
    'JSONSession',
    'MemorySession',
    'SessionManager',
]
