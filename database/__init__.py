"""Database module initialization"""

from .db import get_engine, init_db, make_session_factory, session_scope
from .models import Base, FinalPick
from .repository import PickRepository

__all__ = [
    # Database utilities
    "get_engine",
    "init_db",
    "make_session_factory",
    "session_scope",
    # Models
    "Base",
    "FinalPick",
    # Pick source
    "PickRepository",
]
