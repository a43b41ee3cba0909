"""SQLAlchemy models exposed for imports."""
from .kv import KVEntry

__all__ = ["KVEntry"]
