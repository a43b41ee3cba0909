"""Route modules for the Overtime Sync API."""
from . import auth, data

__all__ = ["auth", "data"]
