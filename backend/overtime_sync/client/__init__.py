"""Synchronizing client for the Overtime Sync API."""
from .api import OvertimeAPI
from .storage import LocalStorage
from .tracker import OvertimeTracker, SyncState, SyncStatus

__all__ = ["OvertimeAPI", "LocalStorage", "OvertimeTracker", "SyncState", "SyncStatus"]
