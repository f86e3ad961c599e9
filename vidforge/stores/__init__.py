"""In-memory stores backing users, sessions and video history"""

from .record_store import RecordStore
from .session_table import SessionLookup, SessionState, SessionTable

__all__ = ["RecordStore", "SessionLookup", "SessionState", "SessionTable"]
