from .session_store import SessionState, SessionStore

__all__ = [
    "SessionStore",
    "SessionState",
]
