from .session import create_engine_for, create_schema, make_sessionmaker, session_scope
from .store import FeedbackStore

__all__ = [
    "FeedbackStore",
    "create_engine_for",
    "create_schema",
    "make_sessionmaker",
    "session_scope",
]
