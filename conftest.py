import os

# Default to SQLite for tests
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_feedback.db")
os.environ.setdefault("ORG_CACHE_BACKEND", "memory")
