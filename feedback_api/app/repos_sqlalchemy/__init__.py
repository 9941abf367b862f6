"""SQLAlchemy-backed repository helpers."""
