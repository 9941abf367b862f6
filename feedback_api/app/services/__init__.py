"""Service layer: analytics views and feedback submission."""
