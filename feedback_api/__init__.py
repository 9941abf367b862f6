"""Multi-tenant customer feedback platform API."""
