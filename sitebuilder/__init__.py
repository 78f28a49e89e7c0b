"""Multi-tenant site builder API."""
