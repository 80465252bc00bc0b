"""Observability – structured logging for the cache engine."""
