"""Shared pytest configuration: registers the cachepool fixtures."""

pytest_plugins = ["cachepool.testing.fixtures"]
