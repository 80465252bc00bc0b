"""Adapters – concrete back-ends for external stores.

Each sub-package imports its driver lazily and raises ``ImportError`` with an
install hint when the matching extra is missing.
"""
