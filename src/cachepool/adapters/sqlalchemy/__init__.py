"""SQLAlchemy adapter – SqlAlchemyBackend and table definitions."""
from cachepool.adapters.sqlalchemy.backend import SqlAlchemyBackend, build_tables

__all__ = ["SqlAlchemyBackend", "build_tables"]
