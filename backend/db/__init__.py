"""Relational persistence: engine/session helpers, ORM tables, repository."""

from db.session import dispose_engine, get_engine, init_db, session_scope

__all__ = ["dispose_engine", "get_engine", "init_db", "session_scope"]
