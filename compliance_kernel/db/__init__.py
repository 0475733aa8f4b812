"""Database layer: declarative base, engine/session management, read retry."""

from compliance_kernel.db.base import Base, TrackedBase
from compliance_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_engine,
    get_session,
    get_session_factory,
    init_engine_from_url,
    is_postgres,
    reset_engine,
    session_scope,
)
from compliance_kernel.db.retry import execute_with_retry, is_transient_error

__all__ = [
    "Base",
    "TrackedBase",
    "create_tables",
    "drop_tables",
    "execute_with_retry",
    "get_engine",
    "get_session",
    "get_session_factory",
    "init_engine_from_url",
    "is_postgres",
    "is_transient_error",
    "reset_engine",
    "session_scope",
]
