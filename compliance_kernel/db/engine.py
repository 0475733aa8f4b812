"""
Engine and session management for the compliance database.

Responsibility:
    Owns the process-wide SQLAlchemy engine and session factory, and the
    ``session_scope()`` unit of work used by imports, report updates and
    exports.  RunService takes the factory instead and manages its own
    transaction.

Architecture position:
    Kernel > DB.  Imports only ``db.base`` (and the models, lazily, for
    create/drop).

Connection policy:
    - PostgreSQL: QueuePool with pre-ping and recycle, READ COMMITTED.
    - SQLite: one shared connection (StaticPool) so ``sqlite://`` keeps its
      tables between sessions; used by tests and local dry runs.

Failure modes:
    - RuntimeError when a getter is called before ``init_engine_from_url``.
    - Driver errors (unreachable host, bad credentials) surface on first use.
"""

import atexit
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from compliance_kernel.logging_config import configure_logging, get_logger

logger = get_logger("db.engine")

_NOT_INITIALIZED = "Engine not initialized. Call init_engine_from_url() first."

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def _engine_options(
    backend: str,
    *,
    pool_size: int,
    max_overflow: int,
    pool_pre_ping: bool,
    pool_timeout: int,
    pool_recycle: int,
) -> dict[str, Any]:
    if backend == "sqlite":
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {
        "poolclass": QueuePool,
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": pool_pre_ping,
        "pool_timeout": pool_timeout,
        "pool_recycle": pool_recycle,
        "isolation_level": "READ COMMITTED",
    }


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10,
    pool_pre_ping: bool = True,
    pool_timeout: int = 30,
    pool_recycle: int = 1800,
) -> Engine:
    """
    Create the engine and session factory for ``database_url``.

    Replaces any engine set up by an earlier call.  Pool arguments apply to
    PostgreSQL only.  Sessions are created with ``expire_on_commit=False``
    so committed rows stay readable after the run transaction closes.
    """
    global _engine, _session_factory

    backend = make_url(database_url).get_backend_name()
    options = _engine_options(
        backend,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=pool_pre_ping,
        pool_timeout=pool_timeout,
        pool_recycle=pool_recycle,
    )

    _engine = create_engine(database_url, echo=echo, **options)
    _session_factory = sessionmaker(bind=_engine, expire_on_commit=False)

    configure_logging()
    logger.info(
        "engine_initialized",
        extra={
            "dialect": backend,
            "pool_size": options.get("pool_size"),
            "echo": echo,
        },
    )
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """The factory RunService opens its run transaction from."""
    if _session_factory is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _session_factory


def get_session() -> Session:
    return get_session_factory()()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    Commit on clean exit, roll back and re-raise on error, always close.

        with session_scope() as session:
            ReportService(session, clock).update_report(...)
    """
    session = get_session()
    try:
        yield session
        session.commit()
        logger.debug("transaction_committed")
    except Exception:
        session.rollback()
        logger.warning("transaction_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def _metadata():
    from compliance_kernel.db.base import Base
    import compliance_kernel.models  # noqa: F401  registers tables on Base.metadata

    return Base.metadata


def create_tables() -> None:
    """Create any missing tables; existing tables are left alone."""
    _metadata().create_all(get_engine())


def drop_tables() -> None:
    """Drop every table.  Tests only."""
    _metadata().drop_all(get_engine())


def reset_engine() -> None:
    """Dispose the engine and forget the factory."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


def is_postgres() -> bool:
    return _engine is not None and _engine.dialect.name == "postgresql"


atexit.register(reset_engine)
