"""
BaseService -- abstract base for session-bound services.

Responsibility:
    Provides the common constructor and session-handling contract for
    services that write inside a caller's transaction.  Concrete services
    use ``session.flush()`` -- never ``session.commit()``.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.

Invariants enforced:
    - Services flush within the caller's transaction and never commit or
      roll back.  The caller (``session_scope()``, the CLI, or a test
      fixture) owns commit/rollback.  RunService is the one exception: it
      opens and owns the run transaction itself and does not extend this
      class.
"""

from abc import ABC

from sqlalchemy.orm import Session


class BaseService(ABC):
    """
    Abstract base class for session-bound services.

    Guarantees:
        - The service never calls ``session.commit()`` or
          ``session.rollback()``.
    """

    def __init__(self, session: Session):
        self.session = session
