"""
Module: compliance_kernel.selectors.base
Responsibility: Abstract base class for all read-only query selectors.
Architecture position: Kernel > Selectors.  May import from db/ and models/.
    MUST NOT import from services/ or outer layers.

Invariants enforced:
    - Read-only access: selectors accept a Session from the caller but MUST
      NOT call session.add(), session.delete(), session.commit(), or
      session.flush().
    - DTO return convention: selectors return frozen dataclasses from
      compliance_kernel.domain.types, not ORM instances.
    - Every statement runs through execute_with_retry(), so a dropped
      connection on a read is retried with linear backoff.  Selectors
      reading inside a transaction that has already written pass
      ``max_retries=1``: a dropped connection there has already lost
      the transaction.

Failure modes:
    - OperationalError once retries are exhausted.
"""

from abc import ABC
from typing import Any

from sqlalchemy.engine import Result
from sqlalchemy.orm import Session

from compliance_kernel.db.retry import execute_with_retry


class BaseSelector(ABC):
    """
    Abstract base class for all selectors.

    Contract:
        Selectors accept a Session from the caller, perform read-only queries,
        and return DTOs.  They MUST NOT mutate any data.
    """

    max_retries: int = 3
    retry_delay: float = 0.1

    def __init__(self, session: Session, max_retries: int | None = None):
        self.session = session
        if max_retries is not None:
            self.max_retries = max_retries

    def _execute(self, statement: Any) -> Result:
        return execute_with_retry(
            lambda: self.session.execute(statement),
            max_retries=self.max_retries,
            retry_delay=self.retry_delay,
        )
