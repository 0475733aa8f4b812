"""
Declarative base for the compliance tables.

Every model gets an integer identity ``id``; reviewers quote run and report
ids ("run 42"), and the history query relies on ids growing with insert
order.  ``TrackedBase`` adds server-side ``created_at``/``updated_at``
columns for rows that are edited after the run (reports).

Lowest layer of the kernel: nothing here imports models or services.
"""

from datetime import datetime
from typing import ClassVar

from sqlalchemy import BigInteger, DateTime, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# BIGINT identity on PostgreSQL; SQLite only autoincrements INTEGER PRIMARY KEY.
IdentityInteger = BigInteger().with_variant(Integer, "sqlite")


def _server_timestamp(**kwargs) -> Mapped[datetime]:
    return mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, **kwargs
    )


class Base(DeclarativeBase):
    type_annotation_map: ClassVar[dict] = {datetime: DateTime(timezone=True)}

    id: Mapped[int] = mapped_column(IdentityInteger, primary_key=True, autoincrement=True)


class TrackedBase(Base):
    """Adds insert and last-update timestamps, both set by the database."""

    __abstract__ = True

    created_at: Mapped[datetime] = _server_timestamp()
    updated_at: Mapped[datetime] = _server_timestamp(onupdate=func.now())
