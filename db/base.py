"""
db/base.py

Declarative base and shared mixins for exportable models.
"""

from datetime import datetime

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """
    Project-wide declarative base.
    Only subclasses of this base can be used as an import record source.
    """


class TimestampMixin:
    """
    Mixin that adds created_at and updated_at columns.
    The import only reads them; writers own their values.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
