"""
app/repositories/user_source_repository.py

Paginated extraction of exportable records from the database.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from sqlalchemy import inspect, select
from sqlalchemy.orm import Session

from app.domain.user_import import SOURCE_PAGE_SIZE, ExportableUser


class SQLAlchemyUserSource:
    """
    Streams rows of a declarative model in primary-key order, one page at a time.
    """

    def __init__(self, session: Session, model: type[Any]) -> None:
        mapper = inspect(model)
        primary_key = mapper.primary_key
        if len(primary_key) != 1:
            raise ValueError(f"{model.__name__} must have a single-column primary key.")
        self._session = session
        self._model = model
        self._key_column = primary_key[0]
        self._key_attribute = mapper.get_property_by_column(self._key_column).key

    def iter_records(self, *, page_size: int = SOURCE_PAGE_SIZE) -> Iterator[ExportableUser]:
        """
        Yield every row exactly once using keyset pagination on the primary key.
        """

        size = max(1, page_size)
        last_key: Any = None
        while True:
            stmt = select(self._model).order_by(self._key_column).limit(size)
            if last_key is not None:
                stmt = stmt.where(self._key_column > last_key)

            page = list(self._session.scalars(stmt))
            if not page:
                return

            yield from page
            last_key = getattr(page[-1], self._key_attribute)
            for row in page:
                self._session.expunge(row)

            if len(page) < size:
                return
