"""
app/services/user_batcher.py

Groups projected user records into bounded batches.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from app.domain.user_import import (
    MAX_BATCH_SIZE,
    SOURCE_PAGE_SIZE,
    ExportableUser,
    RecordSource,
    UserBatch,
    WireRecord,
)
from app.mappers.wire_mapper import project_user


def iter_user_batches(
    source: RecordSource,
    *,
    max_batch_size: int = MAX_BATCH_SIZE,
    page_size: int = SOURCE_PAGE_SIZE,
    projector: Callable[[ExportableUser], WireRecord | None] = project_user,
) -> Iterator[tuple[UserBatch, int]]:
    """
    Yield `(batch, record_count)` pairs lazily while draining the source.

    Records the projector rejects never enter a batch. Every batch but the
    last holds exactly `max_batch_size` records; no batch is empty.
    """

    size = max(1, max_batch_size)
    pending: list[WireRecord] = []

    for record in source.iter_records(page_size=page_size):
        wired = projector(record)
        if wired is not None:
            pending.append(wired)

        if len(pending) >= size:
            yield UserBatch(records=tuple(pending)), len(pending)
            pending = []

    if pending:
        yield UserBatch(records=tuple(pending)), len(pending)
