"""
app/domain/user_import.py

Domain models for the user bulk import pipeline.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Protocol, TypedDict

from app.schemas.bulk_create import BulkCreateRequest

MAX_BATCH_SIZE = 100
SOURCE_PAGE_SIZE = 100


class ExportableUser(Protocol):
    """
    Read-only capabilities a record needs to be exported.
    """

    @property
    def id(self) -> Any: ...

    @property
    def email(self) -> str | None: ...

    @property
    def name(self) -> str | None: ...


class RecordSource(Protocol):
    """
    Lazy, restartable supplier of exportable records.
    """

    def iter_records(self, *, page_size: int = SOURCE_PAGE_SIZE) -> Iterator[ExportableUser]: ...


class WireRecord(TypedDict, total=False):
    """
    Minimal transport representation of one user.
    """

    user_id: int | str
    email: str
    name: str


@dataclass(frozen=True)
class UserBatch:
    """
    Immutable group of wire records sent in one request.
    """

    records: tuple[WireRecord, ...]

    @property
    def count(self) -> int:
        return len(self.records)

    def to_json(self) -> str:
        return BulkCreateRequest(users=[dict(record) for record in self.records]).model_dump_json()


@dataclass
class ImportRunSummary:
    """
    End-of-run totals.

    total_sent counts every record placed in an assembled batch, including
    records the remote service later reported as failed.
    """

    total_sent: int = 0
    failed: list[Any] = field(default_factory=list)

    @property
    def total_failed(self) -> int:
        return len(self.failed)
