"""
app/services/user_import_service.py

Orchestration of one user bulk import run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol, TextIO

from sqlalchemy.orm import Session

from app.config import UserImportSettings
from app.connectors.bulk_create_connector import BulkCreateConnector
from app.domain.user_import import ImportRunSummary, RecordSource, UserBatch
from app.logging_utils import log_event
from app.repositories.user_source_repository import SQLAlchemyUserSource
from app.schemas.bulk_create import BulkCreateResponse
from app.services.user_batcher import iter_user_batches
from app.validators.import_preconditions import ImportPreconditions, ModelResolver

logger = logging.getLogger(__name__)

SUCCESS_MARK = "."
FAILURE_MARK = "F"


class BatchDeliverer(Protocol):
    def deliver(self, batch: UserBatch) -> BulkCreateResponse: ...


class RunPreconditions(Protocol):
    def assert_runnable(self) -> type[Any]: ...


class UserImportRun:
    """
    Drains the record source, delivers every batch in order and totals the results.

    A delivery error aborts the whole run; totals for batches already
    delivered are not returned in that case.
    """

    def __init__(
        self,
        *,
        client: BatchDeliverer,
        preconditions: RunPreconditions,
        source_factory: Callable[[type[Any]], RecordSource],
        status_stream: TextIO | None = None,
    ) -> None:
        self._client = client
        self._preconditions = preconditions
        self._source_factory = source_factory
        self._status_stream = status_stream

    def run(self) -> ImportRunSummary:
        model = self._preconditions.assert_runnable()
        source = self._source_factory(model)
        summary = ImportRunSummary()
        log_event(logger, logging.INFO, "user_import_started", model=model.__name__)

        for batch_number, (batch, count) in enumerate(iter_user_batches(source), start=1):
            summary.total_sent += count
            failures = self._client.deliver(batch).failed
            summary.failed.extend(failures)
            logger.info(
                "Delivered batch number=%s records=%s failed=%s",
                batch_number,
                count,
                len(failures),
            )
            self._report_progress(count, len(failures))

        log_event(
            logger,
            logging.INFO,
            "user_import_finished",
            model=model.__name__,
            total_sent=summary.total_sent,
            total_failed=summary.total_failed,
        )
        return summary

    def _report_progress(self, count: int, failed_count: int) -> None:
        if self._status_stream is None:
            return
        self._status_stream.write(SUCCESS_MARK * max(0, count - failed_count))
        self._status_stream.write(FAILURE_MARK * failed_count)
        self._status_stream.flush()


def build_user_import_run(
    *,
    open_session: Callable[[], Session],
    settings: UserImportSettings,
    status_stream: TextIO | None = None,
    model_resolver: ModelResolver | None = None,
    client: BatchDeliverer | None = None,
) -> UserImportRun:
    """
    Wire a run against the database and the configured endpoint.

    `open_session` is called only after the preconditions pass, so a run that
    is not allowed to start never touches the database.
    """

    return UserImportRun(
        client=client or BulkCreateConnector(settings=settings),
        preconditions=ImportPreconditions(settings, model_resolver=model_resolver),
        source_factory=lambda model: SQLAlchemyUserSource(open_session(), model),
        status_stream=status_stream,
    )
