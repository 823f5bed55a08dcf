"""
tests/test_user_import_service.py

Run orchestration: totals, failure accounting, progress output and abort rules.
"""

from __future__ import annotations

import io
import json
from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from app.config import UserImportSettings
from app.domain.user_import import UserBatch
from app.errors import ImportConfigurationError, TerminalDeliveryError
from app.schemas.bulk_create import BulkCreateResponse
from app.services.user_import_service import UserImportRun, build_user_import_run
from db.base import Base
from db.models.user import User
from tests.fakes import CompositeKeyRecord, FakeUser, ListSource, make_users


class RecordingClient:
    """Delivers batches in memory, rejecting the configured emails."""

    def __init__(self, *, rejected_emails: set[str] | None = None, fail_on_call: int | None = None) -> None:
        self.batches: list[UserBatch] = []
        self._rejected_emails = rejected_emails or set()
        self._fail_on_call = fail_on_call

    def deliver(self, batch: UserBatch) -> BulkCreateResponse:
        self.batches.append(batch)
        if self._fail_on_call == len(self.batches):
            raise TerminalDeliveryError("down", status_code=500, attempts=3)
        failed = [
            {"email": record["email"], "error": "rejected"}
            for record in batch.records
            if record.get("email") in self._rejected_emails
        ]
        return BulkCreateResponse(failed=failed)


class StaticPreconditions:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls = 0
        self._error = error

    def assert_runnable(self) -> type[Any]:
        self.calls += 1
        if self._error is not None:
            raise self._error
        return FakeUser


def _run(
    records: list[FakeUser],
    client: RecordingClient,
    *,
    preconditions: StaticPreconditions | None = None,
    status_stream: io.StringIO | None = None,
) -> UserImportRun:
    source = ListSource(records)
    return UserImportRun(
        client=client,
        preconditions=preconditions or StaticPreconditions(),
        source_factory=lambda model: source,
        status_stream=status_stream,
    )


class TestTotals:
    def test_all_records_accepted(self) -> None:
        client = RecordingClient()

        summary = _run(make_users(150), client).run()

        assert [batch.count for batch in client.batches] == [100, 50]
        assert summary.total_sent == 150
        assert summary.failed == []
        assert summary.total_failed == 0

    def test_unsendable_record_is_neither_sent_nor_failed(self) -> None:
        records = [FakeUser(id=1), FakeUser(name="ghost"), FakeUser(email="c@example.com")]
        client = RecordingClient()

        summary = _run(records, client).run()

        assert len(client.batches) == 1
        assert client.batches[0].count == 2
        assert summary.total_sent == 2
        assert summary.total_failed == 0

    def test_rejected_records_still_count_as_sent(self) -> None:
        client = RecordingClient(rejected_emails={"user3@example.com", "user120@example.com"})

        summary = _run(make_users(120), client).run()

        assert summary.total_sent == 120
        assert summary.failed == [
            {"email": "user3@example.com", "error": "rejected"},
            {"email": "user120@example.com", "error": "rejected"},
        ]
        assert summary.total_failed == 2

    def test_empty_source_produces_empty_summary(self) -> None:
        client = RecordingClient()

        summary = _run([], client).run()

        assert client.batches == []
        assert summary.total_sent == 0
        assert summary.failed == []


class TestProgress:
    def test_successes_then_failures_per_batch(self) -> None:
        stream = io.StringIO()
        client = RecordingClient(rejected_emails={"user1@example.com", "user102@example.com"})

        _run(make_users(103), client, status_stream=stream).run()

        assert stream.getvalue() == "." * 99 + "F" + "." * 2 + "F"

    def test_no_output_without_stream(self, capsys: pytest.CaptureFixture[str]) -> None:
        _run(make_users(3), RecordingClient()).run()
        assert capsys.readouterr().out == ""


class TestAbort:
    def test_precondition_failure_sends_nothing(self) -> None:
        client = RecordingClient()
        preconditions = StaticPreconditions(ImportConfigurationError("not production"))
        factory_calls: list[Any] = []
        run = UserImportRun(
            client=client,
            preconditions=preconditions,
            source_factory=lambda model: factory_calls.append(model) or ListSource(make_users(5)),
        )

        with pytest.raises(ImportConfigurationError):
            run.run()

        assert client.batches == []
        assert factory_calls == []

    def test_preconditions_checked_once(self) -> None:
        preconditions = StaticPreconditions()
        _run(make_users(250), RecordingClient(), preconditions=preconditions).run()
        assert preconditions.calls == 1

    def test_delivery_error_aborts_remaining_batches(self) -> None:
        client = RecordingClient(fail_on_call=2)

        with pytest.raises(TerminalDeliveryError):
            _run(make_users(350), client).run()

        assert len(client.batches) == 2


class TestBuildUserImportRun:
    @pytest.fixture()
    def db(self) -> Session:
        engine = create_engine("sqlite://")
        Base.metadata.create_all(engine)
        with Session(engine) as session:
            session.add_all(
                [User(email=f"db{index}@example.com", name=f"Db {index}") for index in range(1, 131)]
                + [User(email=None, name="No email")]
            )
            session.commit()
            yield session
        engine.dispose()

    def test_exports_every_database_user(self, db: Session) -> None:
        settings = UserImportSettings(app_id="app", api_key="key", environment="production")
        client = RecordingClient()

        summary = build_user_import_run(open_session=lambda: db, settings=settings, client=client).run()

        # Users without an email still carry their primary key.
        assert summary.total_sent == 131
        assert [batch.count for batch in client.batches] == [100, 31]
        first = json.loads(client.batches[0].to_json())["users"][0]
        assert first == {"user_id": 1, "email": "db1@example.com", "name": "Db 1"}

    def test_refuses_outside_production_without_opening_a_session(self) -> None:
        settings = UserImportSettings(app_id="app", api_key="key", environment="staging")
        client = RecordingClient()
        opened: list[bool] = []

        def open_session() -> Session:
            opened.append(True)
            raise AssertionError("session opened before preconditions passed")

        with pytest.raises(ImportConfigurationError):
            build_user_import_run(open_session=open_session, settings=settings, client=client).run()

        assert client.batches == []
        assert opened == []

    @pytest.mark.parametrize("model", [Base, CompositeKeyRecord])
    def test_unreadable_model_is_a_configuration_error(self, db: Session, model: type) -> None:
        settings = UserImportSettings(app_id="app", api_key="key", environment="production")
        client = RecordingClient()

        run = build_user_import_run(
            open_session=lambda: db,
            settings=settings,
            client=client,
            model_resolver=lambda: model,
        )
        with pytest.raises(ImportConfigurationError, match="single-column primary key"):
            run.run()

        assert client.batches == []
