"""
Integration tests for the presentation-facing flows.

These wire the real components together over an in-memory store, with
fake sign-in providers standing in for Google and Apple.
"""

import json

import pytest

from gofinances.config import AppSettings
from gofinances.models.audit import AuditEventType
from gofinances.models.transaction import MalformedRecordError, ValidationError
from gofinances.orchestrator import (
    DashboardFlow,
    create_app_components,
    create_store,
)
from gofinances.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    PersistenceError,
)
from gofinances.session import NotAuthenticatedError
from gofinances.summary import NO_EXPENSES_LABEL


@pytest.fixture
def settings():
    return AppSettings(storage_backend="memory", storage_namespace="@gofinances")


@pytest.fixture
def components(settings, fake_google, google_payload):
    return create_app_components(
        google_provider=fake_google(google_payload),
        store=InMemoryKeyValueStore(),
        settings=settings,
    )


class TestRegisterFlow:

    @pytest.mark.asyncio
    async def test_requires_signed_in_user(self, components):
        session, register_flow, _, _ = components
        await session.load()

        with pytest.raises(NotAuthenticatedError):
            await register_flow.append_transaction(
                {"name": "Rent", "amount": "400", "type": "negative", "category": "housing"}
            )

    @pytest.mark.asyncio
    async def test_appends_to_current_user_partition(self, components):
        session, register_flow, _, store = components
        await session.sign_in_with_google()

        created = await register_flow.append_transaction(
            {"name": "Rent", "amount": "400", "type": "negative", "category": "housing"}
        )

        records = json.loads(await store.get("@gofinances:transactions_user:42"))
        assert [r["id"] for r in records] == [created.id]

    @pytest.mark.asyncio
    async def test_invalid_form(self, components):
        session, register_flow, _, store = components
        await session.sign_in_with_google()

        with pytest.raises(ValidationError):
            await register_flow.append_transaction(
                {"name": "Refund", "amount": -5, "type": "positive", "category": "purchases"}
            )
        assert await store.get("@gofinances:transactions_user:42") is None

    @pytest.mark.asyncio
    async def test_clear_transactions(self, components):
        session, register_flow, dashboard_flow, _ = components
        await session.sign_in_with_google()
        await register_flow.append_transaction(
            {"name": "Rent", "amount": "400", "type": "negative", "category": "housing"}
        )

        assert await register_flow.clear_transactions() is True
        assert (await dashboard_flow.refresh()).transactions == []


class TestDashboardFlow:

    @pytest.mark.asyncio
    async def test_refresh_reflects_new_transactions(self, components):
        session, register_flow, dashboard_flow, _ = components
        await session.sign_in_with_google()

        empty = await dashboard_flow.refresh()
        assert empty.highlights.expensives.last_transaction == NO_EXPENSES_LABEL

        await register_flow.append_transaction(
            {"name": "Salary", "amount": "1000", "type": "positive", "category": "salary"}
        )
        await register_flow.append_transaction(
            {"name": "Rent", "amount": "400", "type": "negative", "category": "housing"}
        )
        data = await dashboard_flow.refresh()

        assert [item.name for item in data.transactions] == ["Salary", "Rent"]
        assert data.highlights.entries.amount == "R$ 1.000,00"
        assert data.highlights.expensives.amount == "R$ 400,00"
        assert data.highlights.total.amount == "R$ 600,00"

    @pytest.mark.asyncio
    async def test_refresh_requires_user(self, components):
        _, _, dashboard_flow, _ = components
        with pytest.raises(NotAuthenticatedError):
            await dashboard_flow.refresh()

    @pytest.mark.asyncio
    async def test_malformed_record_is_reported(self, make_session, ledger, store, key_for, audit_logger):
        await store.set(key_for("42"), json.dumps([{"id": "t-1", "name": "Broken"}]))
        dashboard_flow = DashboardFlow(
            session=make_session(),
            ledger=ledger,
            audit_logger=audit_logger,
        )

        with pytest.raises(MalformedRecordError):
            await dashboard_flow.load_summary("42")

        event = audit_logger.history[-1]
        assert event.event_type == AuditEventType.MALFORMED_RECORD
        assert event.entity_id == "t-1"

    @pytest.mark.asyncio
    async def test_read_failure_is_reported(self, make_session, ledger, store, audit_logger):
        store.fail_on.add("get")
        dashboard_flow = DashboardFlow(
            session=make_session(),
            ledger=ledger,
            audit_logger=audit_logger,
        )

        with pytest.raises(PersistenceError):
            await dashboard_flow.load_summary("42")
        assert audit_logger.history[-1].event_type == AuditEventType.SYSTEM_ERROR

    @pytest.mark.asyncio
    async def test_category_summary(self, make_session, ledger, store, key_for):
        await store.set(key_for("42"), json.dumps([
            {"id": "a", "name": "Lunch", "amount": "50", "type": "negative",
             "category": "food", "date": "2024-01-08T12:00:00Z"},
        ]))
        dashboard_flow = DashboardFlow(session=make_session(), ledger=ledger)

        summary = await dashboard_flow.load_category_summary("42", 2024, 1)

        assert [c.name for c in summary.categories] == ["Alimentação"]
        assert summary.categories[0].percent == "100%"


class TestCreateStore:

    def test_memory_backend(self):
        store = create_store(AppSettings(storage_backend="memory"))
        assert isinstance(store, InMemoryKeyValueStore)

    def test_file_backend(self, tmp_path):
        store = create_store(AppSettings(
            storage_backend="file",
            storage_file_path=str(tmp_path / "store.json"),
        ))
        assert isinstance(store, JsonFileKeyValueStore)

    def test_unconfigured_sheets_falls_back_to_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)

        store = create_store(AppSettings(
            storage_backend="google_sheets",
            storage_file_path=str(tmp_path / "store.json"),
        ))
        assert isinstance(store, JsonFileKeyValueStore)
