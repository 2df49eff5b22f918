"""Tests for the per-user transaction ledger."""

import asyncio
import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from gofinances.models.audit import AuditEventType
from gofinances.models.transaction import (
    MalformedRecordError,
    TransactionForm,
    ValidationError,
)
from gofinances.services.storage import PersistenceError


def rent_form(**overrides):
    form = {"name": "Rent", "amount": "400", "type": "negative", "category": "housing"}
    form.update(overrides)
    return form


class TestPartitions:
    """Partition addressing."""

    def test_partition_key(self, ledger):
        assert ledger.partition_key("42") == "@gofinances:transactions_user:42"

    def test_empty_user_id_rejected(self, ledger):
        with pytest.raises(ValueError):
            ledger.partition_key("")

    @pytest.mark.asyncio
    async def test_never_written_partition_is_empty(self, ledger):
        assert await ledger.list_transactions("nobody") == []
        assert await ledger.list_records("nobody") == []

    @pytest.mark.asyncio
    async def test_users_are_isolated(self, ledger):
        await ledger.append(rent_form(), "ana")
        await ledger.append(rent_form(name="Cinema", category="leisure"), "leo")

        assert [t.name for t in await ledger.list_transactions("ana")] == ["Rent"]
        assert [t.name for t in await ledger.list_transactions("leo")] == ["Cinema"]


class TestAppend:
    """Appending transactions."""

    @pytest.mark.asyncio
    async def test_append_then_list(self, ledger):
        before = datetime.now(timezone.utc)
        created = await ledger.append(rent_form(), "42")
        after = datetime.now(timezone.utc)

        transactions = await ledger.list_transactions("42")

        assert [t.to_record() for t in transactions] == [created.to_record()]
        assert created.id
        assert before <= created.date <= after
        assert created.amount == Decimal("400")

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, ledger):
        first = await ledger.append(rent_form(), "42")
        second = await ledger.append(rent_form(), "42")
        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_insertion_order_preserved(self, ledger):
        for name in ("Salary", "Rent", "Lunch"):
            await ledger.append(rent_form(name=name), "42")

        assert [t.name for t in await ledger.list_transactions("42")] == ["Salary", "Rent", "Lunch"]

    @pytest.mark.asyncio
    async def test_stored_record_format(self, ledger, store, key_for):
        created = await ledger.append(rent_form(name="Almoço", category="food"), "42")

        blob = await store.get(key_for("42"))
        assert "Almoço" in blob
        assert json.loads(blob) == [{
            "id": created.id,
            "name": "Almoço",
            "amount": "400",
            "type": "negative",
            "category": "food",
            "date": created.date.isoformat(),
        }]

    @pytest.mark.asyncio
    async def test_accepts_built_form(self, ledger):
        form = TransactionForm(name="Salary", amount=1000, type="positive", category="salary")
        created = await ledger.append(form, "42")
        assert created.name == "Salary"

    @pytest.mark.asyncio
    async def test_negative_amount_never_touches_store(self, ledger, store, audit_logger):
        with pytest.raises(ValidationError):
            await ledger.append(rent_form(amount=-5), "42")

        assert store.calls == []
        assert audit_logger.history[-1].event_type == AuditEventType.TRANSACTION_REJECTED

    @pytest.mark.asyncio
    async def test_write_failure(self, ledger, store, audit_logger):
        await ledger.append(rent_form(name="Salary"), "42")
        store.fail_on.add("set")

        with pytest.raises(PersistenceError):
            await ledger.append(rent_form(), "42")

        store.fail_on.clear()
        assert [t.name for t in await ledger.list_transactions("42")] == ["Salary"]
        assert audit_logger.history[-1].event_type == AuditEventType.SAVE_FAILED

    @pytest.mark.asyncio
    async def test_read_failure(self, ledger, store):
        store.fail_on.add("get")
        with pytest.raises(PersistenceError):
            await ledger.append(rent_form(), "42")

    @pytest.mark.asyncio
    async def test_concurrent_appends_are_not_lost(self, ledger):
        await asyncio.gather(*(
            ledger.append(rent_form(name=f"Item {i}"), "42") for i in range(10)
        ))
        assert len(await ledger.list_transactions("42")) == 10


class TestCorruption:
    """Corrupted partitions are reported, never repaired."""

    @pytest.mark.asyncio
    async def test_partition_not_json(self, ledger, store, key_for):
        await store.set(key_for("42"), "[{broken")
        with pytest.raises(MalformedRecordError):
            await ledger.list_records("42")

    @pytest.mark.asyncio
    async def test_partition_not_a_list(self, ledger, store, key_for):
        await store.set(key_for("42"), json.dumps({"id": "t-1"}))
        with pytest.raises(MalformedRecordError):
            await ledger.list_records("42")

    @pytest.mark.asyncio
    async def test_bad_record_reports_index(self, ledger, store, key_for):
        good = (await ledger.append(rent_form(), "42")).to_record()
        bad = {"id": "t-bad", "name": "x", "amount": "1", "type": "positive", "category": "salary"}
        await store.set(key_for("42"), json.dumps([good, bad]))

        with pytest.raises(MalformedRecordError) as exc_info:
            await ledger.list_transactions("42")
        assert exc_info.value.index == 1
        assert exc_info.value.record_id == "t-bad"


class TestClear:

    @pytest.mark.asyncio
    async def test_clear(self, ledger):
        await ledger.append(rent_form(), "42")

        assert await ledger.clear("42") is True
        assert await ledger.list_transactions("42") == []
        assert await ledger.clear("42") is False
