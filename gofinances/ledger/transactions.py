"""
Transaction Ledger

Each user owns one partition of the store: a JSON list of transaction
records under "<namespace>:transactions_user:<user id>". Switching users
switches partitions; nothing is ever migrated.

GUARANTEES:
- Append-only from the engine's point of view (plus bulk clear)
- Raw insertion order is preserved; no filtering, sorting or formatting
- Validation happens before any store access
- Read-after-write is the only consistency guarantee: there is no
  in-memory copy of the list to roll back when a write fails

Appends to the same partition are serialized per process with an
asyncio.Lock. Two processes writing the same partition still race
(last writer wins).
"""

import asyncio
import json
from collections.abc import Callable, Mapping
from typing import Any, Optional, Union

from gofinances.audit import AuditLogger, create_correlation_id
from gofinances.config import get_settings
from gofinances.models.transaction import (
    MalformedRecordError,
    Transaction,
    TransactionForm,
    ValidationError,
)
from gofinances.services.storage import KeyValueStoreInterface, PersistenceError
from gofinances.validation import TransactionValidator


class TransactionLedger:
    """
    Per-user, append-only transaction storage.

    Usage:
        ledger = TransactionLedger(store)
        transaction = await ledger.append({"name": "Rent", ...}, user.id)
        transactions = await ledger.list_transactions(user.id)
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        validator: Optional[TransactionValidator] = None,
        key_for: Optional[Callable[[str], str]] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._validator = validator or TransactionValidator()
        self._key_for = key_for or get_settings().app.transactions_key
        self._audit_logger = audit_logger
        self._locks: dict[str, asyncio.Lock] = {}

    def partition_key(self, user_id: str) -> str:
        """Storage key of a user's partition."""
        if not user_id:
            raise ValueError("user_id is required to address a ledger partition")
        return self._key_for(user_id)

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    async def list_records(self, user_id: str) -> list[Any]:
        """
        Raw decoded records of a partition, in insertion order.

        Records are NOT validated here; the summary aggregator checks each
        one and reports corruption precisely.

        Raises:
            PersistenceError: The store read failed
            MalformedRecordError: The partition itself is not a JSON list
        """
        blob = await self._store.get(self.partition_key(user_id))
        if not blob:
            return []

        try:
            records = json.loads(blob)
        except json.JSONDecodeError as e:
            raise MalformedRecordError(None, None, f"partition is not valid JSON: {e}")

        if not isinstance(records, list):
            raise MalformedRecordError(None, None, "partition is not a JSON list")
        return records

    async def list_transactions(self, user_id: str) -> list[Transaction]:
        """
        Every transaction of a user, in insertion order.

        Returns an empty list for a partition that was never written.
        """
        records = await self.list_records(user_id)
        return [
            Transaction.from_record(record, index=index)
            for index, record in enumerate(records)
        ]

    async def append(
        self,
        form: Union[TransactionForm, Mapping[str, Any]],
        user_id: str,
    ) -> Transaction:
        """
        Create a transaction (fresh id, current instant) and persist it.

        Args:
            form: A TransactionForm, or the raw register-form mapping
            user_id: Owner of the partition

        Returns:
            The stored Transaction

        Raises:
            ValidationError: The raw form is invalid (nothing was read or written)
            PersistenceError: The store read or write failed
        """
        correlation_id = create_correlation_id()

        if not isinstance(form, TransactionForm):
            try:
                form = self._validator.build_form(form)
            except ValidationError as e:
                if self._audit_logger:
                    await self._audit_logger.log_transaction_rejected(
                        user_id=user_id,
                        issues=[issue.model_dump() for issue in e.issues],
                        correlation_id=correlation_id,
                    )
                raise

        transaction = Transaction.from_form(form)
        key = self.partition_key(user_id)

        async with self._lock_for(key):
            try:
                records = await self.list_records(user_id)
                records.append(transaction.to_record())
                await self._store.set(key, json.dumps(records, ensure_ascii=False))
            except (PersistenceError, MalformedRecordError) as e:
                if self._audit_logger:
                    await self._audit_logger.log_save_failed(user_id, str(e), correlation_id)
                raise
            except Exception as e:
                if self._audit_logger:
                    await self._audit_logger.log_save_failed(user_id, str(e), correlation_id)
                raise PersistenceError(f"Failed to save transaction: {e}") from e

        if self._audit_logger:
            await self._audit_logger.log_transaction_saved(
                transaction_id=transaction.id,
                user_id=user_id,
                amount=str(transaction.amount),
                correlation_id=correlation_id,
            )
        return transaction

    async def clear(self, user_id: str) -> bool:
        """
        Delete every transaction of a user.

        Returns:
            True if the partition existed
        """
        key = self.partition_key(user_id)
        async with self._lock_for(key):
            removed = await self._store.remove(key)

        if self._audit_logger:
            await self._audit_logger.log_ledger_cleared(user_id)
        return removed
