"""
Main Orchestrator for GoFinances

This module ties together all the components and defines the
presentation-facing flows:
1. Session (load → sign in with Google/Apple → sign out)
2. Register (form → validate → append to the user's ledger)
3. Dashboard (ledger → highlights + formatted list, category breakdown)

DESIGN DECISION: Nothing here is scheduled implicitly. The presentation
layer calls DashboardFlow.refresh() whenever it needs fresh numbers
(e.g. when the dashboard regains focus).
"""

from typing import Optional

import structlog

from gofinances.audit import AuditLogger, create_correlation_id
from gofinances.config import AppSettings, get_settings
from gofinances.identity import IdentityNormalizer
from gofinances.ledger import TransactionLedger
from gofinances.models.summary import CategorySummary, DashboardData
from gofinances.models.transaction import MalformedRecordError, Transaction
from gofinances.services.auth import AppleSignInProvider, GoogleSignInProvider
from gofinances.services.storage import (
    GoogleSheetsKeyValueStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    PersistenceError,
)
from gofinances.session import SessionCache
from gofinances.summary import SummaryAggregator


logger = structlog.get_logger("gofinances.orchestrator")


class RegisterFlow:
    """
    Orchestrates the register screen.

    Flow:
    1. Require a signed-in user
    2. Validate the form (ValidationError before any store access)
    3. Append to the user's partition
    """

    def __init__(
        self,
        session: SessionCache,
        ledger: TransactionLedger,
    ):
        self._session = session
        self._ledger = ledger

    async def append_transaction(self, form) -> Transaction:
        """
        Save a register-form submission for the current user.

        Args:
            form: A TransactionForm or the raw form mapping
                  ({"name", "amount", "type", "category"})

        Returns:
            The stored Transaction

        Raises:
            NotAuthenticatedError: Nobody is signed in
            ValidationError: The form is invalid
            PersistenceError: The store write failed (safe to retry the action)
        """
        user = self._session.require_user()
        return await self._ledger.append(form, user.id)

    async def clear_transactions(self) -> bool:
        """Delete every transaction of the current user."""
        user = self._session.require_user()
        return await self._ledger.clear(user.id)


class DashboardFlow:
    """
    Orchestrates the dashboard and the category summary screens.

    GUARANTEES:
    - Every call reads the ledger afresh (no cached summaries)
    - A corrupted record fails the summary, never the session
    """

    def __init__(
        self,
        session: SessionCache,
        ledger: TransactionLedger,
        aggregator: Optional[SummaryAggregator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._session = session
        self._ledger = ledger
        self._aggregator = aggregator or SummaryAggregator()
        self._audit_logger = audit_logger

    async def _read_records(self, user_id: str, correlation_id) -> list:
        try:
            return await self._ledger.list_records(user_id)
        except MalformedRecordError as e:
            await self._report_malformed(user_id, e, correlation_id)
            raise
        except PersistenceError as e:
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type="PersistenceError",
                    error_message=str(e),
                    details={"user_id": user_id},
                    correlation_id=correlation_id,
                )
            raise

    async def _report_malformed(self, user_id: str, error: MalformedRecordError, correlation_id) -> None:
        if self._audit_logger:
            await self._audit_logger.log_malformed_record(
                user_id=user_id,
                index=error.index,
                record_id=error.record_id,
                reason=error.reason,
                correlation_id=correlation_id,
            )

    async def load_summary(self, user_id: str) -> DashboardData:
        """
        Transactions list and highlight cards for a user.

        Raises:
            PersistenceError: The ledger could not be read
            MalformedRecordError: A stored record is corrupted
        """
        correlation_id = create_correlation_id()
        records = await self._read_records(user_id, correlation_id)

        try:
            data = self._aggregator.build_dashboard(records)
        except MalformedRecordError as e:
            await self._report_malformed(user_id, e, correlation_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_summary_generated(
                user_id=user_id,
                transaction_count=len(records),
                correlation_id=correlation_id,
            )
        return data

    async def refresh(self) -> DashboardData:
        """Reload the summary of the current user."""
        user = self._session.require_user()
        return await self.load_summary(user.id)

    async def load_category_summary(
        self,
        user_id: str,
        year: int,
        month: int,
    ) -> CategorySummary:
        """Expenses of one month grouped by category."""
        correlation_id = create_correlation_id()
        records = await self._read_records(user_id, correlation_id)

        try:
            return self._aggregator.summarize_by_category(records, year, month)
        except MalformedRecordError as e:
            await self._report_malformed(user_id, e, correlation_id)
            raise


def create_store(settings: Optional[AppSettings] = None) -> KeyValueStoreInterface:
    """
    Build the configured key-value backend.

    A google_sheets backend that cannot be configured falls back to the
    JSON file so the app still starts.
    """
    settings = settings or get_settings().app

    if settings.storage_backend == "memory":
        return InMemoryKeyValueStore()

    if settings.storage_backend == "google_sheets":
        try:
            return GoogleSheetsKeyValueStore()
        except Exception as e:
            logger.warning(
                "storage_not_configured",
                backend="google_sheets",
                fallback="file",
                error=str(e),
            )

    return JsonFileKeyValueStore(settings.storage_file_path)


def create_app_components(
    google_provider: Optional[GoogleSignInProvider] = None,
    apple_provider: Optional[AppleSignInProvider] = None,
    store: Optional[KeyValueStoreInterface] = None,
    settings: Optional[AppSettings] = None,
) -> tuple[SessionCache, RegisterFlow, DashboardFlow, KeyValueStoreInterface]:
    """
    Factory function to create all application components.

    Args:
        google_provider: Google sign-in capability (optional)
        apple_provider: Apple sign-in capability (optional)
        store: Key-value backend; built from settings when omitted
        settings: Application settings; loaded from the environment when omitted

    Returns:
        (session, register_flow, dashboard_flow, store)
    """
    settings = settings or get_settings().app
    store = store or create_store(settings)
    audit_logger = AuditLogger()

    session = SessionCache(
        store=store,
        normalizer=IdentityNormalizer(settings.avatar_base_url),
        google_provider=google_provider,
        apple_provider=apple_provider,
        session_key=settings.session_key,
        audit_logger=audit_logger,
    )
    ledger = TransactionLedger(
        store=store,
        key_for=settings.transactions_key,
        audit_logger=audit_logger,
    )
    aggregator = SummaryAggregator(
        currency=settings.currency,
        timezone_name=settings.timezone,
    )

    register_flow = RegisterFlow(session=session, ledger=ledger)
    dashboard_flow = DashboardFlow(
        session=session,
        ledger=ledger,
        aggregator=aggregator,
        audit_logger=audit_logger,
    )

    return session, register_flow, dashboard_flow, store
