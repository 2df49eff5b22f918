"""
Summary Aggregator

DESIGN DECISION: Aggregation is a PURE function of the ledger records.
No hidden state, no caching: the same records always produce the same
summary, so the dashboard can simply call it again on every refresh.

Algorithm:
1. Parse every record (corruption raises MalformedRecordError, never zero)
2. Partition by type: entries (positive) and expenses (negative)
3. Totals per group; balance = entries - expenses
4. Latest date per group -> "Última entrada dia 10 de janeiro" or sentinel
5. Format every amount as currency text
6. Total interval -> "01 à 10 de janeiro" (up to the last expense) or sentinel

GUARANTEES:
- Totals are Decimal sums of the stored amounts (formatting never feeds back)
- A corrupted record stops the computation with the offending index/id
"""

from collections.abc import Iterable, Sequence
from datetime import tzinfo
from decimal import Decimal
from typing import Any, Optional

from gofinances.models.summary import (
    CategorySummary,
    CategoryTotal,
    DashboardData,
    Highlight,
    HighlightSummary,
    TransactionListItem,
)
from gofinances.models.transaction import (
    CATEGORIES,
    Transaction,
    TransactionType,
)
from gofinances.summary.formatting import (
    format_currency,
    format_day_month,
    format_percent,
    format_short_date,
    resolve_timezone,
)


# Sentinel labels
NO_ENTRIES_LABEL = "Não há transações de entrada"
NO_EXPENSES_LABEL = "Não há transações de saída"
NO_TRANSACTIONS_LABEL = "Não há transações"

# The total card covers the month from day 01 up to the last expense
INTERVAL_START = "01"


def parse_records(records: Iterable[Any]) -> list[Transaction]:
    """
    Parse ledger records, accepting already-built Transactions as-is.

    Raises:
        MalformedRecordError: On the first corrupted record
    """
    parsed = []
    for index, record in enumerate(records):
        if isinstance(record, Transaction):
            parsed.append(record)
        else:
            parsed.append(Transaction.from_record(record, index=index))
    return parsed


class SummaryAggregator:
    """
    Derives dashboard data from a user's transactions.

    Args:
        currency: ISO code used for every amount
        timezone_name: IANA zone in which dates are rendered
    """

    def __init__(self, currency: str = "BRL", timezone_name: str = "UTC"):
        self._currency = currency
        self._tz: tzinfo = resolve_timezone(timezone_name)

    def _money(self, value: Decimal) -> str:
        return format_currency(value, self._currency)

    def _last_date_label(self, group: Sequence[Transaction]) -> Optional[str]:
        """Day/month of the latest transaction in a group; None if empty."""
        if not group:
            return None
        # Ties on the maximum instant are irrelevant: only the date is shown
        latest = max(transaction.date for transaction in group)
        return format_day_month(latest, self._tz)

    def build_highlights(self, records: Iterable[Any]) -> HighlightSummary:
        """
        Totals and last-movement labels for the three highlight cards.

        Raises:
            MalformedRecordError: A stored record is corrupted
        """
        transactions = parse_records(records)

        entries = [t for t in transactions if t.type == TransactionType.POSITIVE]
        expenses = [t for t in transactions if t.type == TransactionType.NEGATIVE]

        entries_total = sum((t.amount for t in entries), Decimal("0"))
        expenses_total = sum((t.amount for t in expenses), Decimal("0"))
        balance = entries_total - expenses_total

        last_entry = self._last_date_label(entries)
        last_expense = self._last_date_label(expenses)

        return HighlightSummary(
            entries=Highlight(
                amount=self._money(entries_total),
                last_transaction=(
                    f"Última entrada dia {last_entry}" if last_entry else NO_ENTRIES_LABEL
                ),
            ),
            expensives=Highlight(
                amount=self._money(expenses_total),
                last_transaction=(
                    f"Última saída dia {last_expense}" if last_expense else NO_EXPENSES_LABEL
                ),
            ),
            total=Highlight(
                amount=self._money(balance),
                last_transaction=(
                    f"{INTERVAL_START} à {last_expense}" if last_expense else NO_TRANSACTIONS_LABEL
                ),
            ),
            entries_total=entries_total,
            expenses_total=expenses_total,
            balance=balance,
        )

    def build_list(self, records: Iterable[Any]) -> list[TransactionListItem]:
        """Stored transactions, in stored order, formatted for display."""
        return [
            TransactionListItem(
                id=t.id,
                name=t.name,
                amount=self._money(t.amount),
                type=t.type,
                category=t.category,
                date=format_short_date(t.date, self._tz),
            )
            for t in parse_records(records)
        ]

    def build_dashboard(self, records: Iterable[Any]) -> DashboardData:
        """List and highlights from a single snapshot of the records."""
        transactions = parse_records(records)
        return DashboardData(
            transactions=self.build_list(transactions),
            highlights=self.build_highlights(transactions),
        )

    def summarize_by_category(
        self,
        records: Iterable[Any],
        year: int,
        month: int,
    ) -> CategorySummary:
        """
        Expenses of one month broken down by category.

        Categories without expenses in the month are omitted; the rest
        follow the fixed category order.
        """
        expenses = []
        for t in parse_records(records):
            if t.type != TransactionType.NEGATIVE:
                continue
            local = t.date.astimezone(self._tz)
            if local.year == year and local.month == month:
                expenses.append(t)

        expenses_total = sum((t.amount for t in expenses), Decimal("0"))

        categories = []
        for category in CATEGORIES:
            total = sum(
                (t.amount for t in expenses if t.category == category.key),
                Decimal("0"),
            )
            if total <= 0:
                continue
            categories.append(CategoryTotal(
                key=category.key,
                name=category.name,
                color=category.color,
                total=total,
                total_formatted=self._money(total),
                percent=format_percent(total, expenses_total),
            ))

        return CategorySummary(
            year=year,
            month=month,
            expenses_total=expenses_total,
            categories=categories,
        )
