"""Summary aggregation package."""

from gofinances.summary.aggregator import (
    NO_ENTRIES_LABEL,
    NO_EXPENSES_LABEL,
    NO_TRANSACTIONS_LABEL,
    SummaryAggregator,
    parse_records,
)
from gofinances.summary.formatting import (
    format_currency,
    format_day_month,
    format_percent,
    format_short_date,
)

__all__ = [
    "NO_ENTRIES_LABEL",
    "NO_EXPENSES_LABEL",
    "NO_TRANSACTIONS_LABEL",
    "SummaryAggregator",
    "format_currency",
    "format_day_month",
    "format_percent",
    "format_short_date",
    "parse_records",
]
