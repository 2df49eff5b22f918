"""
Summary Models for GoFinances

Everything in here is DERIVED from the ledger, never persisted. The
aggregator regenerates these on every dashboard load.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from gofinances.models.transaction import TransactionCategory, TransactionType


class Highlight(BaseModel):
    """One highlight card: an amount plus a last-movement label."""
    model_config = ConfigDict(frozen=True)

    amount: str = Field(
        ...,
        description="Locale-formatted currency text"
    )
    last_transaction: str = Field(
        ...,
        description="Last movement label, or a sentinel when there is none"
    )


class HighlightSummary(BaseModel):
    """
    The three highlight cards shown on the dashboard.

    Numeric totals are kept next to the formatted ones so consumers never
    have to parse display strings back into numbers.
    """
    model_config = ConfigDict(frozen=True)

    entries: Highlight
    expensives: Highlight
    total: Highlight

    entries_total: Decimal = Field(..., description="Sum of positive transactions")
    expenses_total: Decimal = Field(..., description="Sum of negative transactions")
    balance: Decimal = Field(..., description="entries_total - expenses_total")


class TransactionListItem(BaseModel):
    """A stored transaction ready to be shown in a list."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    amount: str = Field(..., description="Locale-formatted currency text")
    type: TransactionType
    category: TransactionCategory
    date: str = Field(..., description="dd/mm/yy")


class DashboardData(BaseModel):
    """Everything the dashboard needs from one load."""
    model_config = ConfigDict(frozen=True)

    transactions: list[TransactionListItem] = Field(default_factory=list)
    highlights: HighlightSummary


class CategoryTotal(BaseModel):
    """Expenses of one category within a month."""
    model_config = ConfigDict(frozen=True)

    key: TransactionCategory
    name: str
    color: str
    total: Decimal
    total_formatted: str
    percent: str = Field(..., description="Whole-number share of the month, e.g. '63%'")


class CategorySummary(BaseModel):
    """Per-category breakdown of one month's expenses."""
    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=1)
    month: int = Field(..., ge=1, le=12)
    expenses_total: Decimal
    categories: list[CategoryTotal] = Field(default_factory=list)
