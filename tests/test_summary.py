"""
Tests for the summary aggregator and pt-BR formatting.

Records are written the way the ledger stores them (JSON objects with
ISO-8601 date strings) so every test also exercises re-parsing.
"""

from decimal import Decimal

import pytest

from gofinances.models.transaction import MalformedRecordError, TransactionCategory
from gofinances.summary import (
    NO_ENTRIES_LABEL,
    NO_EXPENSES_LABEL,
    NO_TRANSACTIONS_LABEL,
    SummaryAggregator,
    format_currency,
    format_percent,
)


def record(id, name, amount, type, category, date):
    return {
        "id": id,
        "name": name,
        "amount": amount,
        "type": type,
        "category": category,
        "date": date,
    }


@pytest.fixture
def aggregator():
    return SummaryAggregator(currency="BRL", timezone_name="UTC")


@pytest.fixture
def salary_and_rent():
    return [
        record("t-1", "Salary", 1000, "positive", "salary", "2024-01-05T12:00:00.000Z"),
        record("t-2", "Rent", 400, "negative", "housing", "2024-01-10T12:00:00.000Z"),
    ]


class TestHighlights:
    """Highlight cards."""

    def test_salary_and_rent(self, aggregator, salary_and_rent):
        highlights = aggregator.build_highlights(salary_and_rent)

        assert highlights.entries.amount == "R$ 1.000,00"
        assert highlights.expensives.amount == "R$ 400,00"
        assert highlights.total.amount == "R$ 600,00"
        assert highlights.entries.last_transaction == "Última entrada dia 5 de janeiro"
        assert highlights.expensives.last_transaction == "Última saída dia 10 de janeiro"
        assert highlights.total.last_transaction == "01 à 10 de janeiro"

    def test_empty_ledger_uses_sentinels(self, aggregator):
        highlights = aggregator.build_highlights([])

        assert highlights.entries.amount == "R$ 0,00"
        assert highlights.total.amount == "R$ 0,00"
        assert highlights.entries.last_transaction == NO_ENTRIES_LABEL
        assert highlights.expensives.last_transaction == NO_EXPENSES_LABEL
        assert highlights.total.last_transaction == NO_TRANSACTIONS_LABEL

    def test_only_entries(self, aggregator, salary_and_rent):
        highlights = aggregator.build_highlights(salary_and_rent[:1])
        assert highlights.expensives.last_transaction == NO_EXPENSES_LABEL
        assert highlights.total.last_transaction == NO_TRANSACTIONS_LABEL
        assert highlights.entries.last_transaction == "Última entrada dia 5 de janeiro"

    def test_negative_balance(self, aggregator):
        highlights = aggregator.build_highlights([
            record("t-1", "Car", 600, "negative", "car", "2024-03-02T10:00:00Z"),
        ])
        assert highlights.total.amount == "-R$ 600,00"
        assert highlights.balance == Decimal("-600")

    def test_sum_invariant(self, aggregator):
        records = [
            record("a", "x", "0.10", "positive", "salary", "2024-01-01T00:00:00Z"),
            record("b", "y", "0.20", "positive", "salary", "2024-01-02T00:00:00Z"),
            record("c", "z", "0.30", "negative", "food", "2024-01-03T00:00:00Z"),
        ]
        highlights = aggregator.build_highlights(records)
        assert highlights.balance == highlights.entries_total - highlights.expenses_total
        assert highlights.balance == Decimal("0")

    def test_label_follows_latest_date_not_insertion_order(self, aggregator):
        records = [
            record("a", "Late", 10, "negative", "food", "2024-02-20T12:00:00Z"),
            record("b", "Early", 10, "negative", "food", "2024-02-03T12:00:00Z"),
        ]
        highlights = aggregator.build_highlights(records)
        assert highlights.expensives.last_transaction == "Última saída dia 20 de fevereiro"

    def test_dates_rendered_in_configured_timezone(self):
        aggregator = SummaryAggregator(timezone_name="America/Sao_Paulo")
        highlights = aggregator.build_highlights([
            record("a", "Late night", 10, "negative", "food", "2024-01-10T01:00:00Z"),
        ])
        assert highlights.expensives.last_transaction == "Última saída dia 9 de janeiro"

    def test_malformed_record_fails_computation(self, aggregator, salary_and_rent):
        salary_and_rent.append({"id": "t-3", "name": "Broken", "amount": "1"})
        with pytest.raises(MalformedRecordError) as exc_info:
            aggregator.build_highlights(salary_and_rent)
        assert exc_info.value.index == 2
        assert exc_info.value.record_id == "t-3"


class TestDashboard:
    """Formatted list plus highlights."""

    def test_list_keeps_stored_order(self, aggregator, salary_and_rent):
        items = aggregator.build_list(salary_and_rent)

        assert [item.name for item in items] == ["Salary", "Rent"]
        assert items[0].amount == "R$ 1.000,00"
        assert items[1].date == "10/01/24"
        assert items[1].category == TransactionCategory.HOUSING

    def test_idempotent(self, aggregator, salary_and_rent):
        assert aggregator.build_dashboard(salary_and_rent) == aggregator.build_dashboard(salary_and_rent)


class TestCategorySummary:
    """Monthly expenses by category."""

    def test_groups_month_expenses(self, aggregator):
        records = [
            record("a", "Salary", 5000, "positive", "salary", "2024-01-05T12:00:00Z"),
            record("b", "Rent", 100, "negative", "housing", "2024-01-06T12:00:00Z"),
            record("c", "Market", 200, "negative", "food", "2024-01-07T12:00:00Z"),
            record("d", "Lunch", 100, "negative", "food", "2024-01-08T12:00:00Z"),
            record("e", "Pizza", 999, "negative", "food", "2024-02-01T12:00:00Z"),
        ]

        summary = aggregator.summarize_by_category(records, 2024, 1)

        assert summary.expenses_total == Decimal("400")
        assert [c.key for c in summary.categories] == [
            TransactionCategory.FOOD,
            TransactionCategory.HOUSING,
        ]
        food = summary.categories[0]
        assert food.name == "Alimentação"
        assert food.total_formatted == "R$ 300,00"
        assert food.percent == "75%"
        assert summary.categories[1].percent == "25%"

    def test_empty_month(self, aggregator):
        summary = aggregator.summarize_by_category([], 2024, 5)
        assert summary.categories == []
        assert summary.expenses_total == Decimal("0")


class TestFormatting:
    """pt-BR display formatting."""

    @pytest.mark.parametrize("value, expected", [
        (Decimal("0"), "R$ 0,00"),
        (Decimal("1000"), "R$ 1.000,00"),
        (Decimal("1234567.891"), "R$ 1.234.567,89"),
        (Decimal("0.005"), "R$ 0,01"),
        (Decimal("-600"), "-R$ 600,00"),
    ])
    def test_format_currency(self, value, expected):
        assert format_currency(value) == expected

    def test_other_currency_symbol(self):
        assert format_currency(Decimal("10"), "USD") == "US$ 10,00"

    def test_format_percent(self):
        assert format_percent(Decimal("1"), Decimal("3")) == "33%"
        assert format_percent(Decimal("1"), Decimal("0")) == "0%"
