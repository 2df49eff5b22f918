"""Transaction ledger package."""

from gofinances.ledger.transactions import TransactionLedger

__all__ = ["TransactionLedger"]
