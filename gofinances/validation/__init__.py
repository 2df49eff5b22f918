"""Register form validation package."""

from gofinances.validation.validator import UNSELECTED_CATEGORY, TransactionValidator

__all__ = ["UNSELECTED_CATEGORY", "TransactionValidator"]
