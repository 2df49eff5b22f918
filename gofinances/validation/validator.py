"""
Register Form Validation

DESIGN DECISION: A transaction is validated when it is CONSTRUCTED, never
when it is persisted. The register flow hands us the raw form; we either
return a TransactionForm (which is valid by construction) or raise a
ValidationError listing every problem at once.

Messages are user-facing and written in Portuguese, like every other
label the app shows.

IMPORTANT: Validation NEVER silently fixes issues.
A negative amount is rejected, not turned positive.
"""

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from gofinances.models.transaction import (
    TransactionCategory,
    TransactionForm,
    TransactionType,
    ValidationError,
    ValidationIssue,
    ValidationResult,
)


# Placeholder key the category picker holds before the user chooses
UNSELECTED_CATEGORY = "category"


def _plain(value: Any) -> Any:
    """Enum members are compared by value."""
    if isinstance(value, Enum):
        return value.value
    return value


class TransactionValidator:
    """
    Validates raw register-form input.

    Usage:
        validator = TransactionValidator()
        form = validator.build_form({"name": "Rent", "amount": "400", ...})
    """

    def _parse_amount(self, value: Any) -> tuple[Optional[Decimal], Optional[ValidationIssue]]:
        """Return (amount, None) or (None, issue)."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return None, ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Valor obrigatório",
            )

        if isinstance(value, bool):
            amount = None
        else:
            try:
                amount = Decimal(str(value).strip())
            except (InvalidOperation, ValueError):
                amount = None

        if amount is None or not amount.is_finite():
            return None, ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Informe um valor numérico",
            )

        if amount <= 0:
            return None, ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="O valor não pode ser negativo",
            )

        return amount, None

    def validate(self, raw: Mapping[str, Any]) -> ValidationResult:
        """
        Check a raw form without building anything.

        Returns:
            ValidationResult with all issues found
        """
        issues = []

        name = raw.get("name")
        if not isinstance(name, str) or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Nome obrigatório",
            ))

        _, amount_issue = self._parse_amount(raw.get("amount"))
        if amount_issue:
            issues.append(amount_issue)

        transaction_type = _plain(raw.get("type"))
        if not transaction_type:
            issues.append(ValidationIssue(
                field="type",
                issue_type="missing",
                message="Selecione o tipo da transação",
            ))
        elif transaction_type not in {t.value for t in TransactionType}:
            issues.append(ValidationIssue(
                field="type",
                issue_type="invalid_value",
                message=f"Tipo de transação desconhecido: {transaction_type}",
            ))

        category = _plain(raw.get("category"))
        if not category or category == UNSELECTED_CATEGORY:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Selecione a categoria",
            ))
        elif category not in {c.value for c in TransactionCategory}:
            issues.append(ValidationIssue(
                field="category",
                issue_type="invalid_value",
                message=f"Categoria desconhecida: {category}",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return ValidationResult(is_valid=is_valid, issues=issues)

    def build_form(self, raw: Mapping[str, Any]) -> TransactionForm:
        """
        Validate and construct a TransactionForm.

        Raises:
            ValidationError: Carrying every issue found
        """
        result = self.validate(raw)
        if not result.is_valid:
            raise ValidationError(self.get_user_friendly_summary(result), result.issues)

        amount, _ = self._parse_amount(raw.get("amount"))
        return TransactionForm.build(
            name=raw["name"],
            amount=amount,
            type=_plain(raw["type"]),
            category=_plain(raw["category"]),
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """One line per problem, ready to show in an alert."""
        if result.is_valid:
            return "Tudo certo!"
        return "\n".join(issue.message for issue in result.issues)
