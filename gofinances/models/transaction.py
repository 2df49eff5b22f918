"""
Transaction Models for GoFinances

These models define the strict schemas for every transaction the
ledger stores. They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for storage and logging
4. Never be mutated once created

DESIGN DECISION: The sign of a transaction lives in its type, not in its
amount. Amounts are always strictly positive; an expense is a positive
amount with type NEGATIVE.
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError


def utcnow() -> datetime:
    """Current instant, timezone-aware (UTC)."""
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money: income is POSITIVE, expense is NEGATIVE."""
    POSITIVE = "positive"
    NEGATIVE = "negative"


class TransactionCategory(str, Enum):
    """
    Supported transaction categories.

    DESIGN DECISION: Using explicit categories rather than free text ensures
    consistent categorization and enables reliable per-category summaries.
    """
    PURCHASES = "purchases"
    FOOD = "food"
    SALARY = "salary"
    CAR = "car"
    LEISURE = "leisure"
    STUDIES = "studies"
    HOUSING = "housing"


class CategoryInfo(BaseModel):
    """Display metadata for a category."""
    model_config = ConfigDict(frozen=True)

    key: TransactionCategory
    name: str
    color: str


# Order matters: summaries list categories in this order
CATEGORIES: tuple[CategoryInfo, ...] = (
    CategoryInfo(key=TransactionCategory.PURCHASES, name="Compras", color="#5636D3"),
    CategoryInfo(key=TransactionCategory.FOOD, name="Alimentação", color="#FF872C"),
    CategoryInfo(key=TransactionCategory.SALARY, name="Salário", color="#12A454"),
    CategoryInfo(key=TransactionCategory.CAR, name="Carro", color="#E83F5B"),
    CategoryInfo(key=TransactionCategory.LEISURE, name="Lazer", color="#26195C"),
    CategoryInfo(key=TransactionCategory.STUDIES, name="Estudos", color="#9C001A"),
    CategoryInfo(key=TransactionCategory.HOUSING, name="Casa", color="#3D7EAA"),
)


def get_category(key: TransactionCategory) -> CategoryInfo:
    """Look up the display metadata of a category."""
    for category in CATEGORIES:
        if category.key == key:
            return category
    raise KeyError(key)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found in a register form."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Result of validating one register form."""

    validated_at: datetime = Field(
        default_factory=utcnow
    )
    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")


# =============================================================================
# EXCEPTIONS
# =============================================================================

class ValidationError(ValueError):
    """Transaction input is malformed. The caller must fix it before retrying."""

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        self.issues = issues or []
        super().__init__(message)


class MalformedRecordError(Exception):
    """A persisted transaction record is corrupted."""

    def __init__(self, index: Optional[int], record_id: Optional[str], reason: str):
        self.index = index
        self.record_id = record_id
        self.reason = reason
        super().__init__(
            f"Malformed transaction record (index={index}, id={record_id}): {reason}"
        )


# =============================================================================
# CORE TRANSACTION MODELS
# =============================================================================

class TransactionForm(BaseModel):
    """
    What the user submits on the register screen.

    Construction is where validation happens: a TransactionForm that
    exists is a valid one.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Free-text description"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Strictly positive amount; the sign is carried by type"
    )
    type: TransactionType
    category: TransactionCategory

    @classmethod
    def build(cls, **fields: Any) -> "TransactionForm":
        """
        Construct a form, raising our ValidationError instead of pydantic's.

        The issues carried by the error map one-to-one to the fields
        pydantic rejected.
        """
        try:
            return cls(**fields)
        except PydanticValidationError as e:
            issues = [
                ValidationIssue(
                    field=".".join(str(part) for part in error["loc"]) or "form",
                    issue_type=error["type"],
                    message=error["msg"],
                )
                for error in e.errors()
            ]
            raise ValidationError(
                f"Invalid transaction: {len(issues)} issue(s)", issues
            ) from e


class Transaction(TransactionForm):
    """
    A transaction stored in a user's ledger.

    CRITICAL: Transactions are created only by the ledger and never
    mutated afterwards. The id and date are assigned at creation.
    """

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        min_length=1,
        description="Unique transaction ID"
    )
    date: datetime = Field(
        default_factory=utcnow,
        description="Creation instant"
    )

    @field_validator('date', mode='before')
    @classmethod
    def reject_numeric_date(cls, v: Any) -> Any:
        """Dates are ISO-8601 text; a number is never read as an epoch."""
        if isinstance(v, (int, float, Decimal)):
            raise ValueError("date must be an ISO-8601 string, not a number")
        return v

    @field_validator('date')
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Naive instants are stored UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @classmethod
    def from_form(cls, form: TransactionForm) -> "Transaction":
        """Create a brand new transaction (fresh id, current instant)."""
        return cls(
            name=form.name,
            amount=form.amount,
            type=form.type,
            category=form.category,
        )

    def to_record(self) -> dict:
        """
        Convert to the persisted JSON record.

        Amount is written as a decimal string, date as ISO-8601.
        """
        return {
            "id": self.id,
            "name": self.name,
            "amount": str(self.amount),
            "type": self.type.value,
            "category": self.category.value,
            "date": self.date.isoformat(),
        }

    @classmethod
    def from_record(cls, record: Any, index: Optional[int] = None) -> "Transaction":
        """
        Parse a persisted record.

        Raises MalformedRecordError instead of guessing: a record with a
        missing id or date, or a non-numeric amount, is never repaired.
        """
        if not isinstance(record, Mapping):
            raise MalformedRecordError(index, None, "record is not a JSON object")

        record_id = record.get("id")
        if not record_id:
            raise MalformedRecordError(index, None, "missing id")
        if record.get("date") in (None, ""):
            raise MalformedRecordError(index, str(record_id), "missing date")
        if record.get("amount") in (None, ""):
            raise MalformedRecordError(index, str(record_id), "missing amount")

        try:
            return cls.model_validate(dict(record))
        except PydanticValidationError as e:
            reasons = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
            raise MalformedRecordError(index, str(record_id), reasons) from e
