"""
Data Models Package

This package contains all Pydantic models used in GoFinances.
All data flowing through the system must conform to these schemas.
"""

from gofinances.models.transaction import (
    CATEGORIES,
    CategoryInfo,
    MalformedRecordError,
    Transaction,
    TransactionCategory,
    TransactionForm,
    TransactionType,
    ValidationError,
    ValidationIssue,
    ValidationResult,
    get_category,
)
from gofinances.models.user import (
    AppleCredential,
    AppleFullName,
    GoogleSignInResult,
    GoogleUserInfo,
    User,
)
from gofinances.models.summary import (
    CategorySummary,
    CategoryTotal,
    DashboardData,
    Highlight,
    HighlightSummary,
    TransactionListItem,
)
from gofinances.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "CATEGORIES",
    "CategoryInfo",
    "MalformedRecordError",
    "Transaction",
    "TransactionCategory",
    "TransactionForm",
    "TransactionType",
    "ValidationError",
    "ValidationIssue",
    "ValidationResult",
    "get_category",
    # Identity models
    "AppleCredential",
    "AppleFullName",
    "GoogleSignInResult",
    "GoogleUserInfo",
    "User",
    # Summary models
    "CategorySummary",
    "CategoryTotal",
    "DashboardData",
    "Highlight",
    "HighlightSummary",
    "TransactionListItem",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
