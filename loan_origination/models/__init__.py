"""Domain models for loan origination."""

from loan_origination.models.client import ClientRecord
from loan_origination.models.enums import (
    Action,
    LoanStatus,
    PersonType,
    Resource,
    UserRole,
)
from loan_origination.models.limits import ClientLimitState, LimitSnapshot
from loan_origination.models.loan import Installment, LoanRecord, LoanTerms
from loan_origination.models.user import AuthSession, User

__all__ = [
    "Action",
    "AuthSession",
    "ClientLimitState",
    "ClientRecord",
    "Installment",
    "LimitSnapshot",
    "LoanRecord",
    "LoanStatus",
    "LoanTerms",
    "PersonType",
    "Resource",
    "User",
    "UserRole",
]
