"""Loan registration and portfolio workflows."""

from loan_origination.workflow.portfolio import LoanPortfolio
from loan_origination.workflow.registration import (
    LoanRegistrationWorkflow,
    RegistrationResult,
    parse_amount,
    parse_term,
)

__all__ = [
    "LoanPortfolio",
    "LoanRegistrationWorkflow",
    "RegistrationResult",
    "parse_amount",
    "parse_term",
]
