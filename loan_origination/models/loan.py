"""Loan models: terms, installments and the persisted loan record."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from loan_origination.models.client import ClientRecord
from loan_origination.models.enums import LoanStatus


@dataclass
class LoanTerms:
    """Terms captured at registration time."""

    principal: Decimal
    term_months: int
    annual_rate_percent: Decimal
    start_date: date


@dataclass
class Installment:
    """One scheduled payment (cuota)."""

    sequence_number: int  # 1, 2, 3, ...
    due_date: date
    payment_amount: Decimal
    interest_portion: Decimal
    principal_portion: Decimal
    remaining_balance: Decimal


@dataclass
class LoanRecord:
    """Persisted loan with its payment schedule."""

    id: str
    client: ClientRecord
    terms: LoanTerms
    schedule: list[Installment]
    status: LoanStatus
    created_at: datetime
    created_by: str
    completed: bool = False
    paid_installments: list[int] = field(default_factory=list)
    approved_by: str | None = None
    approved_at: datetime | None = None

    @property
    def client_id(self) -> str:
        """National document number of the borrower."""
        return self.client.document_number

    @property
    def total_payment(self) -> Decimal:
        return sum((i.payment_amount for i in self.schedule), Decimal("0"))

    @property
    def total_interest(self) -> Decimal:
        return sum((i.interest_portion for i in self.schedule), Decimal("0"))

    def is_installment_paid(self, sequence_number: int) -> bool:
        return sequence_number in self.paid_installments
