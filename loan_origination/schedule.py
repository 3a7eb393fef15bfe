"""Amortization engine: level-payment (French method) schedules."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from loan_origination.models.loan import Installment, LoanTerms

CENT = Decimal("0.01")


def monthly_rate(annual_rate_percent: Decimal) -> Decimal:
    """Monthly rate applied to the outstanding balance.

    The annual figure is divided by 10 and then by 12, so 10 yields
    0.0833... per month.
    """
    return Decimal(annual_rate_percent) / 10 / 12


def level_payment(principal: Decimal, rate: Decimal, term_months: int) -> Decimal:
    """Constant installment amount for ``principal`` over ``term_months``."""
    if rate == 0:
        return principal / term_months
    growth = (1 + rate) ** term_months
    return principal * (rate * growth) / (growth - 1)


def add_months(start: date, months: int) -> date:
    """Add calendar months keeping the day of month.

    A day that does not exist in the target month rolls forward into the
    next month (Jan 31 + 1 month in a leap year is Mar 2).
    """
    years, month_index = divmod(start.month - 1 + months, 12)
    first_of_month = date(start.year + years, month_index + 1, 1)
    return first_of_month + timedelta(days=start.day - 1)


def compute_schedule(terms: LoanTerms) -> list[Installment]:
    """Compute the installment schedule for ``terms``.

    Parameters
    ----------
    terms : LoanTerms
        Validated loan terms. The engine does not validate its input.

    Returns
    -------
    list[Installment]
        ``terms.term_months`` installments in ascending order. The last
        installment always reports a remaining balance of exactly zero.
    """
    principal = Decimal(terms.principal)
    n = terms.term_months
    rate = monthly_rate(terms.annual_rate_percent)
    payment = level_payment(principal, rate, n)

    schedule: list[Installment] = []
    balance = principal
    for i in range(1, n + 1):
        interest = balance * rate
        principal_portion = payment - interest
        balance -= principal_portion

        schedule.append(
            Installment(
                sequence_number=i,
                due_date=add_months(terms.start_date, i),
                payment_amount=payment,
                interest_portion=interest,
                principal_portion=principal_portion,
                remaining_balance=Decimal("0") if i == n else balance,
            )
        )

    return schedule


def total_payment(schedule: Iterable[Installment]) -> Decimal:
    """Sum of all installment payments (principal plus interest)."""
    return sum((i.payment_amount for i in schedule), Decimal("0"))


def total_interest(schedule: Iterable[Installment]) -> Decimal:
    """Sum of the interest portions."""
    return sum((i.interest_portion for i in schedule), Decimal("0"))


def quantize_money(value: Decimal) -> Decimal:
    """Round to cents for display."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
