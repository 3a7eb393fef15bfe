"""Registered-loan queries and installment payments."""

from __future__ import annotations

import logging

from loan_origination.access import has_permission, require_permission
from loan_origination.exceptions import EntityNotFoundError, ValidationError
from loan_origination.models import Action, AuthSession, LoanRecord, LoanStatus, Resource, UserRole
from loan_origination.notifications import NotificationSender, render_schedule_email
from loan_origination.store.repository import LoanOriginationRepository

logger = logging.getLogger(__name__)


class LoanPortfolio:
    """Read and update loans already registered."""

    def __init__(
        self,
        repository: LoanOriginationRepository,
        notifier: NotificationSender,
    ) -> None:
        self.repository = repository
        self.notifier = notifier

    def list_loans(self, session: AuthSession) -> list[LoanRecord]:
        """Loans visible to the session.

        Agents who cannot manage loans only see the ones they created.
        """
        require_permission(session.permissions, Resource.LOANS, Action.READ)
        return [loan for loan in self.repository.load_loans() if _visible_to(session, loan)]

    def active_loans(self, session: AuthSession) -> list[LoanRecord]:
        return [
            loan
            for loan in self.list_loans(session)
            if loan.status == LoanStatus.APPROVED and not loan.completed
        ]

    def completed_loans(self, session: AuthSession) -> list[LoanRecord]:
        return [loan for loan in self.list_loans(session) if loan.completed]

    def search_loans(self, session: AuthSession, query: str) -> list[LoanRecord]:
        """Match ``query`` against client name or document number, case-insensitively."""
        loans = self.list_loans(session)
        needle = query.strip().lower()
        if not needle:
            return loans
        return [
            loan
            for loan in loans
            if needle in loan.client.display_name.lower()
            or needle in loan.client.document_number.lower()
        ]

    def get_loan(self, session: AuthSession, loan_id: str) -> LoanRecord:
        """Get one loan, subject to the same visibility as :meth:`list_loans`."""
        require_permission(session.permissions, Resource.LOANS, Action.READ)
        loan = self.repository.get_loan(loan_id)
        if not _visible_to(session, loan):
            raise EntityNotFoundError(f"Loan {loan_id} not found")
        return loan

    def mark_installment_paid(self, session: AuthSession, loan_id: str, sequence_number: int) -> LoanRecord:
        """Record an installment as paid.

        The loan becomes completed once every installment is paid.

        Raises
        ------
        ValidationError
            If the installment number is outside the schedule or the
            loan is already completed.
        """
        require_permission(session.permissions, Resource.LOANS, Action.UPDATE)
        loan = self.repository.get_loan(loan_id)

        if loan.completed:
            raise ValidationError(f"Loan {loan_id} is already completed")
        if not 1 <= sequence_number <= loan.terms.term_months:
            raise ValidationError(
                f"Installment must be between 1 and {loan.terms.term_months}"
            )

        loan.paid_installments = sorted(set(loan.paid_installments) | {sequence_number})
        if len(loan.paid_installments) == loan.terms.term_months:
            loan.completed = True
            loan.status = LoanStatus.COMPLETED
            logger.info("Loan %s fully paid", loan_id, extra={"loan_id": loan_id})

        self.repository.update_loan(loan)
        return loan

    def send_schedule(self, session: AuthSession, loan_id: str, to_address: str | None = None) -> None:
        """Email the payment schedule of a loan.

        Raises
        ------
        NotificationError
            If the email cannot be rendered or delivered.
        """
        loan = self.get_loan(session, loan_id)
        message = render_schedule_email(loan.client, loan.terms, loan.schedule, to_address=to_address)
        self.notifier.send(message)


def _visible_to(session: AuthSession, loan: LoanRecord) -> bool:
    user = session.user
    if user is None or user.role != UserRole.AGENT:
        return True
    if has_permission(session.permissions, Resource.LOANS, Action.MANAGE):
        return True
    return loan.created_by == user.id
