"""Loan registration: lookup, limit checks, schedule, commit, persist, notify."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Callable

from loan_origination.access import require_permission
from loan_origination.config import LoanOriginationConfig
from loan_origination.exceptions import LimitExceededError, NotificationError, ValidationError
from loan_origination.limits import LimitTracker
from loan_origination.models import (
    Action,
    AuthSession,
    ClientRecord,
    LimitSnapshot,
    LoanRecord,
    LoanStatus,
    LoanTerms,
    PersonType,
    Resource,
)
from loan_origination.notifications import NotificationSender, render_registration_email
from loan_origination.registry import IdentityRegistry, validate_document_number
from loan_origination.schedule import compute_schedule, quantize_money
from loan_origination.store.repository import LoanOriginationRepository

logger = logging.getLogger(__name__)


@dataclass
class RegistrationResult:
    """Outcome of a successful registration.

    ``warning`` is set when the loan was stored but the client could not
    be notified.
    """

    loan: LoanRecord
    remaining_daily_limit: Decimal
    notified: bool
    warning: str | None = None


def parse_amount(amount: Decimal | int | float | str) -> Decimal:
    """Parse a positive principal amount."""
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError) as e:
        raise ValidationError("El monto debe ser un número positivo") from e
    if not value.is_finite() or value <= 0:
        raise ValidationError("El monto debe ser un número positivo")
    return value


def parse_term(term_months: int | str, max_term_months: int) -> int:
    """Parse a term in whole months within ``[1, max_term_months]``."""
    try:
        value = int(str(term_months).strip())
    except ValueError as e:
        raise ValidationError(f"El plazo debe ser entre 1 y {max_term_months} meses") from e
    if value < 1 or value > max_term_months:
        raise ValidationError(f"El plazo debe ser entre 1 y {max_term_months} meses")
    return value


class LoanRegistrationWorkflow:
    """Registers loans for looked-up clients.

    Every loan is auto-approved. Validation, lookup and limit failures
    abort before any state is written; a notification failure after the
    loan is stored is reported on the result and nothing is rolled back.

    Parameters
    ----------
    repository : LoanOriginationRepository
        Persistence for limit states and loans.
    registry : IdentityRegistry
        Identity lookup.
    notifier : NotificationSender
        Email delivery.
    config : LoanOriginationConfig | None
        Product, limit and notification settings.
    clock : Callable[[], datetime]
        Returns the current local time.
    """

    def __init__(
        self,
        repository: LoanOriginationRepository,
        registry: IdentityRegistry,
        notifier: NotificationSender,
        config: LoanOriginationConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.repository = repository
        self.registry = registry
        self.notifier = notifier
        self.config = config or LoanOriginationConfig()
        self.clock = clock
        self.limits = LimitTracker(repository, self.config.limits, clock=clock)
        # Serializes check -> commit -> persist
        self._lock = threading.Lock()

    def lookup_client(
        self,
        person_type: PersonType | str,
        document_number: str,
    ) -> tuple[ClientRecord, LimitSnapshot]:
        """Find a client and report its current lending headroom."""
        client = self.registry.lookup(person_type, document_number)
        return client, self.limits.snapshot(client.document_number)

    def register_loan(
        self,
        session: AuthSession,
        person_type: PersonType | str,
        document_number: str,
        amount: Decimal | int | float | str,
        term_months: int | str,
        start_date: date | None = None,
    ) -> RegistrationResult:
        """Register and auto-approve a loan.

        Raises
        ------
        PermissionDeniedError
            If the session may not create loans.
        ValidationError
            Bad document number, amount or term.
        LookupNotFoundError
            If the registry has no such client.
        LimitExceededError
            If the daily or monthly ceiling would be exceeded.
        """
        require_permission(session.permissions, Resource.LOANS, Action.CREATE)

        person_type = validate_document_number(person_type, document_number)
        principal = parse_amount(amount)
        term = parse_term(term_months, self.config.product.max_term_months)

        client = self.registry.lookup(person_type, document_number)
        client_id = client.document_number

        with self._lock:
            self._check_limits(client_id, principal)

            now = self.clock()
            terms = LoanTerms(
                principal=principal,
                term_months=term,
                annual_rate_percent=self.config.product.annual_rate_percent,
                start_date=start_date or now.date(),
            )
            schedule = compute_schedule(terms)

            remaining = self.limits.commit_daily_amount(client_id, principal)

            loan = LoanRecord(
                id=str(uuid.uuid4()),
                client=client,
                terms=terms,
                schedule=schedule,
                status=LoanStatus.APPROVED,
                created_at=now,
                created_by=session.user.id if session.user else "unknown",
                completed=False,
                paid_installments=[],
            )
            self.repository.add_loan(loan)

        logger.info(
            "Registered loan %s for client %s: %s over %d months",
            loan.id,
            client_id,
            principal,
            term,
            extra={"loan_id": loan.id, "client_id": client_id, "user_id": loan.created_by},
        )

        notified, warning = self._notify(loan)
        return RegistrationResult(
            loan=loan,
            remaining_daily_limit=remaining,
            notified=notified,
            warning=warning,
        )

    def _check_limits(self, client_id: str, principal: Decimal) -> None:
        remaining_daily = self.limits.remaining_daily_limit(client_id)
        if principal > remaining_daily:
            raise LimitExceededError(
                "El monto excede el límite diario restante para este cliente de "
                f"S/ {quantize_money(remaining_daily):,.2f}",
                remaining=remaining_daily,
                period="daily",
            )

        if not self.limits.is_within_monthly_limit(client_id, principal):
            committed = self.limits.monthly_committed(client_id)
            ceiling = self.config.limits.monthly_ceiling
            raise LimitExceededError(
                f"El monto excede el límite mensual de S/ {quantize_money(ceiling):,.2f} para este cliente. "
                f"Ya tiene préstamos por S/ {quantize_money(committed):,.2f} este mes.",
                remaining=ceiling - committed,
                period="monthly",
            )

    def _notify(self, loan: LoanRecord) -> tuple[bool, str | None]:
        try:
            message = render_registration_email(
                loan.client,
                loan.terms,
                loan.schedule,
                to_address=self.config.notifications.override_recipient,
            )
            self.notifier.send(message)
        except NotificationError as e:
            logger.warning(
                "Loan %s stored but notification failed: %s", loan.id, e, extra={"loan_id": loan.id}
            )
            return False, _notification_warning(e)
        except Exception as e:
            # Delivery never undoes a stored loan
            logger.exception(
                "Loan %s stored but the sender raised unexpectedly", loan.id, extra={"loan_id": loan.id}
            )
            return False, _notification_warning(e)
        return True, None


def _notification_warning(error: Exception) -> str:
    return (
        "El préstamo se registró correctamente, pero no se pudo enviar "
        f"la notificación por email: {error}"
    )
