"""Per-client daily and monthly lending-limit tracking."""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Callable

from loan_origination.config import LimitConfig
from loan_origination.exceptions import CorruptRecordError
from loan_origination.models import ClientLimitState, LimitSnapshot
from loan_origination.store.repository import LoanOriginationRepository

logger = logging.getLogger(__name__)


class LimitTracker:
    """Bookkeeping for the daily and monthly ceilings of each client.

    The daily figure is a counter persisted per client and reset when the
    calendar day changes. The monthly figure is summed from the loans
    registered in the current calendar month.

    Unreadable persisted state is treated as a fresh zero state and
    logged at WARNING level. Lookups never fail because of it.

    Parameters
    ----------
    repository : LoanOriginationRepository
        Source of limit states and loans.
    config : LimitConfig | None
        Ceilings (defaults: 5000 daily, 20000 monthly).
    clock : Callable[[], datetime]
        Returns the current local time.
    """

    def __init__(
        self,
        repository: LoanOriginationRepository,
        config: LimitConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.repository = repository
        self.config = config or LimitConfig()
        self.clock = clock

    def remaining_daily_limit(self, client_id: str) -> Decimal:
        """Amount the client can still borrow today."""
        state = self._today_state(client_id)
        return self.config.daily_ceiling - state.daily_committed

    def commit_daily_amount(self, client_id: str, amount: Decimal) -> Decimal:
        """Add ``amount`` to today's committed total.

        Returns
        -------
        Decimal
            Remaining daily limit after the commitment.
        """
        state = self._today_state(client_id)
        state.daily_committed += Decimal(amount)
        self.repository.save_limit_state(state)
        remaining = self.config.daily_ceiling - state.daily_committed
        logger.info(
            "Committed %s for client %s, %s left today",
            amount,
            client_id,
            remaining,
            extra={"client_id": client_id, "period": "daily"},
        )
        return remaining

    def monthly_committed(self, client_id: str) -> Decimal:
        """Principal lent to the client in the current calendar month."""
        now = self.clock()
        try:
            loans = self.repository.get_client_loans(client_id)
        except CorruptRecordError as e:
            logger.warning("Unreadable loan list, assuming no loans this month: %s", e)
            return Decimal("0")

        return sum(
            (
                loan.terms.principal
                for loan in loans
                if loan.created_at.year == now.year and loan.created_at.month == now.month
            ),
            Decimal("0"),
        )

    def is_within_monthly_limit(self, client_id: str, amount: Decimal) -> bool:
        """True when ``amount`` fits under the monthly ceiling."""
        return self.monthly_committed(client_id) + Decimal(amount) <= self.config.monthly_ceiling

    def remaining_monthly_limit(self, client_id: str) -> Decimal:
        return self.config.monthly_ceiling - self.monthly_committed(client_id)

    def snapshot(self, client_id: str) -> LimitSnapshot:
        """Current headroom of a client for both periods."""
        monthly = self.monthly_committed(client_id)
        return LimitSnapshot(
            client_id=client_id,
            remaining_daily=self.remaining_daily_limit(client_id),
            monthly_committed=monthly,
            remaining_monthly=self.config.monthly_ceiling - monthly,
        )

    def _today(self) -> date:
        return self.clock().date()

    def _today_state(self, client_id: str) -> ClientLimitState:
        """Load today's state, starting a fresh one for a new day."""
        today = self._today()
        try:
            state = self.repository.load_limit_state(client_id)
        except CorruptRecordError as e:
            logger.warning("Unreadable limit state for client %s, starting fresh: %s", client_id, e)
            state = None

        if state is not None and state.tracking_date == today:
            return state

        state = ClientLimitState.fresh(client_id, today)
        self.repository.save_limit_state(state)
        return state
