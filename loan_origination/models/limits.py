"""Per-client lending limit state."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass
class ClientLimitState:
    """Amount committed to one client on one calendar day."""

    client_id: str
    tracking_date: date
    daily_committed: Decimal = Decimal("0")

    @classmethod
    def fresh(cls, client_id: str, day: date) -> "ClientLimitState":
        """Zero state for ``client_id`` on ``day``."""
        return cls(client_id=client_id, tracking_date=day, daily_committed=Decimal("0"))


@dataclass
class LimitSnapshot:
    """Headroom shown to staff after a client lookup."""

    client_id: str
    remaining_daily: Decimal
    monthly_committed: Decimal
    remaining_monthly: Decimal
