"""Repository with one read/write pair per persisted entity type."""

from __future__ import annotations

import json
import logging

from loan_origination.exceptions import CorruptRecordError, EntityNotFoundError
from loan_origination.models import ClientLimitState, LoanRecord, User
from loan_origination.store.kv import KeyValueStore
from loan_origination.store.serialization import (
    dataclass_to_dict,
    limit_state_from_dict,
    loan_from_dict,
    to_dict_fast,
    user_from_dict,
)

logger = logging.getLogger(__name__)

USERS_KEY = "users"
SESSION_KEY = "auth_session"
LOANS_KEY = "loans"
DAILY_LIMIT_PREFIX = "daily_limit:"


class LoanOriginationRepository:
    """Typed access to the record store.

    Missing keys read as empty values. Values that cannot be decoded
    raise :class:`CorruptRecordError`; callers decide whether to recover.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    # Users
    def load_users(self) -> list[User]:
        """Get all staff users."""
        return [user_from_dict(item) for item in self._read_list(USERS_KEY)]

    def save_users(self, users: list[User]) -> None:
        """Replace the stored user list."""
        self._write(USERS_KEY, [dataclass_to_dict(u) for u in users])

    # Auth session marker
    def load_session_user_id(self) -> str | None:
        """Get the id of the logged-in user, if any."""
        raw = self._read(SESSION_KEY)
        if raw is None:
            return None
        if not isinstance(raw, dict) or not isinstance(raw.get("user_id"), str):
            raise CorruptRecordError("Invalid auth session marker")
        return raw["user_id"]

    def save_session_user_id(self, user_id: str) -> None:
        self._write(SESSION_KEY, {"user_id": user_id})

    def clear_session(self) -> None:
        self.store.delete(SESSION_KEY)

    # Daily limit state
    def load_limit_state(self, client_id: str) -> ClientLimitState | None:
        """Get the stored daily limit state of a client."""
        raw = self._read(DAILY_LIMIT_PREFIX + client_id)
        if raw is None:
            return None
        if not isinstance(raw, dict):
            raise CorruptRecordError(f"Invalid limit state for client {client_id}")
        return limit_state_from_dict(raw)

    def save_limit_state(self, state: ClientLimitState) -> None:
        self._write(DAILY_LIMIT_PREFIX + state.client_id, to_dict_fast(state))

    # Loans
    def load_loans(self) -> list[LoanRecord]:
        """Get all loans in registration order."""
        return [loan_from_dict(item) for item in self._read_list(LOANS_KEY)]

    def save_loans(self, loans: list[LoanRecord]) -> None:
        """Replace the stored loan list."""
        self._write(LOANS_KEY, [dataclass_to_dict(loan) for loan in loans])

    def add_loan(self, loan: LoanRecord) -> None:
        """Append a loan to the stored list."""
        loans = self.load_loans()
        loans.append(loan)
        self.save_loans(loans)
        logger.debug("Stored loan %s (%d total)", loan.id, len(loans))

    def get_loan(self, loan_id: str) -> LoanRecord:
        """Get a loan by id."""
        for loan in self.load_loans():
            if loan.id == loan_id:
                return loan
        raise EntityNotFoundError(f"Loan {loan_id} not found")

    def update_loan(self, loan: LoanRecord) -> None:
        """Replace a stored loan with the same id."""
        loans = self.load_loans()
        for idx, existing in enumerate(loans):
            if existing.id == loan.id:
                loans[idx] = loan
                self.save_loans(loans)
                return
        raise EntityNotFoundError(f"Loan {loan.id} not found")

    def get_client_loans(self, client_id: str) -> list[LoanRecord]:
        """Get all loans of a client."""
        return [loan for loan in self.load_loans() if loan.client_id == client_id]

    def _read(self, key: str):
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptRecordError(f"Key {key!r} does not hold valid JSON") from e

    def _read_list(self, key: str) -> list:
        raw = self._read(key)
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise CorruptRecordError(f"Key {key!r} must hold a list")
        return raw

    def _write(self, key: str, value) -> None:
        self.store.set(key, json.dumps(value, ensure_ascii=False))
