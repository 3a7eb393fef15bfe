"""Pytest configuration and fixtures."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from loan_origination.access import permissions_for_role
from loan_origination.models import (
    AuthSession,
    ClientRecord,
    LoanRecord,
    LoanStatus,
    LoanTerms,
    PersonType,
    User,
    UserRole,
)
from loan_origination.schedule import compute_schedule
from loan_origination.store import InMemoryStore, LoanOriginationRepository


class FixedClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at 2024-03-15 10:30."""
    return FixedClock(datetime(2024, 3, 15, 10, 30))


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def repository(store: InMemoryStore) -> LoanOriginationRepository:
    return LoanOriginationRepository(store)


@pytest.fixture
def sample_client() -> ClientRecord:
    """Natural person with an email address."""
    return ClientRecord(
        person_type=PersonType.NATURAL,
        document_type="DNI",
        document_number="12345678",
        name="Juan Carlos Pérez García",
        address="Av. Arequipa 123, Lima",
        email="juan.perez@ejemplo.com",
    )


@pytest.fixture
def sample_terms() -> LoanTerms:
    return LoanTerms(
        principal=Decimal("1000"),
        term_months=12,
        annual_rate_percent=Decimal("10"),
        start_date=date(2024, 1, 15),
    )


def make_user(role: UserRole, user_id: str = "user-001", active: bool = True) -> User:
    return User(
        id=user_id,
        username=f"{role.value}-{user_id}",
        password_hash="$pbkdf2-sha256$1000$c2FsdA$AAAA",
        full_name=f"Test {role.value}",
        email=f"{role.value}@prestamos.com",
        role=role,
        active=active,
        created_at=datetime(2024, 1, 1),
    )


def make_session(role: UserRole, user_id: str = "user-001") -> AuthSession:
    return AuthSession(user=make_user(role, user_id), permissions=permissions_for_role(role))


def make_loan(
    client: ClientRecord,
    principal: str | Decimal = "1000",
    created_at: datetime = datetime(2024, 3, 15, 9, 0),
    created_by: str = "user-001",
    loan_id: str = "loan-test-001",
    term_months: int = 12,
) -> LoanRecord:
    terms = LoanTerms(
        principal=Decimal(principal),
        term_months=term_months,
        annual_rate_percent=Decimal("10"),
        start_date=created_at.date(),
    )
    return LoanRecord(
        id=loan_id,
        client=client,
        terms=terms,
        schedule=compute_schedule(terms),
        status=LoanStatus.APPROVED,
        created_at=created_at,
        created_by=created_by,
    )


@pytest.fixture
def admin_session() -> AuthSession:
    return make_session(UserRole.ADMIN, "admin-001")


@pytest.fixture
def manager_session() -> AuthSession:
    return make_session(UserRole.MANAGER, "manager-001")


@pytest.fixture
def agent_session() -> AuthSession:
    return make_session(UserRole.AGENT, "agent-001")
