"""Tests for custom exception hierarchy."""

from decimal import Decimal

import pytest

from loan_origination.exceptions import (
    AuthenticationError,
    ConfigurationError,
    CorruptRecordError,
    DuplicateEntityError,
    EntityNotFoundError,
    LimitExceededError,
    LoanOriginationError,
    LookupNotFoundError,
    NotificationError,
    PermissionDeniedError,
    StoreError,
    ValidationError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_base_is_exception(self) -> None:
        assert isinstance(LoanOriginationError("test"), Exception)

    @pytest.mark.parametrize(
        "error_class",
        [
            AuthenticationError,
            ConfigurationError,
            DuplicateEntityError,
            EntityNotFoundError,
            LookupNotFoundError,
            NotificationError,
            PermissionDeniedError,
            StoreError,
            ValidationError,
        ],
    )
    def test_is_loan_origination_error(self, error_class: type) -> None:
        assert isinstance(error_class("test"), LoanOriginationError)

    def test_corrupt_record_is_store_error(self) -> None:
        err = CorruptRecordError("bad json")
        assert isinstance(err, StoreError)
        assert isinstance(err, LoanOriginationError)

    def test_exception_message(self) -> None:
        err = EntityNotFoundError("Loan loan-001 not found")
        assert str(err) == "Loan loan-001 not found"


class TestLimitExceededError:
    """Tests for LimitExceededError attributes."""

    def test_attributes(self) -> None:
        err = LimitExceededError("Daily limit exceeded", remaining=Decimal("250.50"), period="daily")

        assert str(err) == "Daily limit exceeded"
        assert err.remaining == Decimal("250.50")
        assert err.period == "daily"
        assert isinstance(err, LoanOriginationError)
