"""Serialization between domain dataclasses and JSON-ready dicts."""

from dataclasses import asdict, fields
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from loan_origination.exceptions import CorruptRecordError
from loan_origination.models import (
    ClientLimitState,
    ClientRecord,
    Installment,
    LoanRecord,
    LoanStatus,
    LoanTerms,
    PersonType,
    User,
    UserRole,
)


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization."""
    result = {}
    for key, value in asdict(obj).items():
        result[key] = serialize_value(value)
    return result


def to_dict_fast(obj: Any) -> dict:
    """Convert a flat dataclass without the deep copy done by ``asdict``."""
    return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output.

    Decimals become strings so amounts reload with every digit intact.
    """
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def _decimal(value: Any) -> Decimal:
    if isinstance(value, float):
        value = repr(value)
    return Decimal(value)


def _optional_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def client_from_dict(data: dict) -> ClientRecord:
    """Decode a client record."""
    try:
        return ClientRecord(
            person_type=PersonType(data["person_type"]),
            document_type=data["document_type"],
            document_number=data["document_number"],
            name=data.get("name"),
            business_name=data.get("business_name"),
            legal_representative=data.get("legal_representative"),
            address=data.get("address"),
            email=data.get("email"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise CorruptRecordError(f"Invalid client record: {e}") from e


def installment_from_dict(data: dict) -> Installment:
    """Decode one installment."""
    return Installment(
        sequence_number=int(data["sequence_number"]),
        due_date=date.fromisoformat(data["due_date"]),
        payment_amount=_decimal(data["payment_amount"]),
        interest_portion=_decimal(data["interest_portion"]),
        principal_portion=_decimal(data["principal_portion"]),
        remaining_balance=_decimal(data["remaining_balance"]),
    )


def loan_from_dict(data: dict) -> LoanRecord:
    """Decode a persisted loan record.

    Raises
    ------
    CorruptRecordError
        If a field is missing or malformed.
    """
    try:
        terms = data["terms"]
        return LoanRecord(
            id=data["id"],
            client=client_from_dict(data["client"]),
            terms=LoanTerms(
                principal=_decimal(terms["principal"]),
                term_months=int(terms["term_months"]),
                annual_rate_percent=_decimal(terms["annual_rate_percent"]),
                start_date=date.fromisoformat(terms["start_date"]),
            ),
            schedule=[installment_from_dict(i) for i in data["schedule"]],
            status=LoanStatus(data["status"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            created_by=data["created_by"],
            completed=bool(data.get("completed", False)),
            paid_installments=sorted({int(n) for n in data.get("paid_installments") or []}),
            approved_by=data.get("approved_by"),
            approved_at=_optional_datetime(data.get("approved_at")),
        )
    except (KeyError, TypeError, ValueError, InvalidOperation) as e:
        raise CorruptRecordError(f"Invalid loan record: {e}") from e


def user_from_dict(data: dict) -> User:
    """Decode a staff user."""
    try:
        return User(
            id=data["id"],
            username=data["username"],
            password_hash=data["password_hash"],
            full_name=data["full_name"],
            email=data["email"],
            role=UserRole(data["role"]),
            active=bool(data["active"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            last_login=_optional_datetime(data.get("last_login")),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise CorruptRecordError(f"Invalid user record: {e}") from e


def limit_state_from_dict(data: dict) -> ClientLimitState:
    """Decode a daily limit state."""
    try:
        return ClientLimitState(
            client_id=data["client_id"],
            tracking_date=date.fromisoformat(data["tracking_date"]),
            daily_committed=_decimal(data["daily_committed"]),
        )
    except (KeyError, TypeError, ValueError, InvalidOperation) as e:
        raise CorruptRecordError(f"Invalid limit state: {e}") from e
