"""Client identity record returned by the national registries."""

from dataclasses import dataclass

from loan_origination.models.enums import PersonType


@dataclass
class ClientRecord:
    """Natural person (DNI) or company (RUC) found in a registry."""

    person_type: PersonType
    document_type: str  # DNI or RUC
    document_number: str
    name: str | None = None  # Natural persons only
    business_name: str | None = None  # Companies only
    legal_representative: str | None = None
    address: str | None = None
    email: str | None = None

    @property
    def display_name(self) -> str:
        """Person name or company business name."""
        if self.person_type == PersonType.NATURAL:
            return self.name or ""
        return self.business_name or ""
