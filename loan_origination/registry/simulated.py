"""Simulated national identity registries (DNI for people, RUC for companies)."""

from __future__ import annotations

import logging
from dataclasses import replace
import re
from typing import Protocol

from faker import Faker

from loan_origination.exceptions import LookupNotFoundError, ValidationError
from loan_origination.models import ClientRecord, PersonType

logger = logging.getLogger(__name__)

DOCUMENT_RULES = {
    PersonType.NATURAL: (re.compile(r"[0-9]{8}"), "DNI", "El DNI debe tener 8 dígitos numéricos"),
    PersonType.LEGAL: (re.compile(r"[0-9]{11}"), "RUC", "El RUC debe tener 11 dígitos numéricos"),
}

KNOWN_CLIENTS = {
    "12345678": ClientRecord(
        person_type=PersonType.NATURAL,
        document_type="DNI",
        document_number="12345678",
        name="Juan Carlos Pérez García",
        address="Av. Arequipa 123, Lima",
        email="juan.perez@ejemplo.com",
    ),
    "87654321": ClientRecord(
        person_type=PersonType.NATURAL,
        document_type="DNI",
        document_number="87654321",
        name="María Rodríguez Vega",
        address="Jr. Huallaga 456, Lima",
        email="maria.rodriguez@ejemplo.com",
    ),
    "45678912": ClientRecord(
        person_type=PersonType.NATURAL,
        document_type="DNI",
        document_number="45678912",
        name="Pedro Suárez López",
        address="Av. La Marina 789, Lima",
        email="pedro.suarez@ejemplo.com",
    ),
    "20123456789": ClientRecord(
        person_type=PersonType.LEGAL,
        document_type="RUC",
        document_number="20123456789",
        business_name="Inversiones ABC S.A.C.",
        legal_representative="Carlos Mendoza Ríos",
        address="Av. Javier Prado 456, San Isidro, Lima",
        email="contacto@inversionesabc.com",
    ),
    "20987654321": ClientRecord(
        person_type=PersonType.LEGAL,
        document_type="RUC",
        document_number="20987654321",
        business_name="Comercial XYZ E.I.R.L.",
        legal_representative="Ana Gutiérrez Vargas",
        address="Av. República de Panamá 3030, San Isidro, Lima",
        email="info@comercialxyz.com",
    ),
}


def validate_document_number(person_type: PersonType | str, document_number: str) -> PersonType:
    """Check the document format for the person type.

    Returns
    -------
    PersonType
        The normalized person type.

    Raises
    ------
    ValidationError
        If the person type is unknown or the number has the wrong shape.
    """
    try:
        person_type = PersonType(person_type)
    except ValueError as e:
        raise ValidationError(f"Unknown person type: {person_type}") from e

    pattern, _, message = DOCUMENT_RULES[person_type]
    if not isinstance(document_number, str) or not pattern.fullmatch(document_number):
        raise ValidationError(message)
    return person_type


class IdentityRegistry(Protocol):
    """Looks up a client by document number."""

    def lookup(self, person_type: PersonType | str, document_number: str) -> ClientRecord: ...


class SimulatedRegistry:
    """In-process stand-in for the DNI and RUC registries.

    Known documents return fixed records. Unknown ones get a synthetic
    record built with Faker, or raise ``LookupNotFoundError`` when
    ``generate_unknown`` is False.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducible synthetic records.
    locale : str
        Faker locale (default ``es_ES``).
    known : dict[str, ClientRecord] | None
        Fixed records by document number.
    generate_unknown : bool
        Synthesize records for documents not in ``known``.
    """

    COMPANY_PREFIXES = ["Inversiones", "Comercial", "Distribuidora", "Servicios", "Constructora", "Consultora"]
    LEGAL_SUFFIXES = ["S.A.C.", "E.I.R.L.", "S.A.", "S.R.L."]

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "es_ES",
        known: dict[str, ClientRecord] | None = None,
        generate_unknown: bool = True,
    ) -> None:
        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)
        self.known = dict(KNOWN_CLIENTS if known is None else known)
        self.generate_unknown = generate_unknown

    def lookup(self, person_type: PersonType | str, document_number: str) -> ClientRecord:
        """Find a client record.

        Raises
        ------
        ValidationError
            If the document number does not match the person type.
        LookupNotFoundError
            If no record exists and synthesis is disabled.
        """
        person_type = validate_document_number(person_type, document_number)

        record = self.known.get(document_number)
        if record is not None:
            if record.person_type != person_type:
                raise LookupNotFoundError(f"Document {document_number} not found")
            return replace(record)

        if not self.generate_unknown:
            raise LookupNotFoundError(f"Document {document_number} not found")

        logger.debug("Synthesizing %s record for %s", person_type.value, document_number)
        if person_type == PersonType.NATURAL:
            return self._fake_person(document_number)
        return self._fake_company(document_number)

    def _fake_person(self, document_number: str) -> ClientRecord:
        return ClientRecord(
            person_type=PersonType.NATURAL,
            document_type="DNI",
            document_number=document_number,
            name=self.fake.name(),
            address=f"{self.fake.street_address()}, Lima",
            email=self.fake.email(),
        )

    def _fake_company(self, document_number: str) -> ClientRecord:
        prefix = self.fake.random_element(self.COMPANY_PREFIXES)
        suffix = self.fake.random_element(self.LEGAL_SUFFIXES)
        return ClientRecord(
            person_type=PersonType.LEGAL,
            document_type="RUC",
            document_number=document_number,
            business_name=f"{prefix} {self.fake.last_name()} {suffix}",
            legal_representative=self.fake.name(),
            address=f"{self.fake.street_address()}, Lima",
            email=f"contacto@{self.fake.domain_name()}",
        )
