"""Identity lookup against the national registries."""

from loan_origination.registry.simulated import (
    IdentityRegistry,
    SimulatedRegistry,
    validate_document_number,
)

__all__ = ["IdentityRegistry", "SimulatedRegistry", "validate_document_number"]
