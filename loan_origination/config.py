"""Configuration management for loan-origination."""

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

from loan_origination.exceptions import ConfigurationError


@dataclass(frozen=True)
class ProductConfig:
    """The single loan product offered."""

    annual_rate_percent: Decimal = Decimal("10")
    max_term_months: int = 60


@dataclass(frozen=True)
class LimitConfig:
    """Per-client lending ceilings, in the same currency as the principal."""

    daily_ceiling: Decimal = Decimal("5000")
    monthly_ceiling: Decimal = Decimal("20000")


@dataclass
class StoreConfig:
    """Record store configuration."""

    backend: str = "memory"  # memory or json
    path: Path = field(default_factory=lambda: Path("loan_store.json"))


@dataclass
class RegistryConfig:
    """Simulated identity registry configuration."""

    locale: str = "es_ES"
    seed: int | None = None
    generate_unknown: bool = True


@dataclass
class NotificationConfig:
    """Email notification configuration."""

    sender_address: str = "notificaciones@prestamos.com"
    override_recipient: str | None = None  # Send every email here instead of the client


@dataclass
class LoanOriginationConfig:
    """Main configuration for loan-origination."""

    product: ProductConfig = field(default_factory=ProductConfig)
    limits: LimitConfig = field(default_factory=LimitConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "LoanOriginationConfig":
        """Create config from environment variables.

        Rate and lending ceilings are fixed policy and are never read
        from the environment.
        """
        import os

        backend = os.getenv("LOAN_STORE_BACKEND", "memory")
        if backend not in ("memory", "json"):
            raise ConfigurationError(f"Unknown store backend: {backend}")

        store = StoreConfig(
            backend=backend,
            path=Path(os.getenv("LOAN_STORE_PATH", "loan_store.json")),
        )

        seed = os.getenv("SEED")
        registry = RegistryConfig(
            locale=os.getenv("REGISTRY_LOCALE", "es_ES"),
            seed=int(seed) if seed else None,
            generate_unknown=os.getenv("REGISTRY_GENERATE_UNKNOWN", "true").lower() == "true",
        )

        notifications = NotificationConfig(
            sender_address=os.getenv("NOTIFY_SENDER", "notificaciones@prestamos.com"),
            override_recipient=os.getenv("NOTIFY_OVERRIDE_RECIPIENT") or None,
        )

        return cls(
            store=store,
            registry=registry,
            notifications=notifications,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
