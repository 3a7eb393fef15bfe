"""Tests for config and logging."""

import io
import json
import logging
import os
import sys
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import pytest

from loan_origination.config import (
    LimitConfig,
    LoanOriginationConfig,
    NotificationConfig,
    ProductConfig,
    RegistryConfig,
    StoreConfig,
)
from loan_origination.exceptions import ConfigurationError
from loan_origination.limits import LimitTracker
from loan_origination.logging import JsonFormatter, get_logger, setup_logging
from loan_origination.store import InMemoryStore, LoanOriginationRepository

ENV_VARS = [
    "LOAN_STORE_BACKEND",
    "LOAN_STORE_PATH",
    "REGISTRY_LOCALE",
    "REGISTRY_GENERATE_UNKNOWN",
    "SEED",
    "NOTIFY_SENDER",
    "NOTIFY_OVERRIDE_RECIPIENT",
    "LOG_LEVEL",
    "LOG_FORMAT",
]


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestPolicyConfig:
    """Tests for the fixed product and limit settings."""

    def test_product_defaults(self) -> None:
        config = ProductConfig()

        assert config.annual_rate_percent == Decimal("10")
        assert config.max_term_months == 60

    def test_limit_defaults(self) -> None:
        config = LimitConfig()

        assert config.daily_ceiling == Decimal("5000")
        assert config.monthly_ceiling == Decimal("20000")

    def test_policy_is_frozen(self) -> None:
        from dataclasses import FrozenInstanceError

        with pytest.raises(FrozenInstanceError):
            LimitConfig().daily_ceiling = Decimal("1")  # type: ignore[misc]


class TestSectionConfig:
    """Tests for store, registry and notification sections."""

    def test_store_defaults(self) -> None:
        config = StoreConfig()

        assert config.backend == "memory"
        assert config.path == Path("loan_store.json")

    def test_registry_defaults(self) -> None:
        config = RegistryConfig()

        assert config.locale == "es_ES"
        assert config.seed is None
        assert config.generate_unknown is True

    def test_notification_defaults(self) -> None:
        config = NotificationConfig()

        assert config.sender_address == "notificaciones@prestamos.com"
        assert config.override_recipient is None


class TestLoanOriginationConfig:
    """Tests for LoanOriginationConfig."""

    def test_default_values(self) -> None:
        config = LoanOriginationConfig()

        assert isinstance(config.product, ProductConfig)
        assert isinstance(config.limits, LimitConfig)
        assert isinstance(config.store, StoreConfig)
        assert config.log_level == "INFO"
        assert config.log_format == "standard"

    def test_from_env_default(self, clean_env: None) -> None:
        config = LoanOriginationConfig.from_env()

        assert config.store.backend == "memory"
        assert config.registry.seed is None
        assert config.registry.generate_unknown is True
        assert config.notifications.override_recipient is None
        assert config.log_level == "INFO"

    def test_from_env_custom(self, clean_env: None) -> None:
        env = {
            "LOAN_STORE_BACKEND": "json",
            "LOAN_STORE_PATH": "/data/loans.json",
            "REGISTRY_LOCALE": "es_MX",
            "REGISTRY_GENERATE_UNKNOWN": "false",
            "SEED": "12345",
            "NOTIFY_SENDER": "avisos@prestamos.com",
            "NOTIFY_OVERRIDE_RECIPIENT": "pruebas@prestamos.com",
            "LOG_LEVEL": "DEBUG",
            "LOG_FORMAT": "json",
        }
        with patch.dict(os.environ, env):
            config = LoanOriginationConfig.from_env()

        assert config.store.backend == "json"
        assert config.store.path == Path("/data/loans.json")
        assert config.registry.locale == "es_MX"
        assert config.registry.generate_unknown is False
        assert config.registry.seed == 12345
        assert config.notifications.sender_address == "avisos@prestamos.com"
        assert config.notifications.override_recipient == "pruebas@prestamos.com"
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"

    def test_limits_not_read_from_env(self, clean_env: None) -> None:
        with patch.dict(os.environ, {"DAILY_CEILING": "1"}):
            config = LoanOriginationConfig.from_env()

        assert config.limits.daily_ceiling == Decimal("5000")

    def test_from_env_unknown_backend(self, clean_env: None) -> None:
        with patch.dict(os.environ, {"LOAN_STORE_BACKEND": "redis"}):
            with pytest.raises(ConfigurationError, match="redis"):
                LoanOriginationConfig.from_env()


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default(self) -> None:
        setup_logging()

        assert logging.getLogger("loan_origination").level == logging.INFO

    def test_setup_logging_debug(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_setup_logging_invalid_level(self) -> None:
        """Invalid level falls back to INFO."""
        setup_logging(level="INVALID")

        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_json_format(self) -> None:
        setup_logging(format_type="json")

        assert any(isinstance(h.formatter, JsonFormatter) for h in logging.getLogger().handlers)

    def test_setup_logging_replaces_handlers(self) -> None:
        root = logging.getLogger()
        root.addHandler(logging.StreamHandler())
        root.addHandler(logging.StreamHandler())

        setup_logging()

        assert len(root.handlers) == 1

    def test_setup_logging_stream_with_domain_context(self) -> None:
        stream = io.StringIO()
        setup_logging(format_type="json", stream=stream)
        tracker = LimitTracker(LoanOriginationRepository(InMemoryStore()), clock=lambda: datetime(2024, 3, 15, 10, 30))

        tracker.commit_daily_amount("12345678", Decimal("1200"))

        data = json.loads(stream.getvalue().splitlines()[-1])
        assert data["logger"] == "loan_origination.limits"
        assert data["client_id"] == "12345678"
        assert data["period"] == "daily"

    def test_faker_logger_quieted(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger("faker").level == logging.WARNING


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def _record(self, **kwargs) -> logging.LogRecord:
        defaults = dict(
            name="loan_origination.limits",
            level=logging.INFO,
            pathname="/path/to/limits.py",
            lineno=42,
            msg="Committed %s for client %s",
            args=(Decimal("1000"), "12345678"),
            exc_info=None,
        )
        defaults.update(kwargs)
        return logging.LogRecord(**defaults)

    def test_format_basic(self) -> None:
        data = json.loads(JsonFormatter().format(self._record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "loan_origination.limits"
        assert data["message"] == "Committed 1000 for client 12345678"
        assert "timestamp" in data

    def test_format_context_fields(self) -> None:
        record = self._record()
        record.loan_id = "loan-001"
        record.client_id = "12345678"

        data = json.loads(JsonFormatter().format(record))

        assert data["loan_id"] == "loan-001"
        assert data["client_id"] == "12345678"
        assert "user_id" not in data

    def test_format_with_exception(self) -> None:
        try:
            raise ValueError("Test error")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(JsonFormatter().format(self._record(level=logging.ERROR, exc_info=exc_info)))

        assert data["level"] == "ERROR"
        assert "ValueError" in data["exception"]

    def test_format_with_extra(self) -> None:
        record = self._record()
        record.extra = {"client_id": "12345678", "amount": Decimal("1000")}

        data = json.loads(JsonFormatter().format(record))

        assert data["client_id"] == "12345678"
        assert data["amount"] == "1000"


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger(self) -> None:
        logger = get_logger("loan_origination.workflow")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "loan_origination.workflow"

    def test_get_logger_same_instance(self) -> None:
        assert get_logger("test.same") is get_logger("test.same")
