"""
Test suite for configuration and structured logging
"""

import json
import logging

import pytest
from pydantic import ValidationError

from atm_ledger.accounts import Account
from atm_ledger.config import LedgerConfig, get_config, reload_config
from atm_ledger.currency import Money
from atm_ledger.logging_config import (
    JSONFormatter, setup_logging, setup_logging_from_config, log_action, get_logger
)


class TestLedgerConfig:
    """Test environment-driven configuration"""

    def test_defaults(self, monkeypatch):
        for name in ("ATM_BANK_NAME", "ATM_MAX_LOGIN_ATTEMPTS", "ATM_LOCKOUT_SECONDS"):
            monkeypatch.delenv(name, raising=False)
        config = LedgerConfig()
        assert config.bank_name == "Modern Bank"
        assert config.currency == "INR"
        assert config.max_login_attempts == 3
        assert config.lockout_seconds == 10.0
        assert config.enable_audit_logging

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("ATM_BANK_NAME", "Env Bank")
        monkeypatch.setenv("ATM_MAX_LOGIN_ATTEMPTS", "5")
        config = LedgerConfig()
        assert config.bank_name == "Env Bank"
        assert config.max_login_attempts == 5

    def test_validation(self):
        with pytest.raises(ValidationError):
            LedgerConfig(max_login_attempts=0)
        with pytest.raises(ValidationError):
            LedgerConfig(lockout_seconds=-1)

    def test_currency_validated_at_load(self, monkeypatch):
        assert LedgerConfig(currency="usd").currency == "USD"
        with pytest.raises(ValidationError, match="Unsupported currency code"):
            LedgerConfig(currency="XYZ")
        monkeypatch.setenv("ATM_CURRENCY", "ABC")
        with pytest.raises(ValidationError):
            LedgerConfig()

    def test_reload_config(self, monkeypatch):
        monkeypatch.setenv("ATM_BANK_NAME", "Reloaded Bank")
        try:
            assert reload_config().bank_name == "Reloaded Bank"
            assert get_config().bank_name == "Reloaded Bank"
        finally:
            monkeypatch.delenv("ATM_BANK_NAME")
            reload_config()


class TestStructuredLogging:
    """Test JSON log output"""

    def test_json_formatter_fields(self):
        logger = logging.getLogger("atm_ledger.test")
        record = logger.makeRecord("atm_ledger.test", logging.INFO, __file__, 1,
                                   "Deposited", (), None)
        record.account_id = "123456"
        record.action = "deposit"
        data = json.loads(JSONFormatter().format(record))
        assert data["level"] == "INFO"
        assert data["message"] == "Deposited"
        assert data["account_id"] == "123456"
        assert data["action"] == "deposit"
        assert "correlation_id" not in data

    def test_setup_logging(self):
        logger = setup_logging(level="debug", logger_name="atm_ledger.setup_test")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)
        assert not logger.propagate

        setup_logging(level="INFO", log_format="text", logger_name="atm_ledger.setup_test")
        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_setup_logging_from_config(self):
        config = LedgerConfig(log_level="WARNING")
        logger = setup_logging_from_config(config)
        try:
            assert logger.name == "atm_ledger"
            assert logger.level == logging.WARNING
        finally:
            logger.handlers.clear()
            logger.propagate = True
            logger.setLevel(logging.NOTSET)

    def test_log_action_attaches_fields(self, caplog):
        logger = get_logger("atm_ledger.log_action_test")
        with caplog.at_level(logging.INFO, logger="atm_ledger.log_action_test"):
            log_action(logger, "info", "Transferred", account_id="123456",
                       action="transfer", correlation_id="TRF001",
                       extra={"minor_units": 30000})
        record = caplog.records[-1]
        assert record.account_id == "123456"
        assert record.correlation_id == "TRF001"
        assert record.extra == {"minor_units": 30000}

    def test_operations_log_without_credentials(self, caplog):
        with caplog.at_level(logging.INFO, logger="atm_ledger"):
            account = Account("123456", "Rajesh Kumar", "1234",
                              opening_balance=Money(5000000))
            account.deposit(Money(50000))
            account.change_credential("1234", "9876")

        actions = [getattr(r, "action", None) for r in caplog.records]
        assert "deposit" in actions
        assert "change_credential" in actions
        for record in caplog.records:
            assert "9876" not in record.getMessage()
            assert "9876" not in str(getattr(record, "extra", ""))
