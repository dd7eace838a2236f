import json
import logging

import pytest

from contract_naming.shared.logging import (
    ContextAdapter,
    HumanReadableFormatter,
    LoggingConfig,
    LogLevel,
    StructuredFormatter,
    format_error_for_user,
    get_user_friendly_error,
    sanitize_dict,
    sanitize_message,
)

ADDRESS = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
PRIVATE_KEY = "ab" * 32


def make_record(message, context=None):
    record = logging.LogRecord("contract_naming.test", logging.INFO, __file__, 1, message, None, None)
    if context is not None:
        record.context = context
    return record


@pytest.mark.unit
class TestSanitization:
    def test_private_key_redacted(self):
        result = sanitize_message(f"private_key={PRIVATE_KEY}")
        assert PRIVATE_KEY not in result
        assert "[REDACTED]" in result

    def test_password_redacted(self):
        assert sanitize_message("password: hunter2") == "password: [REDACTED]"

    def test_addresses_preserved_by_default(self):
        assert sanitize_message(f"owner {ADDRESS}") == f"owner {ADDRESS}"

    def test_addresses_redacted_on_request(self):
        result = sanitize_message(f"owner {ADDRESS}", preserve_addresses=False)
        assert result == "owner [ADDRESS_REDACTED]"

    def test_sanitize_dict(self):
        result = sanitize_dict({"mnemonic": "words", "nested": {"password": "x"}, "chain": 1})
        assert result == {"mnemonic": "[REDACTED]", "nested": {"password": "[REDACTED]"}, "chain": 1}


@pytest.mark.unit
class TestUserFriendlyErrors:
    def test_rejection(self):
        message, action = get_user_friendly_error("MetaMask Tx Signature: User denied transaction")
        assert message == "The request was rejected in the wallet."
        assert action is not None

    def test_chain_switch_timeout(self):
        message, _ = get_user_friendly_error(
            TimeoutError("Chain switch timeout - chain did not change to Base")
        )
        assert message == "The wallet did not switch networks in time."

    def test_zero_balance(self):
        message = format_error_for_user("Zero balance on Optimism Sepolia")
        assert message.startswith("Insufficient balance")

    def test_unknown(self):
        assert get_user_friendly_error("something odd") == ("An unexpected error occurred.", None)


@pytest.mark.unit
class TestFormatters:
    def test_structured_includes_context(self):
        formatter = StructuredFormatter()
        output = json.loads(formatter.format(make_record("planned", {"steps": 4})))
        assert output["message"] == "planned"
        assert output["context"] == {"steps": 4}
        assert output["level"] == "INFO"

    def test_human_readable_sanitizes(self):
        formatter = HumanReadableFormatter()
        output = formatter.format(make_record(f"private_key={PRIVATE_KEY}"))
        assert PRIVATE_KEY not in output
        assert "contract_naming.test - INFO" in output

    def test_context_adapter_merges(self):
        adapter = ContextAdapter(logging.getLogger("contract_naming.test"), {"chain": 1})
        _, kwargs = adapter.with_context(step=2).process("msg", {})
        assert kwargs["extra"]["context"] == {"chain": 1, "step": 2}


@pytest.mark.unit
class TestLoggingConfig:
    def test_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CONTRACT_NAMING_LOG_LEVEL", "debug")
        monkeypatch.setenv("CONTRACT_NAMING_LOG_FORMAT", "json")
        monkeypatch.setenv("CONTRACT_NAMING_DIR", str(tmp_path))
        config = LoggingConfig.from_environment()
        assert config.log_level == LogLevel.DEBUG
        assert config.log_format == "json"
        assert config.log_dir == tmp_path

    def test_invalid_level_defaults_to_info(self, monkeypatch):
        monkeypatch.setenv("CONTRACT_NAMING_LOG_LEVEL", "loud")
        assert LoggingConfig.from_environment().log_level == LogLevel.INFO
