"""
Test suite for configuration validation functionality.
Tests the config_validator module and configuration handling.
"""

import logging
from types import SimpleNamespace

import pytest

import config
import config_validator
from error_handler import ConfigurationError

# Set up logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger('test_config_validation')


def make_config(**overrides):
    values = dict(
        graph_output_dir="storage/graphs",
        graph_public_url_prefix="/storage/graphs",
        numeric_threshold=0.5,
        fetch_timeout_seconds=30,
        table_selector="table.wikitable",
        log_level="INFO",
    )
    values.update(overrides)
    return SimpleNamespace(**values)


class TestConfigValidation:
    """Test configuration validation functionality."""

    def test_validate_config_all_present(self):
        assert config_validator.validate_config(make_config()) is True

    def test_missing_output_dir(self):
        with pytest.raises(ConfigurationError):
            config_validator.validate_config(make_config(graph_output_dir=""))

    def test_missing_selector(self):
        with pytest.raises(ConfigurationError):
            config_validator.validate_config(make_config(table_selector=None))

    @pytest.mark.parametrize("threshold", [0, -0.2, 1.5, "abc"])
    def test_invalid_threshold_reset(self, threshold):
        module = make_config(numeric_threshold=threshold)
        config_validator.validate_config(module)
        assert module.numeric_threshold == 0.5

    def test_valid_threshold_kept(self):
        module = make_config(numeric_threshold="0.75")
        config_validator.validate_config(module)
        assert module.numeric_threshold == 0.75

    @pytest.mark.parametrize("timeout", [0, -5, "soon"])
    def test_invalid_timeout_reset(self, timeout):
        module = make_config(fetch_timeout_seconds=timeout)
        config_validator.validate_config(module)
        assert module.fetch_timeout_seconds == 30

    def test_log_level_normalized(self):
        module = make_config(log_level="debug")
        config_validator.validate_config(module)
        assert module.log_level == "DEBUG"

    def test_unknown_log_level_reset(self):
        module = make_config(log_level="LOUD")
        config_validator.validate_config(module)
        assert module.log_level == "INFO"

    def test_url_prefix_trailing_slash(self):
        module = make_config(graph_public_url_prefix="/graphs/")
        config_validator.validate_config(module)
        assert module.graph_public_url_prefix == "/graphs"

    def test_invalid_threshold_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger='table_grapher.config_validator'):
            config_validator.validate_config(make_config(numeric_threshold=2))
        assert "numeric_threshold" in caplog.text


class TestConfigModule:
    def test_defaults_present(self):
        assert config.graph_output_dir
        assert 0 < config.numeric_threshold <= 1
        assert config.fetch_timeout_seconds > 0
        assert config.table_selector

    def test_error_messages_format(self):
        assert "404" in config.ERROR_MESSAGES['fetch_failed'].format(reason="HTTP 404")
        assert "3" in config.ERROR_MESSAGES['empty_extraction'].format(column=3)
