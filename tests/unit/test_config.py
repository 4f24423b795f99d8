"""
Unit tests for config module.
"""

import pytest

from rentestimate.config import MAX_COMPARABLES, get_config, reset_config
from rentestimate.exceptions import ConfigurationError


class TestConfig:
    """Tests for environment-driven configuration."""

    def test_defaults(self, isolated_config):
        assert isolated_config.model_cache.failure_cooldown_seconds == 300
        assert isolated_config.model_cache.load_wait_timeout == 10
        assert isolated_config.estimation.comparables_limit == MAX_COMPARABLES
        assert isolated_config.artifacts.model_key == "price-prediction/model.joblib"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("RENTESTIMATE_MODEL_COOLDOWN_SECONDS", "60")
        monkeypatch.setenv("RENTESTIMATE_COMPARABLES_LIMIT", "3")
        reset_config()

        config = get_config()
        assert config.model_cache.failure_cooldown_seconds == 60
        assert config.estimation.comparables_limit == 3

    def test_comparables_limit_clamped(self, monkeypatch):
        monkeypatch.setenv("RENTESTIMATE_COMPARABLES_LIMIT", "50")
        reset_config()
        assert get_config().estimation.comparables_limit == MAX_COMPARABLES

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("RENTESTIMATE_LOG_LEVEL", "chatty")
        reset_config()
        assert get_config().logging.level == "INFO"

    def test_artifact_paths(self, isolated_config):
        assert isolated_config.artifacts.metadata_path.name == "metadata.json"
        assert isolated_config.artifacts.model_path.parent.name == "price-prediction"

    @pytest.mark.parametrize("name", [
        "RENTESTIMATE_MODEL_COOLDOWN_SECONDS",
        "RENTESTIMATE_COMPARABLES_LIMIT",
        "RENTESTIMATE_API_PORT",
    ])
    def test_non_numeric_value_raises(self, monkeypatch, name):
        monkeypatch.setenv(name, "soon")
        reset_config()

        with pytest.raises(ConfigurationError) as exc_info:
            get_config()
        assert name in exc_info.value.message
