"""Tests for configuration loading and validation."""

from decimal import Decimal
from pathlib import Path

import pytest
from pydantic import ValidationError

from market_analytics.config import (
    AnalyticsConfig,
    AppConfig,
    ConfigLoadError,
    ConfigLoader,
    IndexerConfig,
    InjectiveNetwork,
    LogFormat,
    LoggingConfig,
    load_config,
)

ENV_VARS = ("REDIS_URL", "INJ_NETWORK", "INDEXER_URL", "LOG_LEVEL", "PORT", "CONFIG_PATH")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestModels:
    def test_defaults(self):
        config = AppConfig()

        assert config.analytics.cache_ttl_seconds == 30
        assert config.analytics.default_trade_limit == 50
        assert config.analytics.max_trade_limit == 200
        assert config.analytics.whale_threshold_ratio == Decimal("0.05")
        assert config.analytics.anomaly_zscore == Decimal("2")
        assert config.analytics.unusual_imbalance == Decimal("0.35")
        assert config.api.port == 3000
        assert config.indexer.network is InjectiveNetwork.MAINNET

    def test_float_thresholds_become_exact_decimals(self):
        config = AnalyticsConfig(unusual_imbalance=0.35)

        assert config.unusual_imbalance == Decimal("0.35")

    def test_default_limit_above_max_rejected(self):
        with pytest.raises(ValidationError):
            AnalyticsConfig(default_trade_limit=300, max_trade_limit=200)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            AnalyticsConfig(whale_ratio=0.1)

    def test_unknown_network_falls_back_to_mainnet(self):
        assert IndexerConfig(network="moonnet").network is InjectiveNetwork.MAINNET

    def test_network_case_insensitive(self):
        assert IndexerConfig(network="TESTNET").network is InjectiveNetwork.TESTNET

    def test_log_level_case_insensitive(self):
        assert LoggingConfig(level="debug").level.value == "DEBUG"


class TestLoader:
    def test_loads_yaml(self, tmp_path):
        (tmp_path / "analytics.yaml").write_text(
            "analytics:\n"
            "  cache_ttl_seconds: 10\n"
            "indexer:\n"
            "  network: devnet\n"
            "logging:\n"
            "  format: console\n"
        )

        config = ConfigLoader(tmp_path).load()

        assert config.analytics.cache_ttl_seconds == 10
        assert config.indexer.network is InjectiveNetwork.DEVNET
        assert config.logging.format is LogFormat.CONSOLE

    def test_missing_file_gives_defaults(self, tmp_path):
        assert ConfigLoader(tmp_path).load() == AppConfig()

    def test_empty_file_gives_defaults(self, tmp_path):
        (tmp_path / "analytics.yaml").write_text("")

        assert ConfigLoader(tmp_path).load() == AppConfig()

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ConfigLoadError):
            ConfigLoader(tmp_path / "absent")

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "analytics.yaml").write_text("analytics: [unclosed\n")

        with pytest.raises(ConfigLoadError) as exc_info:
            ConfigLoader(tmp_path).load()

        assert exc_info.value.file_path == tmp_path / "analytics.yaml"

    def test_non_mapping_yaml(self, tmp_path):
        (tmp_path / "analytics.yaml").write_text("- a\n- b\n")

        with pytest.raises(ConfigLoadError):
            ConfigLoader(tmp_path).load()

    def test_validation_failure(self, tmp_path):
        (tmp_path / "analytics.yaml").write_text("analytics:\n  cache_ttl_seconds: 0\n")

        with pytest.raises(ConfigLoadError):
            ConfigLoader(tmp_path).load()

    def test_env_overrides(self, tmp_path, monkeypatch):
        (tmp_path / "analytics.yaml").write_text("redis:\n  url: redis://file:6379\n")
        monkeypatch.setenv("REDIS_URL", "redis://env:6379")
        monkeypatch.setenv("INJ_NETWORK", "testnet")
        monkeypatch.setenv("INDEXER_URL", "http://indexer.local")
        monkeypatch.setenv("LOG_LEVEL", "warning")
        monkeypatch.setenv("PORT", "8080")

        config = ConfigLoader(tmp_path).load()

        assert config.redis.url == "redis://env:6379"
        assert config.indexer.network is InjectiveNetwork.TESTNET
        assert config.indexer.resolved_base_url == "http://indexer.local"
        assert config.logging.level.value == "WARNING"
        assert config.api.port == 8080


class TestLoadConfig:
    def test_missing_directory_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent") == AppConfig()

    def test_config_path_env(self, tmp_path, monkeypatch):
        (tmp_path / "analytics.yaml").write_text("api:\n  port: 4000\n")
        monkeypatch.setenv("CONFIG_PATH", str(tmp_path))

        assert load_config().api.port == 4000

    def test_shipped_config_is_valid(self):
        config_dir = Path(__file__).resolve().parent.parent / "config"

        assert load_config(config_dir) == AppConfig()
