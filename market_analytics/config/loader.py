"""
Configuration loader for YAML-based application configuration.

Configuration file expected:
    - config/analytics.yaml: analytics, indexer, redis, api and logging sections

Every section is optional; missing sections and a missing file fall back to
model defaults.

Environment variables override:
    - REDIS_URL: Redis connection URL
    - INJ_NETWORK: Injective network (mainnet, testnet, devnet, local)
    - INDEXER_URL: Indexer base URL
    - LOG_LEVEL: Application log level
    - PORT: HTTP API port
    - CONFIG_PATH: Configuration directory (used by load_config)

Example:
    >>> from market_analytics.config.loader import load_config
    >>> config = load_config("config")
    >>> config.analytics.max_trade_limit
    200
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
import yaml
from pydantic import ValidationError

from market_analytics.config.models import AppConfig

logger = structlog.get_logger(__name__)

CONFIG_FILENAME = "analytics.yaml"


class ConfigLoadError(Exception):
    """
    Raised when configuration loading fails.

    Attributes:
        message: Error message describing what went wrong.
        file_path: Path to the file that caused the error, if applicable.
        cause: Original exception that caused the error, if any.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        cause: Optional[Exception] = None,
    ):
        self.message = message
        self.file_path = file_path
        self.cause = cause
        super().__init__(message)


class ConfigLoader:
    """
    Loads and validates application configuration from a YAML file.

    Expects the following directory structure:
        config/
        └── analytics.yaml    - Analytics thresholds, connections, API, logging

    Example:
        >>> loader = ConfigLoader("config")
        >>> config = loader.load()
        >>> config.indexer.network
        <InjectiveNetwork.MAINNET: 'mainnet'>
    """

    def __init__(self, config_dir: Path | str = "config"):
        """
        Initialize config loader.

        Args:
            config_dir: Path to configuration directory (default: 'config').

        Raises:
            ConfigLoadError: If config directory does not exist.
        """
        self.config_dir = Path(config_dir)
        if not self.config_dir.exists():
            raise ConfigLoadError(
                f"Configuration directory not found: {self.config_dir}",
                file_path=self.config_dir,
            )
        if not self.config_dir.is_dir():
            raise ConfigLoadError(
                f"Configuration path is not a directory: {self.config_dir}",
                file_path=self.config_dir,
            )

    def _load_yaml(self, filename: str) -> Dict[str, Any]:
        """
        Load a YAML file from the config directory.

        Args:
            filename: Name of YAML file (e.g., 'analytics.yaml').

        Returns:
            Dict containing parsed YAML content, empty if the file is missing
            or empty.

        Raises:
            ConfigLoadError: If the file is unreadable, invalid YAML, or not
                a mapping.
        """
        file_path = self.config_dir / filename
        if not file_path.exists():
            logger.info("config_file_missing_using_defaults", file=str(file_path))
            return {}

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigLoadError(
                f"Invalid YAML syntax in {file_path}: {e}",
                file_path=file_path,
                cause=e,
            ) from e
        except OSError as e:
            raise ConfigLoadError(
                f"Error reading {file_path}: {e}",
                file_path=file_path,
                cause=e,
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigLoadError(
                f"Configuration file must contain a mapping: {file_path}",
                file_path=file_path,
            )
        return data

    @staticmethod
    def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Overlay environment variables onto raw configuration data.

        Args:
            data: Raw configuration mapping from YAML.

        Returns:
            Dict[str, Any]: New mapping with overrides applied.
        """
        merged = {section: dict(values or {}) for section, values in data.items()}

        redis_url = os.getenv("REDIS_URL")
        if redis_url:
            merged.setdefault("redis", {})["url"] = redis_url

        network = os.getenv("INJ_NETWORK")
        if network:
            merged.setdefault("indexer", {})["network"] = network

        indexer_url = os.getenv("INDEXER_URL")
        if indexer_url:
            merged.setdefault("indexer", {})["base_url"] = indexer_url

        log_level = os.getenv("LOG_LEVEL")
        if log_level:
            merged.setdefault("logging", {})["level"] = log_level

        port = os.getenv("PORT")
        if port:
            merged.setdefault("api", {})["port"] = port

        return merged

    def load(self) -> AppConfig:
        """
        Load complete application configuration.

        Returns:
            AppConfig: Validated configuration with environment overrides.

        Raises:
            ConfigLoadError: If the file is invalid or validation fails.
        """
        file_path = self.config_dir / CONFIG_FILENAME
        data = self._apply_env_overrides(self._load_yaml(CONFIG_FILENAME))

        try:
            config = AppConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigLoadError(
                f"Invalid configuration: {e}",
                file_path=file_path,
                cause=e,
            ) from e

        logger.info(
            "config_loaded",
            config_dir=str(self.config_dir),
            network=config.indexer.network.value,
        )
        return config


def load_config(config_dir: Path | str | None = None) -> AppConfig:
    """
    Load configuration from ``config_dir``, CONFIG_PATH, or ./config.

    A missing directory is not an error here: defaults plus environment
    overrides are returned, so the service runs without a config checkout.

    Args:
        config_dir: Configuration directory. Defaults to CONFIG_PATH or 'config'.

    Returns:
        AppConfig: Validated configuration.

    Raises:
        ConfigLoadError: If a present configuration file is invalid.
    """
    path = Path(config_dir or os.getenv("CONFIG_PATH", "config"))
    if not path.is_dir():
        logger.info("config_dir_missing_using_defaults", config_dir=str(path))
        data = ConfigLoader._apply_env_overrides({})
        try:
            return AppConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigLoadError(f"Invalid configuration: {e}", cause=e) from e

    return ConfigLoader(path).load()
