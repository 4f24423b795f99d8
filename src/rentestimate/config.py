"""
Centralized Configuration Module

Provides configuration classes and environment variable loading for all components.

Usage:
    from rentestimate.config import get_config

    config = get_config()
    artifact_dir = config.artifacts.base_dir
    cooldown = config.model_cache.failure_cooldown_seconds
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from rentestimate.exceptions import ConfigurationError

# Load .env file if present
load_dotenv()

# Upper bound on comparables carried in a result
MAX_COMPARABLES = 5


def _get_project_root() -> Path:
    """Get the project root directory."""
    # config.py -> rentestimate -> src -> project_root
    current = Path(__file__).resolve()
    return current.parent.parent.parent


def _env_number(name: str, default: str, cast=float):
    """Read a numeric environment variable.

    Raises:
        ConfigurationError: If the value cannot be parsed.
    """
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigurationError(f"Invalid value for {name}: {raw!r}") from e


def _resolve(path: str) -> str:
    if not os.path.isabs(path):
        return str(_get_project_root() / path)
    return path


@dataclass
class DatabaseConfig:
    """Listings database configuration."""

    path: str = field(default_factory=lambda: os.getenv(
        "RENTESTIMATE_DB_PATH",
        str(_get_project_root() / "rentestimate.db")
    ))

    def __post_init__(self):
        self.path = _resolve(self.path)


@dataclass
class ArtifactConfig:
    """Location of the trained model artifact and its metadata."""

    base_dir: str = field(default_factory=lambda: os.getenv(
        "RENTESTIMATE_ARTIFACT_DIR",
        str(_get_project_root() / "artifacts")
    ))
    model_key: str = field(default_factory=lambda: os.getenv(
        "RENTESTIMATE_MODEL_KEY", "price-prediction/model.joblib"
    ))
    metadata_key: str = field(default_factory=lambda: os.getenv(
        "RENTESTIMATE_METADATA_KEY", "price-prediction/metadata.json"
    ))

    def __post_init__(self):
        self.base_dir = _resolve(self.base_dir)

    @property
    def model_path(self) -> Path:
        """Path to the serialized model inside the artifact directory."""
        return Path(self.base_dir) / self.model_key

    @property
    def metadata_path(self) -> Path:
        """Path to the model metadata inside the artifact directory."""
        return Path(self.base_dir) / self.metadata_key


@dataclass
class ModelCacheConfig:
    """Model cache timing configuration."""

    failure_cooldown_seconds: float = field(default_factory=lambda: _env_number(
        "RENTESTIMATE_MODEL_COOLDOWN_SECONDS", "300"
    ))
    load_wait_timeout: float = field(default_factory=lambda: _env_number(
        "RENTESTIMATE_MODEL_WAIT_TIMEOUT", "10"
    ))


@dataclass
class EstimationConfig:
    """Estimation service configuration."""

    comparables_limit: int = field(default_factory=lambda: _env_number(
        "RENTESTIMATE_COMPARABLES_LIMIT", str(MAX_COMPARABLES), int
    ))
    max_workers: int = field(default_factory=lambda: _env_number(
        "RENTESTIMATE_ESTIMATION_WORKERS", "4", int
    ))

    def __post_init__(self):
        if self.comparables_limit <= 0 or self.comparables_limit > MAX_COMPARABLES:
            self.comparables_limit = MAX_COMPARABLES
        self.max_workers = max(1, self.max_workers)


@dataclass
class APIConfig:
    """API server configuration."""

    host: str = field(default_factory=lambda: os.getenv(
        "RENTESTIMATE_API_HOST", "127.0.0.1"
    ))
    port: int = field(default_factory=lambda: _env_number(
        "RENTESTIMATE_API_PORT", "5000", int
    ))
    debug: bool = field(default_factory=lambda: os.getenv(
        "RENTESTIMATE_DEBUG", "false"
    ).lower() in ("true", "1", "yes"))


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv(
        "RENTESTIMATE_LOG_LEVEL", "INFO"
    ).upper())
    log_file: Optional[str] = field(default_factory=lambda: os.getenv(
        "RENTESTIMATE_LOG_FILE"
    ))

    def __post_init__(self):
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.level not in valid_levels:
            self.level = "INFO"


@dataclass
class Config:
    """Main configuration container."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    artifacts: ArtifactConfig = field(default_factory=ArtifactConfig)
    model_cache: ModelCacheConfig = field(default_factory=ModelCacheConfig)
    estimation: EstimationConfig = field(default_factory=EstimationConfig)
    api: APIConfig = field(default_factory=APIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Singleton instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config: The application configuration.
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the configuration (useful for testing)."""
    global _config
    _config = None
