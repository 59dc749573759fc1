"""
Configuration management for Guichet.

Hybrid configuration system using YAML files and environment variables.
Priority: Environment variables > YAML config > Pydantic defaults
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PORT = "8080"
DEFAULT_GRACE_PERIOD = 60.0


class Settings(BaseSettings):
    """
    Guichet configuration schema.

    Loads configuration from:
    1. Environment variables (highest priority)
    2. YAML configuration files
    3. Pydantic defaults (lowest priority)

    Configuration files:
        - config/default.yaml: Base defaults
        - config/production.yaml: Production overrides
        - config/development.yaml: Development overrides
        - config/test.yaml: Test overrides
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # Application
    APP_NAME: str = "Guichet"
    ENV: str = Field(default="development", description="Environment name")

    # HTTP listener
    API_HOST: str = Field(default="0.0.0.0", description="Bind host")
    PORT: str = Field(
        default=DEFAULT_PORT,
        description="Bind port (checked for presence only)",
    )

    # CORS
    CORS_ALLOWED_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:8080"],
        description="Origins allowed to make credentialed requests",
    )

    # Graceful Shutdown
    SHUTDOWN_GRACE_PERIOD: float = Field(
        default=DEFAULT_GRACE_PERIOD,
        gt=0,
        description="Maximum seconds to wait for in-flight requests",
    )

    # GraphQL
    QUERY_PATH: str = Field(default="/query")
    PLAYGROUND_TITLE: str = Field(default="GraphQL playground")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_JSON: Optional[bool] = Field(
        default=None,
        description="Force JSON logs on/off (default: JSON in production)",
    )
    ACCESS_LOG_LEVEL: str = Field(default="INFO")

    @field_validator("PORT", mode="before")
    @classmethod
    def coerce_port(cls, v: Any) -> Any:
        """Accept integer ports from YAML; blank means unset."""
        if isinstance(v, int):
            return str(v)
        if isinstance(v, str) and not v.strip():
            return DEFAULT_PORT
        return v

    @field_validator("LOG_LEVEL", "ACCESS_LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"Invalid log level. Must be one of: {allowed}")
        return v_upper

    @field_validator("QUERY_PATH")
    @classmethod
    def validate_query_path(cls, v: str) -> str:
        """Query path must be absolute and must not shadow the playground."""
        if not v.startswith("/") or v == "/":
            raise ValueError("QUERY_PATH must start with '/' and not be '/'")
        return v

    @property
    def listen_address(self) -> str:
        """Host and port the listener binds to."""
        return f"{self.API_HOST}:{self.PORT}"

    @property
    def json_logs(self) -> bool:
        """Whether logs are emitted as JSON."""
        if self.LOG_JSON is not None:
            return self.LOG_JSON
        return self.ENV == "production"

    @property
    def access_log_level(self) -> int:
        """Access log severity as a logging level number."""
        return getattr(logging, self.ACCESS_LOG_LEVEL)


# Repository root: src/guichet/config/settings.py -> 4 levels up
PROJECT_ROOT = Path(__file__).resolve().parents[3]
CONFIG_DIR = PROJECT_ROOT / "config"

# ENV -> (.env file, YAML overrides); unknown names use development
ENVIRONMENT_FILES = {
    "production": (".env.production", "production.yaml"),
    "development": (".env.development", "development.yaml"),
    "test": (".env.test", "test.yaml"),
}


def _read_yaml(path: Path) -> Dict[str, Any]:
    """Mapping stored in a YAML file; empty if the file is missing or blank."""
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_config(
    config_file: Optional[str] = None,
    env_file: Optional[str] = None,
    env: Optional[str] = None,
) -> Settings:
    """
    Resolve settings once, before the listener starts.

    YAML values are layered default.yaml < {env}.yaml, then any key also
    present in the process environment is left for pydantic-settings to
    read from there.

    Args:
        config_file: YAML overrides filename (default per environment)
        env_file: .env filename (default per environment)
        env: Environment name (default: ENV variable, then development)

    Returns:
        Settings instance

    Raises:
        ValidationError: If a configured value is invalid
    """
    environment = env or os.getenv("ENV", "development")
    default_env_file, default_config_file = ENVIRONMENT_FILES.get(
        environment, ENVIRONMENT_FILES["development"]
    )

    # .env must be loaded before os.environ is consulted below
    dotenv_path = PROJECT_ROOT / (env_file or default_env_file)
    if dotenv_path.exists():
        load_dotenv(dotenv_path, override=False)

    values = _read_yaml(CONFIG_DIR / "default.yaml")
    values.update(_read_yaml(CONFIG_DIR / (config_file or default_config_file)))
    values.setdefault("ENV", environment)

    return Settings(
        **{key: value for key, value in values.items() if key not in os.environ}
    )


# Global settings singleton (lazy initialization)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or initialize global settings singleton.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def override_settings(new_settings: Settings) -> None:
    """
    Override global settings (for testing).

    Args:
        new_settings: New Settings instance to use
    """
    global _settings
    _settings = new_settings


def reset_settings() -> None:
    """
    Reset settings to force re-initialization (for testing).

    This allows tests to change environment variables and reload config.
    """
    global _settings
    _settings = None
