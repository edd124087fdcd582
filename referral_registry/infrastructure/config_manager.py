"""Configuration Manager for the Referral Registry server.

This module loads server settings (bind address, port, logging and CORS)
from environment variables into a validated Pydantic model.

Architecture:
    - Infrastructure layer, isolated from the domain
    - Type-safe configuration using Pydantic models
    - Fail-fast validation: a bad PORT stops startup instead of a late crash
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from referral_registry.domain.ports import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_LOG_LEVEL = "INFO"

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ServerConfig(BaseModel):
    """HTTP server configuration.

    Parameters:
        host: Interface to bind
        port: TCP port to listen on
        log_level: Root logging level
        json_logs: Emit structured JSON log lines instead of plain text
        cors_origins: Origins allowed by CORS (``["*"]`` allows any)
    """

    host: str = Field(default=DEFAULT_HOST, description="Bind address")
    port: int = Field(default=DEFAULT_PORT, description="Listening port")
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, description="Logging level")
    json_logs: bool = Field(default=False, description="Structured JSON logs")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is a usable TCP port."""
        if not 1 <= v <= 65535:
            raise ValueError(f"Port must be between 1 and 65535, got {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        if v.upper() not in LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {v}. Supported: {LOG_LEVELS}")
        return v.upper()

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v: Any) -> Any:
        """Accept a comma-separated string as well as a list."""
        if isinstance(v, str):
            origins = [origin.strip() for origin in v.split(",") if origin.strip()]
            return origins or ["*"]
        return v


class ConfigManager:
    """Loads and validates server configuration.

    Example Usage:
        ```python
        config = ConfigManager.from_environment().get_server_config()
        uvicorn.run(app, host=config.host, port=config.port)
        ```
    """

    def __init__(self, config_data: Dict[str, Any]):
        self._config_data = config_data
        self._server_config: Optional[ServerConfig] = None

    @classmethod
    def from_environment(cls, env_file: Optional[Path] = None) -> "ConfigManager":
        """Load configuration from environment variables.

        Environment Variables:
            - PORT: Listening port (default 3000)
            - HOST: Bind address (default 0.0.0.0)
            - LOG_LEVEL: Logging level (default INFO)
            - JSON_LOGS: "true" for JSON log lines
            - CORS_ORIGINS: Comma-separated allowed origins (default "*")

        A ``.env`` file in the working directory (or ``env_file``) is loaded
        first; variables already set in the environment win.
        """
        env_path = env_file or Path.cwd() / ".env"
        if env_path.exists():
            load_dotenv(env_path, override=False)
            logger.debug(f"Loaded environment variables from {env_path}")

        config_data: Dict[str, Any] = {}
        env_map = {
            "host": "HOST",
            "port": "PORT",
            "log_level": "LOG_LEVEL",
            "cors_origins": "CORS_ORIGINS",
        }
        for key, env_var in env_map.items():
            value = os.getenv(env_var)
            if value:
                config_data[key] = value

        json_logs = os.getenv("JSON_LOGS")
        if json_logs is not None:
            config_data["json_logs"] = json_logs.lower() == "true"

        return cls(config_data)

    def get_server_config(self) -> ServerConfig:
        """Get validated server configuration.

        Raises:
            ConfigurationError: If any setting is invalid
        """
        if self._server_config is None:
            try:
                self._server_config = ServerConfig(**self._config_data)
            except ValidationError as e:
                first = e.errors()[0]
                setting = str(first["loc"][0]) if first.get("loc") else None
                raise ConfigurationError(
                    f"Invalid server configuration: {first['msg']}", setting=setting
                ) from e
        return self._server_config


# ============================================================================
# Convenience Functions
# ============================================================================

@lru_cache()
def get_server_config() -> ServerConfig:
    """Server configuration loaded once from the environment.

    Raises:
        ConfigurationError: If the environment holds an invalid value
    """
    return ConfigManager.from_environment().get_server_config()
