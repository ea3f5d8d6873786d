"""
Configuration management utilities.

This module provides environment variable handling with type conversion,
database URL validation, logging configuration utilities, and the settings
that control how the onboarding wizard submits a family.
"""

import logging
import logging.config
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from urllib.parse import parse_qs, urlparse


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


class LogLevel(Enum):
    """Enumeration for log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class FanOutPolicy(Enum):
    """How the concurrent pet creations of a submission are joined."""

    # Reject the batch on the first failing pet
    FAIL_FAST = "fail_fast"
    # Wait for every pet, then report created and failed ones
    SETTLE_ALL = "settle_all"


DEFAULT_BREED_PLACEHOLDER = "Não informado"


@dataclass
class WizardSettings:
    """Settings for the family onboarding wizard."""

    organization_id: Optional[str] = None
    fan_out_policy: FanOutPolicy = FanOutPolicy.FAIL_FAST
    resume_partial_submissions: bool = False
    default_breed: str = DEFAULT_BREED_PLACEHOLDER

    @classmethod
    def from_environment(cls, prefix: str = "PETSHOP_") -> "WizardSettings":
        """
        Build settings from environment variables.

        Recognised variables (with the default prefix):
            PETSHOP_ORGANIZATION_ID, PETSHOP_FANOUT_POLICY,
            PETSHOP_RESUME_PARTIAL_SUBMISSIONS, PETSHOP_DEFAULT_BREED

        Raises:
            ConfigError: If a variable holds an invalid value
        """
        policy_value = EnvironmentConfig.get_str(
            f"{prefix}FANOUT_POLICY", FanOutPolicy.FAIL_FAST.value
        )
        try:
            policy = FanOutPolicy((policy_value or "").strip().lower())
        except ValueError:
            allowed = ", ".join(p.value for p in FanOutPolicy)
            raise ConfigError(
                f"Environment variable '{prefix}FANOUT_POLICY' must be one of: "
                f"{allowed}, got: {policy_value}"
            )

        default_breed = EnvironmentConfig.get_str(
            f"{prefix}DEFAULT_BREED", DEFAULT_BREED_PLACEHOLDER
        )

        return cls(
            organization_id=EnvironmentConfig.get_str(f"{prefix}ORGANIZATION_ID"),
            fan_out_policy=policy,
            resume_partial_submissions=bool(
                EnvironmentConfig.get_bool(
                    f"{prefix}RESUME_PARTIAL_SUBMISSIONS", default=False
                )
            ),
            default_breed=default_breed or DEFAULT_BREED_PLACEHOLDER,
        )


class EnvironmentConfig:
    """Utility class for handling environment variables with type conversion."""

    @staticmethod
    def get_str(
        key: str, default: Optional[str] = None, required: bool = False
    ) -> Optional[str]:
        """
        Get a string environment variable.

        Args:
            key: Environment variable key
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            String value or default

        Raises:
            ConfigError: If required variable is missing
        """
        value = os.getenv(key, default)

        if required and value is None:
            raise ConfigError(f"Required environment variable '{key}' is not set")

        return value

    @staticmethod
    def get_int(
        key: str, default: Optional[int] = None, required: bool = False
    ) -> Optional[int]:
        """
        Get an integer environment variable.

        Raises:
            ConfigError: If required variable is missing or invalid
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(f"Required environment variable '{key}' is not set")
            return default

        try:
            return int(value)
        except ValueError:
            raise ConfigError(
                f"Environment variable '{key}' must be an integer, got: {value}"
            )

    @staticmethod
    def get_bool(
        key: str, default: Optional[bool] = None, required: bool = False
    ) -> Optional[bool]:
        """
        Get a boolean environment variable.

        Raises:
            ConfigError: If required variable is missing
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(f"Required environment variable '{key}' is not set")
            return default

        return value.lower() in ("true", "1", "yes", "on", "enabled")

    @staticmethod
    def get_list(
        key: str,
        separator: str = ",",
        default: Optional[List[str]] = None,
        required: bool = False,
    ) -> Optional[List[str]]:
        """
        Get a list environment variable.

        Raises:
            ConfigError: If required variable is missing
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(f"Required environment variable '{key}' is not set")
            return default or []

        return [item.strip() for item in value.split(separator) if item.strip()]


class DatabaseURLValidator:
    """Utility class for validating database URLs."""

    SUPPORTED_DRIVERS = {
        "postgresql": ["postgresql", "postgresql+asyncpg"],
        "sqlite": ["sqlite+aiosqlite"],
    }

    @classmethod
    def validate_url(cls, url: str) -> Dict[str, Any]:
        """
        Validate a database URL and return parsed components.

        Args:
            url: Database URL to validate

        Returns:
            Dictionary with validation results and parsed components

        Raises:
            ConfigError: If URL is invalid
        """
        if not url:
            raise ConfigError("Database URL cannot be empty")

        parsed = urlparse(url)

        if not parsed.scheme:
            raise ConfigError(
                "Database URL must include a scheme (e.g., postgresql://)"
            )

        supported = [d for drivers in cls.SUPPORTED_DRIVERS.values() for d in drivers]
        if parsed.scheme not in supported:
            raise ConfigError(
                f"Unsupported database driver '{parsed.scheme}'. Supported: {', '.join(supported)}"
            )

        is_sqlite = parsed.scheme.startswith("sqlite")

        if not is_sqlite and not parsed.hostname:
            raise ConfigError("Database URL must include a hostname")

        if not parsed.path.lstrip("/"):
            raise ConfigError("Database URL must include a database name")

        return {
            "valid": True,
            "scheme": parsed.scheme,
            "hostname": parsed.hostname,
            "port": parsed.port,
            "database": parsed.path.lstrip("/"),
            "username": parsed.username,
            "password": parsed.password,
            "query": dict(parse_qs(parsed.query)),
        }


class LoggingConfigurator:
    """Utility class for configuring logging."""

    DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @staticmethod
    def configure_basic_logging(
        level: Union[str, LogLevel] = LogLevel.INFO,
        format_string: Optional[str] = None,
        log_file: Optional[str] = None,
    ) -> None:
        """
        Configure basic logging for the application.

        Args:
            level: Logging level
            format_string: Custom format string
            log_file: Optional log file path
        """
        if isinstance(level, LogLevel):
            level = level.value

        basic_config_args: Dict[str, Any] = {
            "level": level,
            "format": format_string or LoggingConfigurator.DEFAULT_FORMAT,
            "datefmt": "%Y-%m-%d %H:%M:%S",
        }

        if log_file:
            basic_config_args["filename"] = log_file
            basic_config_args["filemode"] = "a"

        logging.basicConfig(**basic_config_args)

    @staticmethod
    def configure_structured_logging(
        config_dict: Optional[Dict[str, Any]] = None, config_file: Optional[str] = None
    ) -> None:
        """
        Configure structured logging using a dictionary or file.

        Args:
            config_dict: Logging configuration dictionary
            config_file: Path to logging configuration file
        """
        if config_file and Path(config_file).exists():
            logging.config.fileConfig(config_file)
        elif config_dict:
            logging.config.dictConfig(config_dict)
        else:
            logging.config.dictConfig(LoggingConfigurator.default_config())

    @staticmethod
    def default_config() -> Dict[str, Any]:
        """Default dictConfig with a console handler for the package logger."""
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {"format": LoggingConfigurator.DEFAULT_FORMAT},
                "detailed": {
                    "format": "%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s - %(message)s"
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": "INFO",
                    "formatter": "standard",
                    "stream": "ext://sys.stdout",
                }
            },
            "loggers": {
                "petshop_core": {
                    "level": "INFO",
                    "handlers": ["console"],
                    "propagate": False,
                }
            },
            "root": {"level": "WARNING", "handlers": ["console"]},
        }
