"""
Utility functions and helper modules.

This module provides common utility functions for form validation,
phone masking, age-bracket handling and configuration management.
"""

from .datetime_utils import (
    birth_date_from_age_bracket,
    format_age_bracket,
    parse_age_bracket,
)

from .validation import (
    ValidationError,
    ValidationResult,
    fold_text,
    digits_only,
    format_br_phone,
    is_blank,
    validate_required,
    validate_choice,
)

from .config import (
    ConfigError,
    LogLevel,
    FanOutPolicy,
    WizardSettings,
    EnvironmentConfig,
    DatabaseURLValidator,
    LoggingConfigurator,
    DEFAULT_BREED_PLACEHOLDER,
)

__all__ = [
    # DateTime utilities
    "birth_date_from_age_bracket",
    "format_age_bracket",
    "parse_age_bracket",
    # Validation helpers
    "ValidationError",
    "ValidationResult",
    "fold_text",
    "digits_only",
    "format_br_phone",
    "is_blank",
    "validate_required",
    "validate_choice",
    # Configuration utilities
    "ConfigError",
    "LogLevel",
    "FanOutPolicy",
    "WizardSettings",
    "EnvironmentConfig",
    "DatabaseURLValidator",
    "LoggingConfigurator",
    "DEFAULT_BREED_PLACEHOLDER",
]
