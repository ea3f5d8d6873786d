"""
Custom exceptions for the petshop core package.

This module defines the exception hierarchy and custom exceptions
used throughout the onboarding flow and its persistence adapter.
"""

from .core_exceptions import (  # Utility functions
    ConfigurationException,
    ConnectionException,
    DatabaseException,
    DependentCreationException,
    ParentCreationException,
    ParentRecordException,
    PetShopException,
    StageValidationException,
    SubmissionException,
    SubmissionPreconditionException,
    TransactionException,
    ValidationException,
    create_error_response,
    format_validation_errors,
    log_exception_context,
)

__all__ = [
    # Exception classes
    "PetShopException",
    "DatabaseException",
    "ConnectionException",
    "TransactionException",
    "ValidationException",
    "StageValidationException",
    "SubmissionPreconditionException",
    "SubmissionException",
    "ParentCreationException",
    "ParentRecordException",
    "DependentCreationException",
    "ConfigurationException",
    # Utility functions
    "format_validation_errors",
    "create_error_response",
    "log_exception_context",
]
