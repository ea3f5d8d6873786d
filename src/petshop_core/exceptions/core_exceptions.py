"""
Core exceptions for the petshop-core package.

This module defines the exception hierarchy and custom exceptions
used throughout the pet-shop onboarding flow.
"""

import logging
import time
import traceback
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse, urlunparse


class PetShopException(Exception):
    """
    Base exception class for all petshop-core package exceptions.

    Provides a consistent interface for error handling across the package.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary format.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "timestamp": time.time(),
        }

    def get_debug_info(self) -> Dict[str, Any]:
        """
        Get detailed debug information for the exception.

        Returns:
            Dictionary with debug information including traceback
        """
        debug_info = self.to_dict()
        formatted = traceback.format_exc()
        debug_info.update(
            {
                "traceback": (
                    formatted if formatted.strip() != "NoneType: None" else None
                ),
                "module": self.__class__.__module__,
                "class_name": self.__class__.__name__,
            }
        )
        return debug_info

    def log_error(
        self, logger: Optional[logging.Logger] = None, level: int = logging.ERROR
    ) -> None:
        """
        Log the exception with appropriate level and context.

        Args:
            logger: Logger instance to use (creates default if None)
            level: Logging level to use
        """
        if logger is None:
            logger = logging.getLogger(__name__)

        log_data = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

        logger.log(
            level,
            f"Exception occurred: {self.message}",
            extra={"exception_data": log_data},
        )

    def __str__(self) -> str:
        """String representation of the exception."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class DatabaseException(PetShopException):
    """Base exception for database-related errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize database exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error details
            original_error: Original exception that caused this error
        """
        super().__init__(message, error_code, details)
        self.original_error = original_error

        if original_error and "original_error" not in self.details:
            self.details["original_error"] = str(original_error)


class ConnectionException(DatabaseException):
    """Exception raised when database connection fails."""

    def __init__(
        self,
        message: str = "Database connection failed",
        database_url: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize connection exception.

        Args:
            message: Error message
            database_url: Database URL (will be sanitized)
            original_error: Original exception
        """
        details = {}
        if database_url:
            details["database_url"] = self._sanitize_url(database_url)

        super().__init__(
            message=message,
            error_code="DATABASE_CONNECTION_ERROR",
            details=details,
            original_error=original_error,
        )

    @staticmethod
    def _sanitize_url(url: str) -> str:
        """Remove credentials from database URL for logging."""
        try:
            parsed = urlparse(url)
            if parsed.hostname is None:
                return urlunparse(parsed)
            netloc = parsed.hostname
            if parsed.port:
                netloc = f"{netloc}:{parsed.port}"
            return urlunparse(parsed._replace(netloc=netloc))
        except (ValueError, AttributeError) as e:
            return f"[URL_PARSE_ERROR: {e}]"


class TransactionException(DatabaseException):
    """Exception raised when database transaction fails."""

    def __init__(
        self,
        message: str = "Database transaction failed",
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize transaction exception.

        Args:
            message: Error message
            operation: Description of the failed operation
            original_error: Original exception
        """
        details = {}
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            error_code="DATABASE_TRANSACTION_ERROR",
            details=details,
            original_error=original_error,
        )


class ValidationException(PetShopException):
    """Base exception for data validation errors."""

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        validation_errors: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize validation exception.

        Args:
            message: Error message
            field: Field that failed validation
            value: Value that failed validation
            validation_errors: Detailed validation errors
        """
        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        if validation_errors:
            details["validation_errors"] = validation_errors

        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details,
        )
        self.validation_errors = validation_errors or {}


class StageValidationException(ValidationException):
    """Exception raised when a wizard stage cannot be left because of missing fields."""

    def __init__(
        self,
        message: str = "Stage validation failed",
        stage: Optional[str] = None,
        validation_errors: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize stage validation exception.

        Args:
            message: Error message
            stage: Name of the stage that failed validation
            validation_errors: Mapping of field name to error message
        """
        super().__init__(message=message, validation_errors=validation_errors)
        self.error_code = "STAGE_VALIDATION_ERROR"
        self.stage = stage
        if stage:
            self.details["stage"] = stage


class SubmissionPreconditionException(ValidationException):
    """Exception raised when confirmation is attempted on an incomplete draft."""

    def __init__(
        self,
        message: str = "Submission precondition failed",
        rule_name: Optional[str] = None,
    ):
        super().__init__(message=message)
        self.error_code = "SUBMISSION_PRECONDITION_ERROR"
        if rule_name:
            self.details["rule_name"] = rule_name


class SubmissionException(PetShopException):
    """Base exception for failures while persisting a confirmed draft."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[BaseException] = None,
    ):
        super().__init__(message, error_code, details)
        self.original_error = original_error
        if original_error is not None and "original_error" not in self.details:
            self.details["original_error"] = str(original_error)


class ParentCreationException(SubmissionException):
    """Exception raised when the owner record could not be created."""

    def __init__(
        self,
        message: str = "Owner creation failed",
        original_error: Optional[BaseException] = None,
    ):
        """
        Initialize parent creation exception.

        Raised when the create call itself failed, so nothing is known to
        have been written.

        Args:
            message: Error message
            original_error: Error raised by the create collaborator
        """
        super().__init__(
            message=message,
            error_code="PARENT_CREATION_ERROR",
            original_error=original_error,
        )


class ParentRecordException(SubmissionException):
    """
    Exception raised when the owner was created but its record is unusable.

    The owner is persisted. ``raw_record`` holds what the create call returned,
    so the caller can reconcile it instead of creating the owner again.
    """

    def __init__(
        self,
        message: str = "Owner record could not be read",
        raw_record: Optional[Any] = None,
        original_error: Optional[BaseException] = None,
    ):
        super().__init__(
            message=message,
            error_code="PARENT_RECORD_ERROR",
            details={"raw_record": repr(raw_record)},
            original_error=original_error,
        )
        self.raw_record = raw_record


class DependentCreationException(SubmissionException):
    """
    Exception raised when one or more pet records could not be created.

    The owner record (and possibly some pets) are already persisted when this
    is raised; there is no rollback.
    """

    def __init__(
        self,
        message: str = "Pet creation failed",
        parent_record: Optional[Any] = None,
        created: Optional[List[str]] = None,
        failed: Optional[Dict[str, str]] = None,
        in_flight: Optional[List[str]] = None,
        original_error: Optional[BaseException] = None,
    ):
        """
        Initialize dependent creation exception.

        Args:
            message: Error message
            parent_record: The owner record that was persisted
            created: Temporary ids of pets known to be persisted
            failed: Mapping of temporary pet id to error message
            in_flight: Temporary ids of pets whose create had not finished
            original_error: First error raised by the pet collaborator
        """
        details: Dict[str, Any] = {
            "created": list(created or []),
            "failed": dict(failed or {}),
            "in_flight": list(in_flight or []),
        }
        parent_id = getattr(parent_record, "id", None)
        if parent_id is not None:
            details["parent_id"] = str(parent_id)

        super().__init__(
            message=message,
            error_code="DEPENDENT_CREATION_ERROR",
            details=details,
            original_error=original_error,
        )
        self.parent_record = parent_record
        self.created = details["created"]
        self.failed = details["failed"]
        self.in_flight = details["in_flight"]


class ConfigurationException(PetShopException):
    """Base exception for configuration-related errors."""

    def __init__(
        self,
        message: str = "Configuration error",
        config_key: Optional[str] = None,
        config_value: Optional[str] = None,
    ):
        """
        Initialize configuration exception.

        Args:
            message: Error message
            config_key: Configuration key that caused the error
            config_value: Configuration value (will be sanitized)
        """
        details = {}
        if config_key:
            details["config_key"] = config_key
        if config_value:
            details["config_value"] = self._sanitize_config_value(
                config_key, config_value
            )

        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details,
        )

    @staticmethod
    def _sanitize_config_value(key: Optional[str], value: str) -> str:
        """Sanitize configuration values to avoid exposing secrets."""
        if not key:
            return "[REDACTED]"

        sensitive_keys = ["password", "secret", "key", "token", "credential"]
        if any(sensitive in key.lower() for sensitive in sensitive_keys):
            return "[REDACTED]"

        return value


# Utility functions for exception handling and error formatting


def format_validation_errors(errors: List[Dict[str, Any]]) -> Dict[str, List[str]]:
    """
    Format Pydantic validation errors into a user-friendly structure.

    Args:
        errors: List of Pydantic validation errors

    Returns:
        Dictionary mapping field names to lists of error messages
    """
    formatted_errors: Dict[str, List[str]] = {}

    for error in errors:
        field_path = ".".join(str(loc) for loc in error.get("loc", []))
        if not field_path:
            field_path = "root"

        message = error.get("msg", "Validation error")
        error_type = error.get("type", "unknown")

        if error_type == "value_error":
            formatted_message = message
        elif error_type == "missing":
            formatted_message = "This field is required"
        else:
            formatted_message = f"{message} (type: {error_type})"

        formatted_errors.setdefault(field_path, []).append(formatted_message)

    return formatted_errors


def create_error_response(
    exception: PetShopException,
    include_debug: bool = False,
) -> Dict[str, Any]:
    """
    Create a standardized error response from an exception.

    Args:
        exception: The exception to format
        include_debug: Whether to include debug information

    Returns:
        Standardized error response dictionary
    """
    response: Dict[str, Any] = {
        "success": False,
        "error": {
            "type": exception.__class__.__name__,
            "code": exception.error_code,
            "message": exception.message,
        },
    }

    if exception.details:
        response["error"]["details"] = exception.details

    if include_debug:
        debug_info = exception.get_debug_info()
        response["debug"] = {
            "timestamp": debug_info["timestamp"],
            "module": debug_info["module"],
            "class_name": debug_info["class_name"],
        }

    return response


def log_exception_context(
    exception: BaseException,
    context: Dict[str, Any],
    logger: Optional[logging.Logger] = None,
    level: int = logging.ERROR,
) -> None:
    """
    Log an exception with additional context information.

    Args:
        exception: The exception to log
        context: Additional context information
        logger: Logger instance to use
        level: Logging level
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    if isinstance(exception, PetShopException):
        log_data = exception.to_dict()
        log_data["context"] = context
        logger.log(
            level,
            f"Exception with context: {exception.message}",
            extra={"exception_data": log_data},
        )
    else:
        logger.log(
            level,
            f"Non-PetShop exception: {str(exception)}",
            extra={
                "exception_type": exception.__class__.__name__,
                "exception_message": str(exception),
                "context": context,
            },
        )
