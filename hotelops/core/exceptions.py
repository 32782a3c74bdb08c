"""
Custom Exceptions for the approval core

Exceptions are reserved for defects and infrastructure failures. Ordinary
outcomes (no approver, conflicting request, exhausted chain) are returned as
ServiceResult failures by the service layer.
"""

from typing import Any, Dict, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for application exceptions"""
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # Workflow errors
    CONCURRENT_UPDATE = "CONCURRENT_UPDATE"

    # Configuration errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the package with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__,
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


# ========================================
# Store Exceptions
# ========================================

class StoreError(BaseAppException):
    """
    Raised when the persistent store cannot serve a request.

    Always retryable from the caller's point of view: the operation did not
    commit anything and may be attempted again after backing off.
    """

    retryable = True

    def __init__(
        self,
        message: str = "Persistent store unavailable",
        operation: Optional[str] = None,
        table: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.DATABASE_ERROR,
    ):
        details = {
            "operation": operation,
            "table": table,
            "retryable": self.retryable,
        }
        super().__init__(message, error_code, details)


class StoreConnectionError(StoreError):
    """Raised when the store connection is lost or refused"""

    def __init__(
        self,
        message: str = "Store connection failed",
        operation: Optional[str] = None,
    ):
        super().__init__(message, operation=operation, error_code=ErrorCode.CONNECTION_ERROR)


class DuplicateEntryError(StoreError):
    """Raised when a unique constraint rejects an insert"""

    retryable = False

    def __init__(
        self,
        message: str = "Duplicate entry",
        operation: Optional[str] = None,
        table: Optional[str] = None,
    ):
        super().__init__(message, operation=operation, table=table, error_code=ErrorCode.DUPLICATE_ENTRY)


# ========================================
# Workflow Exceptions
# ========================================

class StaleStateError(BaseAppException):
    """
    Raised when a conditional update matched no row.

    Another writer changed the record between the read and the write; the
    surrounding transaction is rolled back and the caller sees INVALID_STATE.
    """

    def __init__(
        self,
        message: str = "Record changed concurrently",
        table: Optional[str] = None,
        record_id: Optional[str] = None,
    ):
        details = {"table": table, "record_id": record_id}
        super().__init__(message, ErrorCode.CONCURRENT_UPDATE, details)


# ========================================
# Configuration Exceptions
# ========================================

class ConfigurationError(BaseAppException):
    """Exception raised when a static rule table is missing an entry"""

    def __init__(
        self,
        message: str = "Configuration error",
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
    ):
        details = {
            "config_key": config_key,
            "config_value": str(config_value) if config_value is not None else None,
        }
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


# ========================================
# Utility Functions
# ========================================

def handle_database_exception(exc: Exception, operation: Optional[str] = None) -> StoreError:
    """Convert database exceptions to store exceptions"""
    error_message = str(exc)
    lowered = error_message.lower()

    if "duplicate" in lowered or "unique constraint" in lowered:
        return DuplicateEntryError(f"Duplicate entry: {error_message}", operation=operation)
    elif "connection" in lowered or "unable to open" in lowered:
        return StoreConnectionError(f"Store connection error: {error_message}", operation=operation)
    else:
        return StoreError(f"Store error: {error_message}", operation=operation)


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "StoreError",
    "StoreConnectionError",
    "DuplicateEntryError",
    "StaleStateError",
    "ConfigurationError",
    "handle_database_exception",
]
