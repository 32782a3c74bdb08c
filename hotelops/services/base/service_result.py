"""
Service result patterns for standardized response handling.

Every workflow operation returns a ServiceResult. Ordinary outcomes such as
a conflicting request or an exhausted escalation chain are failures with an
ErrorCode, not exceptions.
"""

from typing import TypeVar, Generic, Optional, Any, Dict
from dataclasses import dataclass
from enum import Enum
from datetime import datetime, timezone


class ErrorCode(str, Enum):
    """Standard error codes for service operations."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"

    # Workflow errors
    INVALID_STATE = "INVALID_STATE"
    CONFLICT = "CONFLICT"
    CHAIN_EXHAUSTED = "CHAIN_EXHAUSTED"

    # Store errors
    STORE_ERROR = "STORE_ERROR"


class ErrorSeverity(str, Enum):
    """Error severity levels."""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class ServiceError:
    """Represents a service operation error with context."""

    code: ErrorCode
    message: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    details: Optional[Dict[str, Any]] = None
    field: Optional[str] = None
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now(timezone.utc)

    @property
    def retryable(self) -> bool:
        return bool((self.details or {}).get("retryable"))

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "code": self.code.value,
            "message": self.message,
            "severity": self.severity.value,
            "details": self.details,
            "field": self.field,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


TData = TypeVar("TData")


@dataclass
class ServiceResult(Generic[TData]):
    """
    Standardized service operation result with success/failure pattern.

    Attributes:
        is_success: Operation success indicator
        data: Result data (if successful)
        error: Error information (if failed)
        message: Human-readable status message
        metadata: Additional context information
    """

    is_success: bool
    data: Optional[TData] = None
    error: Optional[ServiceError] = None
    message: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def success(
        cls,
        data: Optional[TData] = None,
        message: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        """Create a successful result."""
        return cls(
            is_success=True,
            data=data,
            message=message,
            metadata=metadata or {},
        )

    @classmethod
    def failure(
        cls,
        error: ServiceError,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        """Create a failed result."""
        return cls(
            is_success=False,
            error=error,
            message=error.message,
            metadata=metadata or {},
        )

    @classmethod
    def validation_failure(
        cls,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        return cls.failure(
            ServiceError(
                code=ErrorCode.VALIDATION_ERROR,
                message=message,
                field=field,
                details=details,
                severity=ErrorSeverity.WARNING,
            )
        )

    @classmethod
    def not_found(
        cls,
        resource_type: str,
        resource_id: Optional[str] = None,
    ) -> "ServiceResult[TData]":
        message = f"{resource_type} not found"
        if resource_id:
            message += f" (ID: {resource_id})"

        return cls.failure(
            ServiceError(
                code=ErrorCode.NOT_FOUND,
                message=message,
                details={"resource_type": resource_type, "resource_id": resource_id},
                severity=ErrorSeverity.WARNING,
            )
        )

    @classmethod
    def conflict(
        cls,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        return cls.failure(
            ServiceError(
                code=ErrorCode.CONFLICT,
                message=message,
                details=details,
                severity=ErrorSeverity.WARNING,
            )
        )

    @classmethod
    def invalid_state(
        cls,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        return cls.failure(
            ServiceError(
                code=ErrorCode.INVALID_STATE,
                message=message,
                details=details,
                severity=ErrorSeverity.WARNING,
            )
        )

    @classmethod
    def chain_exhausted(
        cls,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        return cls.failure(
            ServiceError(
                code=ErrorCode.CHAIN_EXHAUSTED,
                message=message,
                details=details,
                severity=ErrorSeverity.WARNING,
            )
        )

    @property
    def error_code(self) -> Optional[ErrorCode]:
        return self.error.code if self.error else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary representation."""
        result = {
            "is_success": self.is_success,
            "message": self.message,
            "metadata": self.metadata,
        }

        if self.is_success:
            result["data"] = self.data
        else:
            result["error"] = self.error.to_dict() if self.error else None

        return result

    def __repr__(self) -> str:
        status = "Success" if self.is_success else "Failure"
        if self.message:
            return f"ServiceResult({status}: {self.message})"
        return f"ServiceResult({status})"


__all__ = [
    "ErrorCode",
    "ErrorSeverity",
    "ServiceError",
    "ServiceResult",
]
