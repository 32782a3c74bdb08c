"""
Base service class providing common functionality for workflow services.
"""

from typing import Optional, Dict, Any
from abc import ABC
from contextlib import contextmanager

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from hotelops.core.clock import Clock, SystemClock
from hotelops.core.config import WorkflowSettings, settings
from hotelops.core.exceptions import ConfigurationError, StoreError
from hotelops.core.logging import get_logger
from hotelops.services.base.service_result import (
    ServiceResult,
    ServiceError,
    ErrorCode,
    ErrorSeverity,
)


class BaseService(ABC):
    """
    Base service with common behaviors:
    - Shared logger, db session and clock
    - Consistent error handling via ServiceResult
    - Transaction management utilities
    """

    def __init__(
        self,
        db_session: Session,
        clock: Optional[Clock] = None,
        workflow_settings: Optional[WorkflowSettings] = None,
    ):
        self.db: Session = db_session
        self.clock: Clock = clock or SystemClock()
        self.workflow_settings: WorkflowSettings = workflow_settings or settings.workflow
        self._logger = get_logger(f"hotelops.services.{self.__class__.__name__}")

    # -------------------------------------------------------------------------
    # Exception & Error Handling
    # -------------------------------------------------------------------------

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert an exception raised inside an operation into a failure.

        StoreError becomes STORE_ERROR (retryable), ConfigurationError
        becomes INVALID_STATE flagged as a configuration defect. Anything
        else is an INTERNAL_ERROR.
        """
        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }
        if additional_context:
            context.update(additional_context)

        if isinstance(exception, ConfigurationError):
            self._logger.error(f"Configuration defect during {operation}: {exception}", extra=context)
            return ServiceResult.failure(
                ServiceError(
                    code=ErrorCode.INVALID_STATE,
                    message=exception.message,
                    details={"config_error": True, **exception.details},
                    severity=ErrorSeverity.ERROR,
                )
            )

        if isinstance(exception, (StoreError, SQLAlchemyError)):
            self._logger.error(f"Store failure during {operation}: {exception}", extra=context)
            return ServiceResult.failure(
                ServiceError(
                    code=ErrorCode.STORE_ERROR,
                    message=f"Failed to {operation}: persistent store unavailable",
                    details={
                        "retryable": True,
                        "error": str(exception),
                        "entity_ref": context["entity_ref"],
                    },
                    severity=ErrorSeverity.ERROR,
                )
            )

        self._logger.error(f"Error during {operation}: {exception}", exc_info=True, extra=context)
        return ServiceResult.failure(
            ServiceError(
                code=ErrorCode.INTERNAL_ERROR,
                message=f"Failed to {operation}",
                details={
                    "error": str(exception),
                    "entity_ref": context["entity_ref"],
                },
                severity=ErrorSeverity.CRITICAL,
            )
        )

    # -------------------------------------------------------------------------
    # Transaction Management
    # -------------------------------------------------------------------------

    @contextmanager
    def transaction(self, auto_commit: bool = True):
        """
        Context manager for database transactions with automatic rollback.

        Example:
            with self.transaction():
                self.requests.create(data)
                # automatic commit on success, rollback on exception
        """
        try:
            yield self.db
            if auto_commit:
                self._commit()
        except Exception as e:
            self._rollback()
            self._logger.debug(f"Transaction rolled back: {e}")
            raise

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self._logger.error(f"Commit failed: {e}")
            raise StoreError(f"Commit failed: {e}", operation="commit") from e

    def _rollback(self) -> None:
        """Rollback the current transaction, suppressing rollback errors."""
        try:
            self.db.rollback()
        except Exception as e:
            # rollback errors must not mask the original error
            self._logger.warning(f"Rollback failed: {e}")
