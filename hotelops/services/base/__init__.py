from .base_service import BaseService
from .service_result import ErrorCode, ErrorSeverity, ServiceError, ServiceResult

__all__ = [
    "BaseService",
    "ErrorCode",
    "ErrorSeverity",
    "ServiceError",
    "ServiceResult",
]
