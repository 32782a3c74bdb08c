from .base import (
    UTCDateTime,
    BaseSchema,
    BaseDBSchema,
    BaseCreateSchema,
    BaseResponseSchema,
)

__all__ = [
    "UTCDateTime",
    "BaseSchema",
    "BaseDBSchema",
    "BaseCreateSchema",
    "BaseResponseSchema",
]
