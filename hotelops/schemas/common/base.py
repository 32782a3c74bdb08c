"""
Base schema classes with common fields and configurations.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from hotelops.core.clock import ensure_utc

__all__ = [
    "UTCDateTime",
    "BaseSchema",
    "TimestampMixin",
    "UUIDMixin",
    "BaseDBSchema",
    "BaseCreateSchema",
    "BaseResponseSchema",
]


# SQLite hands back naive datetimes; every timestamp leaving the core is aware UTC.
UTCDateTime = Annotated[datetime, AfterValidator(ensure_utc)]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.

    Results handed to callers are built from ORM rows, hence
    `from_attributes`.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        # Keep enums as Enum instances; callers can still use `.value`.
        use_enum_values=False,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class TimestampMixin(BaseModel):
    created_at: UTCDateTime = Field(..., description="Creation timestamp")
    updated_at: UTCDateTime = Field(..., description="Last update timestamp")


class UUIDMixin(BaseModel):
    id: str = Field(..., description="Unique identifier")


class BaseDBSchema(BaseSchema, UUIDMixin, TimestampMixin):
    """Base schema for persisted records with ID and timestamps."""
    pass


class BaseCreateSchema(BaseSchema):
    """Base schema for create operations."""
    pass


class BaseResponseSchema(BaseDBSchema):
    """Base schema for results returned to callers."""
    pass
