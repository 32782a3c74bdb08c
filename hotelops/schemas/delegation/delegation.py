"""
Temporary delegation schemas.

Clock-independent checks live here; checks that need "now" or the store
(window in the past, maximum duration, active employees) are done by
DelegationService.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, model_validator

from hotelops.models.common.enums import DelegationScope
from hotelops.schemas.common.base import BaseCreateSchema, BaseResponseSchema, UTCDateTime

__all__ = [
    "DelegationCreate",
    "DelegationResponse",
]


class DelegationCreate(BaseCreateSchema):
    delegator_id: str = Field(..., min_length=1)
    delegate_id: str = Field(..., min_length=1)
    scope_type: DelegationScope = DelegationScope.ALL
    scope_id: Optional[str] = Field(
        None,
        description="Property or department id; must be empty for scope 'all'",
    )
    start_at: UTCDateTime
    end_at: UTCDateTime

    @model_validator(mode="after")
    def validate_delegation(self) -> "DelegationCreate":
        if self.delegator_id == self.delegate_id:
            raise ValueError("An employee cannot delegate to themselves")

        if self.end_at <= self.start_at:
            raise ValueError("end_at must be after start_at")

        if self.scope_type == DelegationScope.ALL:
            if self.scope_id is not None:
                raise ValueError("scope_id must be empty when scope_type is 'all'")
        elif not self.scope_id:
            raise ValueError(f"scope_id is required when scope_type is '{self.scope_type.value}'")

        return self


class DelegationResponse(BaseResponseSchema):
    delegator_id: str
    delegate_id: str
    scope_type: DelegationScope
    scope_id: Optional[str] = None
    start_at: UTCDateTime
    end_at: UTCDateTime
