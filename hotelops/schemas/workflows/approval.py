"""
Approval request, history and escalation sweep schemas.

These are the payloads handed back inside ServiceResult.data; they carry
everything a notification collaborator needs (ids, status, approver).
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from hotelops.models.common.enums import ApprovalAction, ApprovalStatus, EntityKind
from hotelops.schemas.common.base import BaseResponseSchema, BaseSchema, UTCDateTime

__all__ = [
    "ApprovalRequestResponse",
    "ApprovalHistoryEntry",
    "EscalationRuleResponse",
    "EscalationSweepSummary",
]


class ApprovalRequestResponse(BaseResponseSchema):
    entity_type: EntityKind
    entity_id: str
    requester_id: str
    scope_id: Optional[str] = None
    current_approver_id: Optional[str] = Field(
        None,
        description="None while no approver could be resolved; an operator must assign one",
    )
    status: ApprovalStatus
    decided_at: Optional[UTCDateTime] = None
    decided_by_id: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == ApprovalStatus.PENDING


class ApprovalHistoryEntry(BaseResponseSchema):
    approval_request_id: str
    sequence: int
    action: ApprovalAction
    actor_id: Optional[str] = Field(None, description="None for system-initiated actions")
    approver_id: Optional[str] = None
    was_delegate: bool = False
    original_approver_id: Optional[str] = None
    note: Optional[str] = None


class EscalationRuleResponse(BaseResponseSchema):
    entity_type: EntityKind
    threshold_hours: int
    is_active: bool


class EscalationSweepSummary(BaseSchema):
    """Outcome of one escalation sweep."""

    examined: int = 0
    escalated: int = 0
    exhausted: int = 0
    failed: int = 0
    escalated_request_ids: List[str] = Field(default_factory=list)
    exhausted_request_ids: List[str] = Field(default_factory=list)
