from .enums import (
    AppRole,
    AUTHORIZED_APPROVER_ROLES,
    DelegationScope,
    ApprovalStatus,
    ApprovalDecision,
    ApprovalAction,
    ApproverSource,
    EntityKind,
    EntityStatus,
)

__all__ = [
    "AppRole",
    "AUTHORIZED_APPROVER_ROLES",
    "DelegationScope",
    "ApprovalStatus",
    "ApprovalDecision",
    "ApprovalAction",
    "ApproverSource",
    "EntityKind",
    "EntityStatus",
]
