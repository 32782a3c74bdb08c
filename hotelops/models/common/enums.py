"""
Database enums shared by models, repositories and services.
"""

import enum


class AppRole(str, enum.Enum):
    """
    System role used for approval routing.

    Declaration order is authority order, most to least.
    """
    REGIONAL_ADMIN = "regional_admin"
    REGIONAL_HR = "regional_hr"
    PROPERTY_MANAGER = "property_manager"
    PROPERTY_HR = "property_hr"
    DEPARTMENT_HEAD = "department_head"
    STAFF = "staff"


AUTHORIZED_APPROVER_ROLES = frozenset({
    AppRole.DEPARTMENT_HEAD,
    AppRole.PROPERTY_HR,
    AppRole.PROPERTY_MANAGER,
    AppRole.REGIONAL_HR,
    AppRole.REGIONAL_ADMIN,
})


class DelegationScope(str, enum.Enum):
    """Boundary a temporary delegation applies to."""
    PROPERTY = "property"
    DEPARTMENT = "department"
    ALL = "all"


class ApprovalStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalDecision(str, enum.Enum):
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalAction(str, enum.Enum):
    """Kinds of entries in the approval history."""
    ASSIGNED = "assigned"
    ESCALATED = "escalated"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApproverSource(str, enum.Enum):
    """Which resolver rule produced an approver."""
    DELEGATION = "delegation"
    DIRECT_MANAGER = "direct_manager"
    ROLE_FALLBACK = "role_fallback"
    ESCALATION_CHAIN = "escalation_chain"


class EntityKind(str, enum.Enum):
    """Entity kinds whose status is governed by the transition table."""
    TASK = "task"
    MAINTENANCE_TICKET = "maintenance_ticket"
    LEAVE_REQUEST = "leave_request"
    JOB_POSTING = "job_posting"


class EntityStatus(str, enum.Enum):
    """Union of all statuses used by the stateful entity kinds."""
    DRAFT = "draft"
    OPEN = "open"
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    PENDING_PARTS = "pending_parts"
    COMPLETED = "completed"
    APPROVED = "approved"
    REJECTED = "rejected"
    FILLED = "filled"
    CLOSED = "closed"
    CANCELLED = "cancelled"


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
