"""
ORM models for the approval core.

Importing this package registers every table on `Base.metadata`.
"""

from hotelops.models.base import Base, BaseEntity
from hotelops.models.org import Employee, RoleAssignment, TemporaryDelegation
from hotelops.models.workflows import ApprovalRequest, ApprovalHistory, EscalationRule
from hotelops.models.tasks import Task
from hotelops.models.maintenance import MaintenanceTicket
from hotelops.models.leave import LeaveRequest
from hotelops.models.recruitment import JobPosting

__all__ = [
    "Base",
    "BaseEntity",
    "Employee",
    "RoleAssignment",
    "TemporaryDelegation",
    "ApprovalRequest",
    "ApprovalHistory",
    "EscalationRule",
    "Task",
    "MaintenanceTicket",
    "LeaveRequest",
    "JobPosting",
]
