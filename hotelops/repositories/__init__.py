"""
Data access layer. Repositories flush but never commit.
"""

from hotelops.repositories.base import BaseRepository
from hotelops.repositories.org import EmployeeRepository, DelegationRepository
from hotelops.repositories.workflows import (
    ApprovalRequestRepository,
    ApprovalHistoryRepository,
    EscalationRuleRepository,
)
from hotelops.repositories.operations import EntityStatusRepository

__all__ = [
    "BaseRepository",
    "EmployeeRepository",
    "DelegationRepository",
    "ApprovalRequestRepository",
    "ApprovalHistoryRepository",
    "EscalationRuleRepository",
    "EntityStatusRepository",
]
