"""
Service layer. Every operation returns a ServiceResult.
"""

from hotelops.services.base import BaseService, ErrorCode, ServiceResult
from hotelops.services.org import EscalationChainBuilder, OrganizationGraph
from hotelops.services.workflows.approver_resolver import ApproverResolution, ApproverResolver
from hotelops.services.workflows.approval_request_service import ApprovalRequestService
from hotelops.services.workflows.escalation_sweep_service import EscalationSweepService
from hotelops.services.delegation import DelegationService

__all__ = [
    "BaseService",
    "ErrorCode",
    "ServiceResult",
    "OrganizationGraph",
    "EscalationChainBuilder",
    "ApproverResolution",
    "ApproverResolver",
    "ApprovalRequestService",
    "EscalationSweepService",
    "DelegationService",
]
