from .approval_request_repository import ApprovalRequestRepository
from .approval_history_repository import ApprovalHistoryRepository
from .escalation_rule_repository import EscalationRuleRepository

__all__ = [
    "ApprovalRequestRepository",
    "ApprovalHistoryRepository",
    "EscalationRuleRepository",
]
