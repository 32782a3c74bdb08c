# models/workflows/__init__.py
from .approval_request import ApprovalRequest
from .approval_history import ApprovalHistory
from .escalation_rule import EscalationRule

__all__ = [
    "ApprovalRequest",
    "ApprovalHistory",
    "EscalationRule",
]
