from .approval import (
    ApprovalRequestResponse,
    ApprovalHistoryEntry,
    EscalationRuleResponse,
    EscalationSweepSummary,
)

__all__ = [
    "ApprovalRequestResponse",
    "ApprovalHistoryEntry",
    "EscalationRuleResponse",
    "EscalationSweepSummary",
]
