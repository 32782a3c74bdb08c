from .org_graph import OrganizationGraph
from .escalation_chain import EscalationChainBuilder

__all__ = ["OrganizationGraph", "EscalationChainBuilder"]
