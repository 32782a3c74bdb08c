"""
Escalation chain: the ordered list of managers above an employee.
"""

from __future__ import annotations

from typing import List, Optional

from hotelops.core.config import settings
from hotelops.core.logging import get_logger
from hotelops.models.org import Employee
from hotelops.services.org.org_graph import OrganizationGraph

logger = get_logger(__name__)


class EscalationChainBuilder:
    """
    Walks `reporting_to` upwards from an employee.

    The walk stops at the top of the hierarchy, at a revisited id (cycle),
    at a manager id with no employee record, or after `max_depth` managers.
    In every case the chain collected so far is returned.
    """

    def __init__(self, graph: OrganizationGraph, max_depth: Optional[int] = None):
        self.graph = graph
        self.max_depth = settings.workflow.WORKFLOW_MAX_ESCALATION_DEPTH if max_depth is None else max_depth

    def chain(self, employee_id: str) -> List[Employee]:
        """Managers above `employee_id`, nearest first, excluding the employee."""
        chain: List[Employee] = []
        seen = {employee_id}

        manager_id = self.graph.manager_id_of(employee_id)
        while manager_id is not None:
            if len(chain) >= self.max_depth:
                logger.warning(
                    "Escalation chain truncated at maximum depth",
                    extra={"employee_id": employee_id, "max_depth": self.max_depth},
                )
                break

            if manager_id in seen:
                logger.warning(
                    "Reporting cycle detected while building escalation chain",
                    extra={"employee_id": employee_id, "cycle_at": manager_id},
                )
                break
            seen.add(manager_id)

            manager = self.graph.get_employee(manager_id)
            if manager is None:
                logger.warning(
                    "Dangling reporting_to reference in escalation chain",
                    extra={"employee_id": employee_id, "missing_manager_id": manager_id},
                )
                break

            chain.append(manager)
            manager_id = manager.reporting_to

        return chain
