"""
Read-only access to the organization: employees, reporting lines and roles.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from hotelops.core.logging import get_logger
from hotelops.models.common.enums import AppRole
from hotelops.models.org import Employee
from hotelops.repositories.org import EmployeeRepository

logger = get_logger(__name__)


class OrganizationGraph:
    """
    Id-keyed view of the reporting hierarchy.

    The hierarchy is stored as `reporting_to` ids and may contain dangling
    references or cycles; callers that walk it keep their own seen-set. Every
    call reads current data, nothing is cached. Store failures propagate as
    StoreError.
    """

    def __init__(self, session: Session):
        self.employees = EmployeeRepository(session)

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        return self.employees.get(employee_id)

    def manager_id_of(self, employee_id: str) -> Optional[str]:
        return self.employees.get_reporting_to(employee_id)

    def manager_of(self, employee_id: str) -> Optional[Employee]:
        """The manager record, or None when there is none or it is dangling."""
        manager_id = self.manager_id_of(employee_id)
        if manager_id is None:
            return None
        return self.employees.get(manager_id)

    def role_of(self, employee_id: str) -> Optional[AppRole]:
        return self.employees.get_role(employee_id)

    def find_active_with_role(
        self,
        role: AppRole,
        property_id: Optional[str] = None,
    ) -> List[Employee]:
        return self.employees.find_active_with_role(role, property_id)

    def direct_reports(self, manager_id: str) -> Sequence[Employee]:
        return self.employees.direct_reports(manager_id)

    def would_create_cycle(
        self,
        employee_id: str,
        new_manager_id: Optional[str],
        max_depth: int = 20,
    ) -> bool:
        """
        True when making `new_manager_id` the manager of `employee_id` closes a loop.

        Walks up from the proposed manager. Reaching `employee_id` within
        `max_depth` steps means the change would create a cycle. An existing
        cycle above the proposed manager that does not include the employee
        is not reported here.
        """
        if new_manager_id is None:
            return False
        if new_manager_id == employee_id:
            return True

        seen = set()
        current: Optional[str] = new_manager_id
        depth = 0
        while current is not None and depth < max_depth:
            if current == employee_id:
                return True
            if current in seen:
                logger.warning(
                    "Existing reporting cycle found while validating a manager change",
                    extra={"employee_id": employee_id, "cycle_at": current},
                )
                return False
            seen.add(current)
            current = self.employees.get_reporting_to(current)
            depth += 1
        return False
