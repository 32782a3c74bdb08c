# hotelops/repositories/org/employee_repository.py
from __future__ import annotations

from typing import List, Optional, Sequence

from sqlalchemy import case, select
from sqlalchemy.orm import Session

from hotelops.models.common.enums import AppRole
from hotelops.models.org import Employee, RoleAssignment
from hotelops.repositories.base import BaseRepository


class EmployeeRepository(BaseRepository[Employee]):
    """Read access to employees, reporting lines and role assignments."""

    def __init__(self, session: Session):
        super().__init__(session, Employee)

    def get_role_assignment(self, employee_id: str) -> Optional[RoleAssignment]:
        stmt = select(RoleAssignment).where(RoleAssignment.employee_id == employee_id)
        with self._guard("get_role_assignment"):
            return self.session.execute(stmt).scalar_one_or_none()

    def get_role(self, employee_id: str) -> Optional[AppRole]:
        assignment = self.get_role_assignment(employee_id)
        if assignment is None:
            return None
        return AppRole(assignment.role)

    def find_active_with_role(
        self,
        role: AppRole,
        property_id: Optional[str] = None,
    ) -> List[Employee]:
        """
        Active employees holding `role`, in stable order.

        With `property_id`, assignments held for that property come first,
        followed by assignments without a property; assignments for other
        properties are excluded. Within a group the oldest assignment wins,
        then the employee id.
        """
        stmt = (
            select(Employee)
            .join(RoleAssignment, RoleAssignment.employee_id == Employee.id)
            .where(
                RoleAssignment.role == role.value,
                Employee.is_active.is_(True),
            )
        )
        if property_id is not None:
            stmt = stmt.where(
                (RoleAssignment.property_id == property_id)
                | RoleAssignment.property_id.is_(None)
            ).order_by(
                case((RoleAssignment.property_id == property_id, 0), else_=1),
                RoleAssignment.created_at,
                Employee.id,
            )
        else:
            stmt = stmt.order_by(RoleAssignment.created_at, Employee.id)

        with self._guard("find_active_with_role"):
            return list(self.session.execute(stmt).scalars().all())

    def direct_reports(self, manager_id: str) -> Sequence[Employee]:
        stmt = (
            select(Employee)
            .where(
                Employee.reporting_to == manager_id,
                Employee.is_active.is_(True),
            )
            .order_by(Employee.full_name, Employee.id)
        )
        with self._guard("direct_reports"):
            return self.session.execute(stmt).scalars().all()

    def get_reporting_to(self, employee_id: str) -> Optional[str]:
        stmt = select(Employee.reporting_to).where(Employee.id == employee_id)
        with self._guard("get_reporting_to"):
            return self.session.execute(stmt).scalar_one_or_none()
