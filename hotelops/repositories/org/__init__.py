from .employee_repository import EmployeeRepository
from .delegation_repository import DelegationRepository

__all__ = ["EmployeeRepository", "DelegationRepository"]
