# models/org/__init__.py
from .employee import Employee, RoleAssignment
from .delegation import TemporaryDelegation

__all__ = [
    "Employee",
    "RoleAssignment",
    "TemporaryDelegation",
]
