# models/org/employee.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from hotelops.models.base import BaseEntity


class Employee(BaseEntity):
    """
    Person in the reporting hierarchy.

    `reporting_to` is a weak reference to another employee id. It is not a
    foreign key: the hierarchy may contain dangling ids or cycles and readers
    must cope with both.
    """
    __tablename__ = "employees"

    full_name: Mapped[str] = mapped_column(String(200))
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    reporting_to: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class RoleAssignment(BaseEntity):
    """Primary routing role of an employee (at most one per employee)."""
    __tablename__ = "role_assignments"

    employee_id: Mapped[str] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"),
        unique=True,
    )
    role: Mapped[str] = mapped_column(String(50), index=True)  # AppRole value
    property_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
