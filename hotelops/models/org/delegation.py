# models/org/delegation.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from hotelops.models.base import BaseEntity


class TemporaryDelegation(BaseEntity):
    """
    Time-bounded grant of one employee's approval authority to another.

    Active while start_at <= now <= end_at. Overlapping grants are allowed;
    the approver resolver picks one deterministically.
    """
    __tablename__ = "temporary_delegations"
    __table_args__ = (
        CheckConstraint("end_at > start_at", name="ck_delegation_window"),
        Index("ix_delegation_scope", "scope_type", "scope_id"),
    )

    delegator_id: Mapped[str] = mapped_column(ForeignKey("employees.id", ondelete="CASCADE"))
    delegate_id: Mapped[str] = mapped_column(ForeignKey("employees.id", ondelete="CASCADE"), index=True)

    scope_type: Mapped[str] = mapped_column(String(20))  # DelegationScope value
    scope_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    start_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    end_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
