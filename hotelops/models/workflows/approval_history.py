# models/workflows/approval_history.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hotelops.models.base import BaseEntity


class ApprovalHistory(BaseEntity):
    """
    Append-only trail of assignments, escalations and decisions.

    `sequence` numbers entries per request starting at 1. Approver ids
    recorded on `assigned` and `escalated` rows form the set of approvers
    already tried for a request.
    """
    __tablename__ = "approval_history"
    __table_args__ = (
        UniqueConstraint("approval_request_id", "sequence", name="uq_approval_history_sequence"),
    )

    approval_request_id: Mapped[str] = mapped_column(
        ForeignKey("approval_requests.id", ondelete="CASCADE"),
        index=True,
    )
    sequence: Mapped[int] = mapped_column(Integer)
    action: Mapped[str] = mapped_column(String(20))  # ApprovalAction value

    actor_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)  # None = system
    approver_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    was_delegate: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    original_approver_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
