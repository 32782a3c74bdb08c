# models/workflows/approval_request.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from hotelops.models.base import BaseEntity


class ApprovalRequest(BaseEntity):
    """
    Sign-off gate for a stateful entity (leave request, job posting, ...).

    At most one pending request may exist per (entity_type, entity_id); the
    partial unique index below makes that a store-level guarantee so two
    concurrent inserts cannot both succeed. Decided requests are kept as
    audit records and never deleted.
    """
    __tablename__ = "approval_requests"
    __table_args__ = (
        Index(
            "uq_approval_requests_one_pending",
            "entity_type",
            "entity_id",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
        Index("ix_approval_requests_entity", "entity_type", "entity_id"),
    )

    entity_type: Mapped[str] = mapped_column(String(50))  # EntityKind value
    entity_id: Mapped[str] = mapped_column(String(36))

    requester_id: Mapped[str] = mapped_column(String(36), index=True)
    scope_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    current_approver_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)

    status: Mapped[str] = mapped_column(String(20), default="pending", index=True)  # ApprovalStatus value

    decided_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    decided_by_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
