# models/workflows/escalation_rule.py
from __future__ import annotations

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from hotelops.models.base import BaseEntity


class EscalationRule(BaseEntity):
    """Hours a request of one entity type may wait before it is escalated."""
    __tablename__ = "escalation_rules"

    entity_type: Mapped[str] = mapped_column(String(50), unique=True)
    threshold_hours: Mapped[int] = mapped_column(Integer, default=48)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
