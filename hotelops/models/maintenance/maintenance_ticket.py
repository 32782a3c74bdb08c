# models/maintenance/maintenance_ticket.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hotelops.models.base import BaseEntity


class MaintenanceTicket(BaseEntity):
    __tablename__ = "maintenance_tickets"

    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    reported_by_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    property_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    status: Mapped[str] = mapped_column(String(30), default="open", index=True)
