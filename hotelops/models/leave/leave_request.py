# models/leave/leave_request.py
from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hotelops.models.base import BaseEntity


class LeaveRequest(BaseEntity):
    __tablename__ = "leave_requests"

    requester_id: Mapped[str] = mapped_column(String(36), index=True)
    leave_type: Mapped[str] = mapped_column(String(30), default="annual")
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(30), default="pending", index=True)
