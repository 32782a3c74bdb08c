# hotelops/repositories/workflows/approval_request_repository.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import Select
from sqlalchemy.orm import Session

from hotelops.models.common.enums import ApprovalStatus
from hotelops.models.workflows import ApprovalRequest
from hotelops.repositories.base import BaseRepository


class ApprovalRequestRepository(BaseRepository[ApprovalRequest]):
    def __init__(self, session: Session):
        super().__init__(session, ApprovalRequest)

    def _base_select(self) -> Select[tuple[ApprovalRequest]]:
        # rows change through conditional UPDATEs that bypass the identity map
        return super()._base_select().execution_options(populate_existing=True)

    def get_pending_for_entity(self, entity_type: str, entity_id: str) -> Optional[ApprovalRequest]:
        stmt = self._base_select().where(
            ApprovalRequest.entity_type == entity_type,
            ApprovalRequest.entity_id == entity_id,
            ApprovalRequest.status == ApprovalStatus.PENDING.value,
        )
        with self._guard("get_pending_for_entity"):
            return self.session.execute(stmt).scalar_one_or_none()

    def find_pending_for_approver(self, approver_id: str) -> List[ApprovalRequest]:
        stmt = (
            self._base_select()
            .where(
                ApprovalRequest.current_approver_id == approver_id,
                ApprovalRequest.status == ApprovalStatus.PENDING.value,
            )
            .order_by(ApprovalRequest.created_at, ApprovalRequest.id)
        )
        with self._guard("find_pending_for_approver"):
            return list(self.session.execute(stmt).scalars().all())

    def find_pending_created_before(self, cutoff: datetime) -> List[ApprovalRequest]:
        stmt = (
            self._base_select()
            .where(
                ApprovalRequest.status == ApprovalStatus.PENDING.value,
                ApprovalRequest.created_at <= cutoff,
            )
            .order_by(ApprovalRequest.created_at, ApprovalRequest.id)
        )
        with self._guard("find_pending_created_before"):
            return list(self.session.execute(stmt).scalars().all())

    # ------------------------------------------------------------------ #
    # Conditional transitions
    # ------------------------------------------------------------------ #
    def mark_decided(
        self,
        request_id: str,
        status: ApprovalStatus,
        decided_by_id: str,
        decided_at: datetime,
    ) -> bool:
        """Move a pending request to a terminal status; False if it was not pending."""
        return self.compare_and_set(
            request_id,
            expected={"status": ApprovalStatus.PENDING.value},
            values={
                "status": status.value,
                "decided_by_id": decided_by_id,
                "decided_at": decided_at,
                "updated_at": decided_at,
            },
        )

    def reassign(
        self,
        request_id: str,
        expected_approver_id: Optional[str],
        new_approver_id: str,
        now: datetime,
    ) -> bool:
        """Swap the current approver; False if the request moved on meanwhile."""
        return self.compare_and_set(
            request_id,
            expected={
                "status": ApprovalStatus.PENDING.value,
                "current_approver_id": expected_approver_id,
            },
            values={
                "current_approver_id": new_approver_id,
                "updated_at": now,
            },
        )
