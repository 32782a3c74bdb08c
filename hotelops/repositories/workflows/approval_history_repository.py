# hotelops/repositories/workflows/approval_history_repository.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Set

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hotelops.models.common.enums import ApprovalAction
from hotelops.models.workflows import ApprovalHistory
from hotelops.repositories.base import BaseRepository


class ApprovalHistoryRepository(BaseRepository[ApprovalHistory]):
    def __init__(self, session: Session):
        super().__init__(session, ApprovalHistory)

    def record(
        self,
        approval_request_id: str,
        action: ApprovalAction,
        created_at: datetime,
        *,
        actor_id: Optional[str] = None,
        approver_id: Optional[str] = None,
        was_delegate: bool = False,
        original_approver_id: Optional[str] = None,
        note: Optional[str] = None,
    ) -> ApprovalHistory:
        """
        Append an entry with the next per-request sequence number.

        Callers write history only after winning the conditional update on
        the request row, so entries for one request are never appended
        concurrently.
        """
        with self._guard("next_sequence"):
            last = self.session.execute(
                select(func.max(ApprovalHistory.sequence)).where(
                    ApprovalHistory.approval_request_id == approval_request_id
                )
            ).scalar_one()

        return self.create({
            "approval_request_id": approval_request_id,
            "sequence": (last or 0) + 1,
            "action": action.value,
            "actor_id": actor_id,
            "approver_id": approver_id,
            "was_delegate": was_delegate,
            "original_approver_id": original_approver_id,
            "note": note,
            "created_at": created_at,
            "updated_at": created_at,
        })

    def for_request(self, approval_request_id: str) -> List[ApprovalHistory]:
        stmt = (
            self._base_select()
            .where(ApprovalHistory.approval_request_id == approval_request_id)
            .order_by(ApprovalHistory.sequence)
        )
        with self._guard("for_request"):
            return list(self.session.execute(stmt).scalars().all())

    def tried_approver_ids(self, approval_request_id: str) -> Set[str]:
        stmt = select(ApprovalHistory.approver_id).where(
            ApprovalHistory.approval_request_id == approval_request_id,
            ApprovalHistory.action.in_(
                [ApprovalAction.ASSIGNED.value, ApprovalAction.ESCALATED.value]
            ),
            ApprovalHistory.approver_id.is_not(None),
        )
        with self._guard("tried_approver_ids"):
            return set(self.session.execute(stmt).scalars().all())
