# hotelops/repositories/org/delegation_repository.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from hotelops.models.common.enums import DelegationScope
from hotelops.models.org import Employee, TemporaryDelegation
from hotelops.repositories.base import BaseRepository


class DelegationRepository(BaseRepository[TemporaryDelegation]):
    def __init__(self, session: Session):
        super().__init__(session, TemporaryDelegation)

    def find_active(
        self,
        now: datetime,
        scope_id: Optional[str] = None,
    ) -> List[TemporaryDelegation]:
        """
        Delegations active at `now` that could apply to `scope_id`.

        Without a scope only `all` grants qualify. With a scope, `property`
        and `department` grants for that id qualify as well. Grants whose
        delegate is inactive are skipped. Ordering is left to the caller.
        """
        scope_clause = TemporaryDelegation.scope_type == DelegationScope.ALL.value
        if scope_id is not None:
            scope_clause = or_(
                scope_clause,
                and_(
                    TemporaryDelegation.scope_type.in_(
                        [DelegationScope.PROPERTY.value, DelegationScope.DEPARTMENT.value]
                    ),
                    TemporaryDelegation.scope_id == scope_id,
                ),
            )

        stmt = (
            select(TemporaryDelegation)
            .join(Employee, Employee.id == TemporaryDelegation.delegate_id)
            .where(
                TemporaryDelegation.start_at <= now,
                TemporaryDelegation.end_at >= now,
                Employee.is_active.is_(True),
                scope_clause,
            )
        )
        with self._guard("find_active"):
            return list(self.session.execute(stmt).scalars().all())

    def find_active_for_delegator(self, delegator_id: str, now: datetime) -> List[TemporaryDelegation]:
        stmt = (
            select(TemporaryDelegation)
            .where(
                TemporaryDelegation.delegator_id == delegator_id,
                TemporaryDelegation.start_at <= now,
                TemporaryDelegation.end_at >= now,
            )
            .order_by(TemporaryDelegation.created_at.desc(), TemporaryDelegation.id)
        )
        with self._guard("find_active_for_delegator"):
            return list(self.session.execute(stmt).scalars().all())

    def list_active(self, now: datetime) -> List[TemporaryDelegation]:
        stmt = (
            select(TemporaryDelegation)
            .where(
                TemporaryDelegation.start_at <= now,
                TemporaryDelegation.end_at >= now,
            )
            .order_by(TemporaryDelegation.created_at.desc(), TemporaryDelegation.id)
        )
        with self._guard("list_active"):
            return list(self.session.execute(stmt).scalars().all())
