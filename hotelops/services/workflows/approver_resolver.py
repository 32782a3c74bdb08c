"""
Approver resolution.

Picks the single employee who should act next on a request, trying in
strict order: an active temporary delegation, the requester's direct
manager when that manager holds an approving role, then a role-based
fallback. The first rule that yields someone wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from hotelops.core.clock import Clock, SystemClock, ensure_utc
from hotelops.core.logging import get_logger
from hotelops.models.common.enums import (
    AUTHORIZED_APPROVER_ROLES,
    AppRole,
    ApproverSource,
    DelegationScope,
)
from hotelops.models.org import Employee, TemporaryDelegation
from hotelops.repositories.org import DelegationRepository
from hotelops.services.org.org_graph import OrganizationGraph

logger = get_logger(__name__)

# Lower sorts first.
SCOPE_SPECIFICITY = {
    DelegationScope.PROPERTY.value: 0,
    DelegationScope.DEPARTMENT.value: 1,
    DelegationScope.ALL.value: 2,
}


@dataclass(frozen=True)
class ApproverResolution:
    employee: Employee
    source: ApproverSource
    delegator_id: Optional[str] = None

    @property
    def approver_id(self) -> str:
        return self.employee.id


class ApproverResolver:
    """
    Read-only; store failures propagate as StoreError.

    A missing requester, or nobody suitable at any step, resolves to None.
    The requester is never returned as their own approver.
    """

    def __init__(
        self,
        graph: OrganizationGraph,
        delegations: DelegationRepository,
        clock: Optional[Clock] = None,
    ):
        self.graph = graph
        self.delegations = delegations
        self.clock = clock or SystemClock()

    def resolve(self, requester_id: str, scope_id: Optional[str] = None) -> Optional[ApproverResolution]:
        requester = self.graph.get_employee(requester_id)
        if requester is None:
            logger.warning("Approver requested for unknown employee", extra={"requester_id": requester_id})
            return None

        resolution = (
            self._from_delegation(requester, scope_id)
            or self._from_direct_manager(requester)
            or self._from_role_fallback(requester, scope_id)
        )
        if resolution is None:
            logger.warning(
                "No approver could be resolved",
                extra={"requester_id": requester_id, "scope_id": scope_id},
            )
        else:
            logger.debug(
                "Approver resolved",
                extra={
                    "requester_id": requester_id,
                    "approver_id": resolution.approver_id,
                    "source": resolution.source.value,
                },
            )
        return resolution

    # ------------------------------------------------------------------ #
    # Rules
    # ------------------------------------------------------------------ #
    def _from_delegation(self, requester: Employee, scope_id: Optional[str]) -> Optional[ApproverResolution]:
        candidates = [
            d for d in self.delegations.find_active(self.clock.now(), scope_id)
            if d.delegate_id != requester.id
        ]
        chosen = pick_delegation(candidates)
        if chosen is None:
            return None

        delegate = self.graph.get_employee(chosen.delegate_id)
        if delegate is None or not delegate.is_active:
            return None
        return ApproverResolution(delegate, ApproverSource.DELEGATION, chosen.delegator_id)

    def _from_direct_manager(self, requester: Employee) -> Optional[ApproverResolution]:
        if requester.reporting_to is None or requester.reporting_to == requester.id:
            return None

        manager = self.graph.get_employee(requester.reporting_to)
        if manager is None:
            logger.warning(
                "Requester reports to an unknown employee",
                extra={"requester_id": requester.id, "missing_manager_id": requester.reporting_to},
            )
            return None
        if not manager.is_active:
            return None

        if self.graph.role_of(manager.id) not in AUTHORIZED_APPROVER_ROLES:
            return None
        return ApproverResolution(manager, ApproverSource.DIRECT_MANAGER)

    def _from_role_fallback(self, requester: Employee, scope_id: Optional[str]) -> Optional[ApproverResolution]:
        role = AppRole.PROPERTY_HR if scope_id is not None else AppRole.REGIONAL_ADMIN
        for candidate in self.graph.find_active_with_role(role, scope_id):
            if candidate.id != requester.id:
                return ApproverResolution(candidate, ApproverSource.ROLE_FALLBACK)
        return None


def pick_delegation(delegations: List[TemporaryDelegation]) -> Optional[TemporaryDelegation]:
    """Most specific scope first, then the most recently created, then id."""
    if not delegations:
        return None
    return min(
        delegations,
        key=lambda d: (
            SCOPE_SPECIFICITY.get(d.scope_type, len(SCOPE_SPECIFICITY)),
            -ensure_utc(d.created_at).timestamp(),
            d.id,
        ),
    )


__all__ = ["ApproverResolution", "ApproverResolver", "pick_delegation"]
