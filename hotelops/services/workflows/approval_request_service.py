"""
Approval request orchestration: open, decide and escalate.

Each mutating operation runs in one transaction. Concurrency is handled by
the store: a partial unique index admits a single pending request per
entity, and decisions and escalations are conditional UPDATEs whose row
count tells whether this caller won.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from hotelops.core.clock import Clock
from hotelops.core.config import WorkflowSettings
from hotelops.core.exceptions import (
    ConfigurationError,
    DuplicateEntryError,
    StaleStateError,
)
from hotelops.models.common.enums import (
    ApprovalAction,
    ApprovalDecision,
    ApprovalStatus,
    ApproverSource,
    EntityKind,
)
from hotelops.models.workflows import ApprovalRequest
from hotelops.repositories.operations import EntityStatusRepository
from hotelops.repositories.org import DelegationRepository
from hotelops.repositories.workflows import (
    ApprovalHistoryRepository,
    ApprovalRequestRepository,
)
from hotelops.schemas.workflows import ApprovalHistoryEntry, ApprovalRequestResponse
from hotelops.services.base import BaseService, ServiceResult
from hotelops.services.org import EscalationChainBuilder, OrganizationGraph
from hotelops.services.workflows import status_transitions
from hotelops.services.workflows.approver_resolver import ApproverResolver


class ApprovalRequestService(BaseService):
    """
    Orchestrates the approval lifecycle of stateful entities.

    Successful results carry an ApprovalRequestResponse plus metadata for
    the notification collaborator:
        entity_status: status of the gated entity after the operation
        approver_source: which rule picked the current approver
        previous_approver_id: approver before an escalation
        requires_operator: True when no approver could be resolved
    """

    def __init__(
        self,
        db_session: Session,
        clock: Optional[Clock] = None,
        workflow_settings: Optional[WorkflowSettings] = None,
    ):
        super().__init__(db_session, clock, workflow_settings)
        self.requests = ApprovalRequestRepository(db_session)
        self.history_entries = ApprovalHistoryRepository(db_session)
        self.entities = EntityStatusRepository(db_session)
        self.delegations = DelegationRepository(db_session)
        self.graph = OrganizationGraph(db_session)
        self.resolver = ApproverResolver(self.graph, self.delegations, self.clock)
        self.chains = EscalationChainBuilder(
            self.graph,
            max_depth=self.workflow_settings.WORKFLOW_MAX_ESCALATION_DEPTH,
        )

    # -------------------------------------------------------------------------
    # Open
    # -------------------------------------------------------------------------

    def open(
        self,
        entity_type: Union[EntityKind, str],
        entity_id: str,
        requester_id: str,
        scope_id: Optional[str] = None,
    ) -> ServiceResult[ApprovalRequestResponse]:
        """
        Create the pending approval request for an entity.

        Fails with CONFLICT when the entity already has a pending request.
        An entity already in a terminal status gives INVALID_STATE.
        When nobody can be resolved as approver the request is still created,
        unassigned, and `requires_operator` is set in the metadata.
        """
        try:
            kind = EntityKind(entity_type)
        except ValueError:
            return ServiceResult.validation_failure(
                f"Unknown entity type: {entity_type}",
                field="entity_type",
            )

        try:
            with self.transaction():
                entity_status = self.entities.get_status(kind, entity_id)
                if entity_status is None:
                    return ServiceResult.not_found(kind.value, entity_id)
                if status_transitions.is_terminal(kind, entity_status):
                    return ServiceResult.invalid_state(
                        f"{kind.value} {entity_id} is already {entity_status.value}",
                        details={
                            "entity_type": kind.value,
                            "entity_id": entity_id,
                            "entity_status": entity_status.value,
                        },
                    )

                existing = self.requests.get_pending_for_entity(kind.value, entity_id)
                if existing is not None:
                    return self._conflict(kind, entity_id, existing.id)

                resolution = self.resolver.resolve(requester_id, scope_id)
                now = self.clock.now()
                request = self.requests.create({
                    "entity_type": kind.value,
                    "entity_id": entity_id,
                    "requester_id": requester_id,
                    "scope_id": scope_id,
                    "current_approver_id": resolution.approver_id if resolution else None,
                    "status": ApprovalStatus.PENDING.value,
                    "created_at": now,
                    "updated_at": now,
                })
                self.history_entries.record(
                    request.id,
                    ApprovalAction.ASSIGNED,
                    now,
                    actor_id=requester_id,
                    approver_id=resolution.approver_id if resolution else None,
                    was_delegate=bool(resolution and resolution.source == ApproverSource.DELEGATION),
                    original_approver_id=resolution.delegator_id if resolution else None,
                    note=None if resolution else "No approver resolved; operator assignment required",
                )
                response = ApprovalRequestResponse.model_validate(request)

        except DuplicateEntryError:
            # Lost the race against a concurrent open() for the same entity.
            return self._conflict(kind, entity_id, None)
        except Exception as e:
            return self._handle_exception(e, "open approval request", entity_id)

        requires_operator = resolution is None
        if requires_operator:
            self._logger.warning(
                "Approval request opened without an approver",
                extra={"request_id": response.id, "entity_type": kind.value, "entity_id": entity_id},
            )
        else:
            self._logger.info(
                "Approval request opened",
                extra={
                    "request_id": response.id,
                    "entity_type": kind.value,
                    "entity_id": entity_id,
                    "approver_id": response.current_approver_id,
                    "source": resolution.source.value,
                },
            )

        return ServiceResult.success(
            response,
            message="Approval request opened",
            metadata={
                "entity_status": entity_status.value,
                "approver_source": resolution.source.value if resolution else None,
                "previous_approver_id": None,
                "requires_operator": requires_operator,
            },
        )

    # -------------------------------------------------------------------------
    # Decide
    # -------------------------------------------------------------------------

    def decide(
        self,
        request_id: str,
        decision: Union[ApprovalDecision, str],
        actor_id: str,
        note: Optional[str] = None,
    ) -> ServiceResult[ApprovalRequestResponse]:
        """
        Approve or reject a pending request and move the entity accordingly.

        The request update, the entity update and the history entry commit
        together or not at all. A request that is no longer pending, or an
        entity whose current status does not allow the decision's target,
        yields INVALID_STATE and nothing changes.
        """
        try:
            decision = ApprovalDecision(decision)
        except ValueError:
            return ServiceResult.validation_failure(
                f"Unknown decision: {decision}",
                field="decision",
            )

        try:
            with self.transaction():
                request = self.requests.get(request_id)
                if request is None:
                    return ServiceResult.not_found("ApprovalRequest", request_id)
                if request.status != ApprovalStatus.PENDING.value:
                    return self._not_pending(request)

                kind = self._kind_of(request)
                target = status_transitions.decision_target(kind, decision)
                current = self.entities.get_status(kind, request.entity_id)
                if current is None:
                    return ServiceResult.not_found(kind.value, request.entity_id)

                check = status_transitions.validate_transition(kind, current, target)
                if not check.is_valid:
                    if check.config_error:
                        raise ConfigurationError(
                            check.reason or "Transition table incomplete",
                            config_key="TRANSITIONS",
                            config_value=kind.value,
                        )
                    return ServiceResult.invalid_state(
                        check.reason or "Transition not allowed",
                        details={
                            "entity_type": kind.value,
                            "entity_status": current.value,
                            "target_status": target.value,
                        },
                    )

                now = self.clock.now()
                approver_id = request.current_approver_id
                if not self.requests.mark_decided(request.id, ApprovalStatus(decision.value), actor_id, now):
                    raise StaleStateError(
                        "Approval request was decided concurrently",
                        table="approval_requests",
                        record_id=request.id,
                    )
                if not self.entities.compare_and_set_status(kind, request.entity_id, current, target, now):
                    raise StaleStateError(
                        f"{kind.value} status changed concurrently",
                        table=kind.value,
                        record_id=request.entity_id,
                    )

                acting_for = self._acting_for(approver_id, actor_id, now)
                self.history_entries.record(
                    request.id,
                    ApprovalAction(decision.value),
                    now,
                    actor_id=actor_id,
                    approver_id=approver_id,
                    was_delegate=acting_for is not None,
                    original_approver_id=acting_for,
                    note=note,
                )
                self.requests.refresh(request)
                response = ApprovalRequestResponse.model_validate(request)

        except StaleStateError as e:
            self._logger.warning(
                "Decision lost a concurrent update",
                extra={"request_id": request_id, "table": e.details.get("table")},
            )
            return ServiceResult.invalid_state(
                e.message,
                details={"request_id": request_id, "concurrent_update": True},
            )
        except Exception as e:
            return self._handle_exception(e, "decide approval request", request_id)

        self._logger.info(
            "Approval request decided",
            extra={
                "request_id": request_id,
                "decision": decision.value,
                "actor_id": actor_id,
                "entity_status": target.value,
            },
        )
        return ServiceResult.success(
            response,
            message=f"Approval request {decision.value}",
            metadata={
                "entity_status": target.value,
                "previous_entity_status": current.value,
                "approver_source": None,
                "previous_approver_id": None,
                "requires_operator": False,
            },
        )

    # -------------------------------------------------------------------------
    # Escalate
    # -------------------------------------------------------------------------

    def escalate(
        self,
        request_id: str,
        actor_id: Optional[str] = None,
    ) -> ServiceResult[ApprovalRequestResponse]:
        """
        Hand a pending request to the next manager up the chain.

        Candidates come from the current approver's escalation chain, or the
        requester's when nobody was ever assigned. Approvers already tried
        for this request and inactive employees are skipped. With no
        candidate left the result is CHAIN_EXHAUSTED and the request is left
        untouched. `actor_id` None means the escalation sweep.
        """
        try:
            with self.transaction():
                request = self.requests.get(request_id)
                if request is None:
                    return ServiceResult.not_found("ApprovalRequest", request_id)
                if request.status != ApprovalStatus.PENDING.value:
                    return self._not_pending(request)

                previous_approver_id = request.current_approver_id
                walk_from = previous_approver_id or request.requester_id
                tried = self.history_entries.tried_approver_ids(request.id)
                tried.add(request.requester_id)

                candidate = None
                chain = self.chains.chain(walk_from)
                for manager in chain:
                    if manager.is_active and manager.id not in tried:
                        candidate = manager
                        break

                if candidate is None:
                    self._logger.warning(
                        "Escalation chain exhausted",
                        extra={
                            "request_id": request.id,
                            "walked_from": walk_from,
                            "chain_length": len(chain),
                        },
                    )
                    return ServiceResult.chain_exhausted(
                        "No further approver available; manual escalation required",
                        details={
                            "request_id": request.id,
                            "current_approver_id": previous_approver_id,
                            "chain_length": len(chain),
                        },
                    )

                now = self.clock.now()
                if not self.requests.reassign(request.id, previous_approver_id, candidate.id, now):
                    raise StaleStateError(
                        "Approval request changed during escalation",
                        table="approval_requests",
                        record_id=request.id,
                    )
                self.history_entries.record(
                    request.id,
                    ApprovalAction.ESCALATED,
                    now,
                    actor_id=actor_id,
                    approver_id=candidate.id,
                    original_approver_id=previous_approver_id,
                    note="Escalated by sweep" if actor_id is None else None,
                )
                entity_status = self.entities.get_status(self._kind_of(request), request.entity_id)
                self.requests.refresh(request)
                response = ApprovalRequestResponse.model_validate(request)

        except StaleStateError as e:
            self._logger.warning("Escalation lost a concurrent update", extra={"request_id": request_id})
            return ServiceResult.invalid_state(
                e.message,
                details={"request_id": request_id, "concurrent_update": True},
            )
        except Exception as e:
            return self._handle_exception(e, "escalate approval request", request_id)

        self._logger.info(
            "Approval request escalated",
            extra={
                "request_id": request_id,
                "previous_approver_id": previous_approver_id,
                "approver_id": candidate.id,
            },
        )
        return ServiceResult.success(
            response,
            message="Approval request escalated",
            metadata={
                "entity_status": entity_status.value if entity_status else None,
                "approver_source": ApproverSource.ESCALATION_CHAIN.value,
                "previous_approver_id": previous_approver_id,
                "requires_operator": False,
            },
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_request(self, request_id: str) -> ServiceResult[ApprovalRequestResponse]:
        try:
            request = self.requests.get(request_id)
        except Exception as e:
            return self._handle_exception(e, "get approval request", request_id)
        if request is None:
            return ServiceResult.not_found("ApprovalRequest", request_id)
        return ServiceResult.success(ApprovalRequestResponse.model_validate(request))

    def history(self, request_id: str) -> ServiceResult[List[ApprovalHistoryEntry]]:
        """Audit trail of a request, oldest entry first."""
        try:
            if self.requests.get(request_id) is None:
                return ServiceResult.not_found("ApprovalRequest", request_id)
            entries = self.history_entries.for_request(request_id)
        except Exception as e:
            return self._handle_exception(e, "load approval history", request_id)
        return ServiceResult.success([ApprovalHistoryEntry.model_validate(e) for e in entries])

    def pending_for_approver(self, approver_id: str) -> ServiceResult[List[ApprovalRequestResponse]]:
        try:
            requests = self.requests.find_pending_for_approver(approver_id)
        except Exception as e:
            return self._handle_exception(e, "list pending approvals", approver_id)
        return ServiceResult.success(
            [ApprovalRequestResponse.model_validate(r) for r in requests],
            metadata={"count": len(requests)},
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _kind_of(self, request: ApprovalRequest) -> EntityKind:
        try:
            return EntityKind(request.entity_type)
        except ValueError:
            raise ConfigurationError(
                f"Approval request references unknown entity type {request.entity_type}",
                config_key="entity_type",
                config_value=request.entity_type,
            ) from None

    def _acting_for(self, approver_id: Optional[str], actor_id: str, now: datetime) -> Optional[str]:
        """Approver the actor stands in for, when deciding as their active delegate."""
        if approver_id is None or approver_id == actor_id:
            return None
        for grant in self.delegations.find_active_for_delegator(approver_id, now):
            if grant.delegate_id == actor_id:
                return approver_id
        return None

    def _conflict(self, kind: EntityKind, entity_id: str, existing_id: Optional[str]) -> ServiceResult:
        self._logger.warning(
            "Pending approval request already exists",
            extra={"entity_type": kind.value, "entity_id": entity_id, "existing_request_id": existing_id},
        )
        return ServiceResult.conflict(
            f"A pending approval request already exists for {kind.value} {entity_id}",
            details={"entity_type": kind.value, "entity_id": entity_id, "request_id": existing_id},
        )

    def _not_pending(self, request: ApprovalRequest) -> ServiceResult:
        return ServiceResult.invalid_state(
            f"Approval request is already {request.status}",
            details={"request_id": request.id, "status": request.status},
        )
