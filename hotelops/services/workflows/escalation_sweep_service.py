"""
Periodic escalation of approval requests that waited too long.

Nothing here runs on its own: an external scheduler calls `run()`.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Dict, List, Optional, Union

from sqlalchemy.orm import Session

from hotelops.core.clock import Clock, ensure_utc
from hotelops.core.config import WorkflowSettings
from hotelops.core.logging import log_execution_time
from hotelops.models.common.enums import EntityKind
from hotelops.models.workflows import EscalationRule
from hotelops.repositories.workflows import (
    ApprovalRequestRepository,
    EscalationRuleRepository,
)
from hotelops.schemas.workflows import EscalationRuleResponse, EscalationSweepSummary
from hotelops.services.base import BaseService, ErrorCode, ServiceResult
from hotelops.services.workflows.approval_request_service import ApprovalRequestService


class EscalationSweepService(BaseService):
    """
    Escalates pending requests whose current assignment is older than the
    threshold configured for their entity type.

    A request's assignment age is measured from its `updated_at`, which is
    set when it is opened and each time it is escalated. Requests younger
    than WORKFLOW_MIN_PENDING_HOURS are never looked at. An inactive rule
    switches escalation off for its entity type; entity types without a
    rule use WORKFLOW_DEFAULT_ESCALATION_HOURS unless
    `use_default_threshold` is False.
    """

    def __init__(
        self,
        db_session: Session,
        clock: Optional[Clock] = None,
        workflow_settings: Optional[WorkflowSettings] = None,
        approvals: Optional[ApprovalRequestService] = None,
    ):
        super().__init__(db_session, clock, workflow_settings)
        self.requests = ApprovalRequestRepository(db_session)
        self.rules = EscalationRuleRepository(db_session)
        self.approvals = approvals or ApprovalRequestService(db_session, self.clock, self.workflow_settings)

    @log_execution_time("hotelops.services.EscalationSweepService")
    def run(self, use_default_threshold: bool = True) -> ServiceResult[EscalationSweepSummary]:
        now = self.clock.now()
        cutoff = now - timedelta(hours=self.workflow_settings.WORKFLOW_MIN_PENDING_HOURS)

        try:
            rules: Dict[str, EscalationRule] = {rule.entity_type: rule for rule in self.rules.list_rules()}
            candidates = [
                (r.id, r.entity_type, ensure_utc(r.updated_at))
                for r in self.requests.find_pending_created_before(cutoff)
            ]
            # release the read before escalations start their own transactions
            self.db.commit()
        except Exception as e:
            self._rollback()
            return self._handle_exception(e, "run escalation sweep")

        summary = EscalationSweepSummary()
        for request_id, entity_type, assigned_at in candidates:
            summary.examined += 1

            threshold = self._threshold_for(entity_type, rules, use_default_threshold)
            if threshold is None:
                continue
            waited_hours = (now - assigned_at).total_seconds() / 3600
            if waited_hours < threshold:
                continue

            result = self.approvals.escalate(request_id)
            if result.is_success:
                summary.escalated += 1
                summary.escalated_request_ids.append(request_id)
            elif result.error_code == ErrorCode.CHAIN_EXHAUSTED:
                summary.exhausted += 1
                summary.exhausted_request_ids.append(request_id)
            else:
                summary.failed += 1
                self._logger.warning(
                    "Escalation failed during sweep",
                    extra={
                        "request_id": request_id,
                        "error_code": result.error_code.value if result.error_code else None,
                    },
                )

        self._logger.info(
            "Escalation sweep finished",
            extra={
                "examined": summary.examined,
                "escalated": summary.escalated,
                "exhausted": summary.exhausted,
                "failed": summary.failed,
            },
        )
        return ServiceResult.success(summary, message="Escalation sweep finished")

    def _threshold_for(
        self,
        entity_type: str,
        rules: Dict[str, EscalationRule],
        use_default_threshold: bool,
    ) -> Optional[int]:
        rule = rules.get(entity_type)
        if rule is not None:
            return rule.threshold_hours if rule.is_active else None
        if use_default_threshold:
            return self.workflow_settings.WORKFLOW_DEFAULT_ESCALATION_HOURS
        return None

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def set_rule(
        self,
        entity_type: Union[EntityKind, str],
        threshold_hours: int,
        is_active: bool = True,
    ) -> ServiceResult[EscalationRuleResponse]:
        """Create or replace the escalation rule of an entity type."""
        try:
            kind = EntityKind(entity_type)
        except ValueError:
            return ServiceResult.validation_failure(
                f"Unknown entity type: {entity_type}",
                field="entity_type",
            )
        if threshold_hours < 1:
            return ServiceResult.validation_failure(
                "threshold_hours must be at least 1",
                field="threshold_hours",
                details={"threshold_hours": threshold_hours},
            )

        try:
            with self.transaction():
                now = self.clock.now()
                rule = self.rules.get_for_entity_type(kind.value)
                if rule is None:
                    rule = self.rules.create({
                        "entity_type": kind.value,
                        "threshold_hours": threshold_hours,
                        "is_active": is_active,
                        "created_at": now,
                        "updated_at": now,
                    })
                else:
                    rule = self.rules.update(rule, {
                        "threshold_hours": threshold_hours,
                        "is_active": is_active,
                        "updated_at": now,
                    })
                response = EscalationRuleResponse.model_validate(rule)
        except Exception as e:
            return self._handle_exception(e, "set escalation rule", kind.value)

        self._logger.info(
            "Escalation rule saved",
            extra={"entity_type": kind.value, "threshold_hours": threshold_hours, "is_active": is_active},
        )
        return ServiceResult.success(response, message="Escalation rule saved")

    def list_rules(self) -> ServiceResult[List[EscalationRuleResponse]]:
        try:
            rules = self.rules.list_rules()
        except Exception as e:
            return self._handle_exception(e, "list escalation rules")
        return ServiceResult.success([EscalationRuleResponse.model_validate(r) for r in rules])
