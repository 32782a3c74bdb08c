"""
Temporary delegation management.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from hotelops.core.clock import Clock
from hotelops.core.config import WorkflowSettings
from hotelops.repositories.org import DelegationRepository, EmployeeRepository
from hotelops.schemas.delegation import DelegationCreate, DelegationResponse
from hotelops.services.base import BaseService, ServiceResult


class DelegationService(BaseService):
    """
    Creates and lists temporary delegations.

    Overlapping grants are accepted; the approver resolver decides which one
    applies. Expired grants are left in place.
    """

    def __init__(
        self,
        db_session: Session,
        clock: Optional[Clock] = None,
        workflow_settings: Optional[WorkflowSettings] = None,
    ):
        super().__init__(db_session, clock, workflow_settings)
        self.delegations = DelegationRepository(db_session)
        self.employees = EmployeeRepository(db_session)

    def create_delegation(
        self,
        data: Union[DelegationCreate, Dict[str, Any]],
    ) -> ServiceResult[DelegationResponse]:
        if not isinstance(data, DelegationCreate):
            try:
                data = DelegationCreate.model_validate(data)
            except PydanticValidationError as e:
                field_errors: Dict[str, List[str]] = {}
                for err in e.errors():
                    key = ".".join(str(p) for p in err["loc"]) or "__root__"
                    field_errors.setdefault(key, []).append(err["msg"])
                return ServiceResult.validation_failure(
                    "Invalid delegation",
                    details={"field_errors": field_errors},
                )

        now = self.clock.now()
        if data.end_at <= now:
            return ServiceResult.validation_failure("Delegation must not end in the past", field="end_at")

        max_days = self.workflow_settings.WORKFLOW_MAX_DELEGATION_DAYS
        if data.end_at - data.start_at > timedelta(days=max_days):
            return ServiceResult.validation_failure(
                f"Delegation cannot last longer than {max_days} days",
                field="end_at",
                details={"max_days": max_days},
            )

        try:
            with self.transaction():
                for field, employee_id in (("delegator_id", data.delegator_id), ("delegate_id", data.delegate_id)):
                    employee = self.employees.get(employee_id)
                    if employee is None:
                        return ServiceResult.not_found("Employee", employee_id)
                    if not employee.is_active:
                        return ServiceResult.validation_failure(
                            f"Employee {employee_id} is not active",
                            field=field,
                        )

                delegation = self.delegations.create({
                    "delegator_id": data.delegator_id,
                    "delegate_id": data.delegate_id,
                    "scope_type": data.scope_type.value,
                    "scope_id": data.scope_id,
                    "start_at": data.start_at,
                    "end_at": data.end_at,
                    "created_at": now,
                    "updated_at": now,
                })
                response = DelegationResponse.model_validate(delegation)
        except Exception as e:
            return self._handle_exception(e, "create delegation", data.delegator_id)

        self._logger.info(
            "Delegation created",
            extra={
                "delegation_id": response.id,
                "delegator_id": response.delegator_id,
                "delegate_id": response.delegate_id,
                "scope_type": response.scope_type.value,
            },
        )
        return ServiceResult.success(response, message="Delegation created")

    def active_delegations(self, now: Optional[datetime] = None) -> ServiceResult[List[DelegationResponse]]:
        """Grants active at `now` (defaults to the service clock), newest first."""
        try:
            grants = self.delegations.list_active(now or self.clock.now())
        except Exception as e:
            return self._handle_exception(e, "list active delegations")
        return ServiceResult.success([DelegationResponse.model_validate(g) for g in grants])

    def delegations_for(self, delegator_id: str) -> ServiceResult[List[DelegationResponse]]:
        """Grants the employee has currently given away."""
        try:
            grants = self.delegations.find_active_for_delegator(delegator_id, self.clock.now())
        except Exception as e:
            return self._handle_exception(e, "list delegations", delegator_id)
        return ServiceResult.success([DelegationResponse.model_validate(g) for g in grants])
