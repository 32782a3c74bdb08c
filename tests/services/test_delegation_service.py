"""
Delegation management validation.
"""

from datetime import timedelta

import pytest

from hotelops.models.common.enums import AppRole, DelegationScope
from hotelops.schemas.delegation import DelegationCreate
from hotelops.services.base import ErrorCode


@pytest.fixture
def staff(org):
    org.employee("mgr", AppRole.DEPARTMENT_HEAD)
    org.employee("deputy", AppRole.DEPARTMENT_HEAD)
    org.employee("retired", is_active=False)
    return org


def _payload(clock, **overrides):
    data = {
        "delegator_id": "mgr",
        "delegate_id": "deputy",
        "scope_type": "all",
        "start_at": clock.now(),
        "end_at": clock.now() + timedelta(days=7),
    }
    data.update(overrides)
    return data


class TestCreateDelegation:

    def test_create_and_list(self, staff, delegation_service, clock):
        result = delegation_service.create_delegation(_payload(clock))
        assert result.is_success
        assert result.data.scope_type == DelegationScope.ALL

        active = delegation_service.active_delegations().data
        assert [d.id for d in active] == [result.data.id]
        assert [d.delegate_id for d in delegation_service.delegations_for("mgr").data] == ["deputy"]

    def test_accepts_schema_instance(self, staff, delegation_service, clock):
        data = DelegationCreate(**_payload(clock, scope_type="property", scope_id="P1"))
        assert delegation_service.create_delegation(data).data.scope_id == "P1"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"delegate_id": "mgr"},
            {"scope_type": "property"},
            {"scope_id": "P1"},
            {"scope_type": "everything"},
        ],
    )
    def test_schema_validation(self, staff, delegation_service, clock, overrides):
        result = delegation_service.create_delegation(_payload(clock, **overrides))
        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert result.error.details["field_errors"]

    def test_end_before_start(self, staff, delegation_service, clock):
        result = delegation_service.create_delegation(
            _payload(clock, end_at=clock.now() - timedelta(hours=1))
        )
        assert result.error.code == ErrorCode.VALIDATION_ERROR

    def test_window_in_the_past(self, staff, delegation_service, clock):
        result = delegation_service.create_delegation(
            _payload(clock, start_at=clock.now() - timedelta(days=3), end_at=clock.now() - timedelta(days=1))
        )
        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert result.error.field == "end_at"

    def test_too_long(self, staff, delegation_service, clock):
        result = delegation_service.create_delegation(_payload(clock, end_at=clock.now() + timedelta(days=91)))
        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert result.error.details["max_days"] == 90

    def test_unknown_delegate(self, staff, delegation_service, clock):
        result = delegation_service.create_delegation(_payload(clock, delegate_id="ghost"))
        assert result.error.code == ErrorCode.NOT_FOUND

    def test_inactive_delegate(self, staff, delegation_service, clock):
        result = delegation_service.create_delegation(_payload(clock, delegate_id="retired"))
        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert result.error.field == "delegate_id"

    def test_overlapping_delegations_allowed(self, staff, delegation_service, clock):
        assert delegation_service.create_delegation(_payload(clock)).is_success
        assert delegation_service.create_delegation(_payload(clock)).is_success
        assert len(delegation_service.active_delegations().data) == 2

    def test_expired_grants_drop_out_of_active_list(self, staff, delegation_service, clock):
        delegation_service.create_delegation(_payload(clock, end_at=clock.now() + timedelta(days=1)))
        clock.advance(days=2)
        assert delegation_service.active_delegations().data == []
