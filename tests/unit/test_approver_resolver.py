"""
Approver resolution priority: delegation, direct manager, role fallback.
"""

from datetime import timedelta

from hotelops.models.common.enums import AppRole, ApproverSource, DelegationScope


class TestDelegation:

    def test_delegation_beats_authorized_manager(self, org, resolver):
        org.employee("mgr", AppRole.DEPARTMENT_HEAD)
        org.employee("deputy", AppRole.DEPARTMENT_HEAD)
        org.employee("emp", AppRole.STAFF, reporting_to="mgr")
        org.delegation("mgr", "deputy")

        resolution = resolver.resolve("emp")
        assert resolution.approver_id == "deputy"
        assert resolution.source == ApproverSource.DELEGATION
        assert resolution.delegator_id == "mgr"

    def test_expired_and_future_delegations_ignored(self, org, resolver, clock):
        now = clock.now()
        org.employee("mgr", AppRole.DEPARTMENT_HEAD)
        org.employee("deputy")
        org.employee("emp", reporting_to="mgr")
        org.delegation("mgr", "deputy", start_at=now - timedelta(days=10), end_at=now - timedelta(days=1))
        org.delegation("mgr", "deputy", start_at=now + timedelta(hours=1), end_at=now + timedelta(days=3))

        resolution = resolver.resolve("emp")
        assert resolution.source == ApproverSource.DIRECT_MANAGER
        assert resolution.approver_id == "mgr"

    def test_delegation_window_bounds_are_inclusive(self, org, resolver, clock):
        now = clock.now()
        org.employee("deputy")
        org.employee("emp")
        org.delegation("mgr", "deputy", start_at=now, end_at=now + timedelta(hours=2))

        assert resolver.resolve("emp").approver_id == "deputy"
        clock.advance(hours=2)
        assert resolver.resolve("emp").approver_id == "deputy"
        clock.advance(seconds=1)
        assert resolver.resolve("emp") is None

    def test_property_scope_beats_all_scope(self, org, resolver, clock):
        org.employee("emp")
        org.employee("global-deputy")
        org.employee("property-deputy")
        org.delegation("mgr", "global-deputy", DelegationScope.ALL)
        org.delegation("mgr", "property-deputy", DelegationScope.PROPERTY, "P1")

        assert resolver.resolve("emp", scope_id="P1").approver_id == "property-deputy"

    def test_scoped_delegation_not_used_without_scope(self, org, resolver):
        org.employee("emp")
        org.employee("property-deputy")
        org.delegation("mgr", "property-deputy", DelegationScope.PROPERTY, "P1")

        assert resolver.resolve("emp") is None

    def test_delegation_for_other_scope_not_used(self, org, resolver):
        org.employee("emp")
        org.employee("property-deputy")
        org.delegation("mgr", "property-deputy", DelegationScope.PROPERTY, "P2")

        assert resolver.resolve("emp", scope_id="P1") is None

    def test_most_recent_delegation_wins_within_same_scope(self, org, resolver, clock):
        org.employee("emp")
        org.employee("older")
        org.employee("newer")
        org.delegation("mgr", "older", created_at=clock.now() - timedelta(days=2))
        org.delegation("mgr", "newer", created_at=clock.now() - timedelta(days=1))

        assert resolver.resolve("emp").approver_id == "newer"

    def test_inactive_delegate_skipped(self, org, resolver):
        org.employee("mgr", AppRole.DEPARTMENT_HEAD)
        org.employee("deputy", is_active=False)
        org.employee("emp", reporting_to="mgr")
        org.delegation("mgr", "deputy")

        assert resolver.resolve("emp").approver_id == "mgr"

    def test_requester_never_resolves_to_self_via_delegation(self, org, resolver):
        org.employee("mgr", AppRole.DEPARTMENT_HEAD)
        org.employee("emp", reporting_to="mgr")
        org.delegation("mgr", "emp")

        assert resolver.resolve("emp").approver_id == "mgr"


class TestDirectManager:

    def test_authorized_manager(self, org, resolver):
        org.employee("mgr", AppRole.PROPERTY_HR)
        org.employee("emp", reporting_to="mgr")

        resolution = resolver.resolve("emp")
        assert resolution.approver_id == "mgr"
        assert resolution.source == ApproverSource.DIRECT_MANAGER
        assert resolution.delegator_id is None

    def test_staff_manager_falls_through_to_role(self, org, resolver):
        org.employee("lead", AppRole.STAFF)
        org.employee("admin", AppRole.REGIONAL_ADMIN)
        org.employee("emp", reporting_to="lead")

        resolution = resolver.resolve("emp")
        assert resolution.approver_id == "admin"
        assert resolution.source == ApproverSource.ROLE_FALLBACK

    def test_inactive_manager_skipped(self, org, resolver):
        org.employee("mgr", AppRole.DEPARTMENT_HEAD, is_active=False)
        org.employee("admin", AppRole.REGIONAL_ADMIN)
        org.employee("emp", reporting_to="mgr")

        assert resolver.resolve("emp").approver_id == "admin"

    def test_dangling_manager_falls_through(self, org, resolver):
        org.employee("admin", AppRole.REGIONAL_ADMIN)
        org.employee("emp", reporting_to="ghost")

        assert resolver.resolve("emp").approver_id == "admin"


class TestRoleFallback:

    def test_property_hr_for_scope(self, org, resolver):
        org.employee("hr-other", AppRole.PROPERTY_HR, property_id="P2")
        org.employee("hr-any", AppRole.PROPERTY_HR)
        org.employee("hr-p1", AppRole.PROPERTY_HR, property_id="P1")
        org.employee("emp")

        resolution = resolver.resolve("emp", scope_id="P1")
        assert resolution.approver_id == "hr-p1"
        assert resolution.source == ApproverSource.ROLE_FALLBACK

    def test_unscoped_property_hr_when_none_for_property(self, org, resolver):
        org.employee("hr-other", AppRole.PROPERTY_HR, property_id="P2")
        org.employee("hr-any", AppRole.PROPERTY_HR)
        org.employee("emp")

        assert resolver.resolve("emp", scope_id="P1").approver_id == "hr-any"

    def test_regional_admin_without_scope_oldest_assignment_first(self, org, resolver):
        org.employee("admin-1", AppRole.REGIONAL_ADMIN)
        org.employee("admin-2", AppRole.REGIONAL_ADMIN)
        org.employee("emp")

        assert resolver.resolve("emp").approver_id == "admin-1"

    def test_nobody_available(self, org, resolver):
        org.employee("emp")
        assert resolver.resolve("emp") is None

    def test_unknown_requester_resolves_to_none(self, org, resolver):
        org.employee("admin", AppRole.REGIONAL_ADMIN)
        assert resolver.resolve("ghost") is None

    def test_requester_is_not_their_own_fallback(self, org, resolver):
        org.employee("admin", AppRole.REGIONAL_ADMIN)
        assert resolver.resolve("admin") is None
