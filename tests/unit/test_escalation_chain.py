"""
Escalation chain and organization graph tests.
"""

import logging

from hotelops.models.common.enums import AppRole
from hotelops.services.org import EscalationChainBuilder


def _ids(chain):
    return [e.id for e in chain]


class TestEscalationChain:

    def test_linear_chain_nearest_first(self, org, chain_builder):
        org.employee("gm", AppRole.PROPERTY_MANAGER)
        org.employee("head", AppRole.DEPARTMENT_HEAD, reporting_to="gm")
        org.employee("clerk", AppRole.STAFF, reporting_to="head")

        assert _ids(chain_builder.chain("clerk")) == ["head", "gm"]

    def test_top_of_hierarchy_has_empty_chain(self, org, chain_builder):
        org.employee("ceo", AppRole.REGIONAL_ADMIN)
        assert chain_builder.chain("ceo") == []

    def test_unknown_employee_has_empty_chain(self, org, chain_builder):
        assert chain_builder.chain("nobody") == []

    def test_cycle_yields_finite_chain(self, org, chain_builder, caplog):
        org.employee("a", AppRole.DEPARTMENT_HEAD, reporting_to="b")
        org.employee("b", AppRole.PROPERTY_MANAGER, reporting_to="c")
        org.employee("c", AppRole.REGIONAL_HR, reporting_to="a")

        with caplog.at_level(logging.WARNING, logger="hotelops"):
            chain = chain_builder.chain("a")

        assert _ids(chain) == ["b", "c"]
        assert any("cycle" in r.getMessage().lower() for r in caplog.records)

    def test_self_reporting_employee(self, org, chain_builder):
        org.employee("loop", AppRole.STAFF, reporting_to="loop")
        assert chain_builder.chain("loop") == []

    def test_dangling_manager_stops_chain(self, org, chain_builder, caplog):
        org.employee("head", AppRole.DEPARTMENT_HEAD, reporting_to="ghost")
        org.employee("clerk", AppRole.STAFF, reporting_to="head")

        with caplog.at_level(logging.WARNING, logger="hotelops"):
            chain = chain_builder.chain("clerk")

        assert _ids(chain) == ["head"]
        assert any("dangling" in r.getMessage().lower() for r in caplog.records)

    def test_max_depth_truncates(self, org, graph):
        org.employee("e0")
        for i in range(1, 6):
            org.employee(f"e{i}", reporting_to=f"e{i - 1}")

        builder = EscalationChainBuilder(graph, max_depth=3)
        assert _ids(builder.chain("e5")) == ["e4", "e3", "e2"]

    def test_zero_max_depth_is_honoured(self, org, graph):
        org.employee("gm", AppRole.PROPERTY_MANAGER)
        org.employee("clerk", AppRole.STAFF, reporting_to="gm")

        assert EscalationChainBuilder(graph, max_depth=0).chain("clerk") == []
        assert _ids(EscalationChainBuilder(graph).chain("clerk")) == ["gm"]

    def test_chain_reflects_current_data(self, org, chain_builder):
        org.employee("gm", AppRole.PROPERTY_MANAGER)
        org.employee("rm", AppRole.REGIONAL_ADMIN)
        org.employee("clerk", AppRole.STAFF, reporting_to="gm")
        assert _ids(chain_builder.chain("clerk")) == ["gm"]

        org.report("gm", "rm")
        assert _ids(chain_builder.chain("clerk")) == ["gm", "rm"]


class TestOrganizationGraph:

    def test_manager_and_role_lookup(self, org, graph):
        org.employee("gm", AppRole.PROPERTY_MANAGER, property_id="P1")
        org.employee("clerk", reporting_to="gm")

        assert graph.manager_of("clerk").id == "gm"
        assert graph.manager_of("gm") is None
        assert graph.role_of("gm") == AppRole.PROPERTY_MANAGER
        assert graph.role_of("clerk") is None

    def test_direct_reports_only_active_sorted_by_name(self, org, graph):
        org.employee("head", AppRole.DEPARTMENT_HEAD)
        org.employee("zoe", reporting_to="head")
        org.employee("adam", reporting_to="head")
        org.employee("gone", reporting_to="head", is_active=False)

        assert _ids(graph.direct_reports("head")) == ["adam", "zoe"]

    def test_would_create_cycle(self, org, graph):
        org.employee("gm", AppRole.PROPERTY_MANAGER)
        org.employee("head", AppRole.DEPARTMENT_HEAD, reporting_to="gm")
        org.employee("clerk", reporting_to="head")

        assert graph.would_create_cycle("gm", "clerk")
        assert graph.would_create_cycle("gm", "gm")
        assert not graph.would_create_cycle("clerk", "gm")
        assert not graph.would_create_cycle("clerk", None)

    def test_would_create_cycle_tolerates_existing_loop(self, org, graph):
        org.employee("a", reporting_to="b")
        org.employee("b", reporting_to="a")
        org.employee("new")

        assert not graph.would_create_cycle("new", "a")
