"""
Status transition table tests.

Covers the per-kind tables, terminal detection, reachability and the
behaviour for kinds or statuses missing from the table.
"""

import logging

import pytest

from hotelops.core.exceptions import ConfigurationError
from hotelops.models.common.enums import ApprovalDecision, EntityKind, EntityStatus
from hotelops.services.workflows import status_transitions as st
from hotelops.services.workflows.status_transitions import TRANSITIONS


S = EntityStatus


class TestTableShape:

    @pytest.mark.parametrize("kind", list(EntityKind))
    def test_terminal_iff_no_next_statuses(self, kind):
        for status, targets in TRANSITIONS[kind].items():
            assert st.is_terminal(kind, status) == (len(st.next_statuses(kind, status)) == 0)
            assert st.next_statuses(kind, status) == targets

    def test_every_kind_has_a_table(self):
        assert set(TRANSITIONS) == set(EntityKind)

    def test_table_is_consistent(self):
        st.assert_table_consistency()

    def test_task_reachable_terminals(self):
        assert st.reachable_terminal_statuses(EntityKind.TASK, S.OPEN) == {S.COMPLETED, S.CANCELLED}

    def test_maintenance_ticket_reachable_terminals(self):
        assert st.reachable_terminal_statuses(EntityKind.MAINTENANCE_TICKET, S.OPEN) == {S.CLOSED, S.CANCELLED}

    def test_terminal_status_reaches_itself(self):
        assert st.reachable_terminal_statuses(EntityKind.LEAVE_REQUEST, S.REJECTED) == {S.REJECTED}


class TestValidateTransition:

    def test_job_posting_filled_to_open_is_invalid(self):
        check = st.validate_transition(EntityKind.JOB_POSTING, S.FILLED, S.OPEN)
        assert not check.is_valid
        assert not check.config_error
        assert "closed" in check.reason

    def test_leave_request_pending_to_approved_is_valid(self):
        check = st.validate_transition(EntityKind.LEAVE_REQUEST, S.PENDING, S.APPROVED)
        assert check.is_valid
        assert check.reason is None

    def test_accepts_plain_strings(self):
        assert st.validate_transition("maintenance_ticket", "completed", "closed").is_valid
        assert not st.validate_transition("maintenance_ticket", "completed", "open").is_valid

    def test_terminal_status_message(self):
        check = st.validate_transition(EntityKind.TASK, S.COMPLETED, S.OPEN)
        assert not check.is_valid
        assert "final state" in check.reason

    def test_status_not_in_kind_table_is_config_defect(self, caplog):
        with caplog.at_level(logging.ERROR, logger="hotelops"):
            check = st.validate_transition(EntityKind.TASK, S.DRAFT, S.OPEN)

        assert not check.is_valid
        assert check.config_error
        assert any(r.levelno == logging.ERROR for r in caplog.records)

    def test_unknown_kind_never_raises(self):
        check = st.validate_transition("spa_booking", "open", "closed")
        assert not check.is_valid
        assert check.config_error
        assert st.next_statuses("spa_booking", "open") == frozenset()
        assert st.is_terminal("spa_booking", "open") is False

    def test_unknown_target_status(self):
        check = st.validate_transition(EntityKind.TASK, S.OPEN, "teleported")
        assert not check.is_valid
        assert not check.config_error


class TestMessagesAndHelpers:

    def test_error_message_lists_valid_options(self):
        message = st.transition_error_message(EntityKind.TASK, S.OPEN, S.COMPLETED)
        assert message == 'Cannot transition task from "open" to "completed". Valid options: cancelled, in_progress'

    def test_helpers(self):
        assert st.can_cancel(EntityKind.LEAVE_REQUEST, S.APPROVED)
        assert not st.can_cancel(EntityKind.LEAVE_REQUEST, S.REJECTED)
        assert st.can_complete(EntityKind.MAINTENANCE_TICKET, S.PENDING_PARTS)
        assert not st.can_complete(EntityKind.TASK, S.OPEN)
        assert st.can_put_on_hold(EntityKind.JOB_POSTING, S.OPEN)
        assert not st.can_put_on_hold(EntityKind.JOB_POSTING, S.DRAFT)
        assert st.can_reopen(EntityKind.TASK, S.ON_HOLD)
        assert st.can_reopen(EntityKind.JOB_POSTING, S.ON_HOLD)
        assert not st.can_reopen(EntityKind.TASK, S.CANCELLED)


class TestDecisionTargets:

    @pytest.mark.parametrize(
        "kind, approved, rejected",
        [
            (EntityKind.LEAVE_REQUEST, S.APPROVED, S.REJECTED),
            (EntityKind.JOB_POSTING, S.OPEN, S.CANCELLED),
            (EntityKind.TASK, S.COMPLETED, S.CANCELLED),
            (EntityKind.MAINTENANCE_TICKET, S.CLOSED, S.CANCELLED),
        ],
    )
    def test_decision_targets(self, kind, approved, rejected):
        assert st.decision_target(kind, ApprovalDecision.APPROVED) == approved
        assert st.decision_target(kind, "rejected") == rejected

    def test_unknown_kind_raises_configuration_error(self):
        with pytest.raises(ConfigurationError):
            st.decision_target("spa_booking", ApprovalDecision.APPROVED)
