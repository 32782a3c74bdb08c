"""
Status transition rules for stateful entities.

One table per entity kind maps a status to the set of statuses it may move
to. A status with an empty set is terminal. Lookups never raise: a kind or
status missing from the table is a configuration defect, logged at ERROR
and reported as an invalid transition.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional, Union

from hotelops.core.exceptions import ConfigurationError
from hotelops.core.logging import get_logger
from hotelops.models.common.enums import ApprovalDecision, EntityKind, EntityStatus

logger = get_logger(__name__)

S = EntityStatus

TRANSITIONS: Dict[EntityKind, Dict[EntityStatus, FrozenSet[EntityStatus]]] = {
    EntityKind.TASK: {
        S.OPEN: frozenset({S.IN_PROGRESS, S.CANCELLED}),
        S.IN_PROGRESS: frozenset({S.COMPLETED, S.CANCELLED, S.ON_HOLD}),
        S.ON_HOLD: frozenset({S.IN_PROGRESS, S.CANCELLED}),
        S.COMPLETED: frozenset(),
        S.CANCELLED: frozenset(),
    },
    EntityKind.MAINTENANCE_TICKET: {
        S.OPEN: frozenset({S.IN_PROGRESS, S.CANCELLED}),
        S.IN_PROGRESS: frozenset({S.COMPLETED, S.PENDING_PARTS, S.ON_HOLD, S.CANCELLED}),
        S.PENDING_PARTS: frozenset({S.IN_PROGRESS, S.COMPLETED, S.CANCELLED}),
        S.ON_HOLD: frozenset({S.IN_PROGRESS, S.CANCELLED}),
        S.COMPLETED: frozenset({S.CLOSED}),
        S.CLOSED: frozenset(),
        S.CANCELLED: frozenset(),
    },
    EntityKind.LEAVE_REQUEST: {
        S.PENDING: frozenset({S.APPROVED, S.REJECTED, S.CANCELLED}),
        S.APPROVED: frozenset({S.CANCELLED}),
        S.REJECTED: frozenset(),
        S.CANCELLED: frozenset(),
    },
    EntityKind.JOB_POSTING: {
        S.DRAFT: frozenset({S.OPEN, S.CANCELLED}),
        S.OPEN: frozenset({S.FILLED, S.CLOSED, S.ON_HOLD, S.CANCELLED}),
        S.ON_HOLD: frozenset({S.OPEN, S.CANCELLED}),
        S.FILLED: frozenset({S.CLOSED}),
        S.CLOSED: frozenset(),
        S.CANCELLED: frozenset(),
    },
}

# Entity status an approval decision moves the gated entity to.
DECISION_TARGETS: Dict[EntityKind, Dict[ApprovalDecision, EntityStatus]] = {
    EntityKind.LEAVE_REQUEST: {
        ApprovalDecision.APPROVED: S.APPROVED,
        ApprovalDecision.REJECTED: S.REJECTED,
    },
    EntityKind.JOB_POSTING: {
        ApprovalDecision.APPROVED: S.OPEN,
        ApprovalDecision.REJECTED: S.CANCELLED,
    },
    EntityKind.TASK: {
        ApprovalDecision.APPROVED: S.COMPLETED,
        ApprovalDecision.REJECTED: S.CANCELLED,
    },
    EntityKind.MAINTENANCE_TICKET: {
        ApprovalDecision.APPROVED: S.CLOSED,
        ApprovalDecision.REJECTED: S.CANCELLED,
    },
}


@dataclass(frozen=True)
class TransitionCheck:
    is_valid: bool
    reason: Optional[str] = None
    config_error: bool = False

    def __bool__(self) -> bool:
        return self.is_valid


KindLike = Union[EntityKind, str]
StatusLike = Union[EntityStatus, str]


def _lookup(kind: KindLike, status: StatusLike) -> Optional[FrozenSet[EntityStatus]]:
    """Allowed next statuses, or None when the table has no such row."""
    try:
        table = TRANSITIONS[EntityKind(kind)]
        return table[EntityStatus(status)]
    except (KeyError, ValueError):
        return None


def _config_defect(kind: KindLike, status: StatusLike) -> str:
    message = f"No transition rules for {_value(kind)} in status {_value(status)}"
    logger.error(
        "Status transition table has no entry",
        extra={"entity_kind": _value(kind), "from_status": _value(status)},
    )
    return message


def _value(item: Union[Enum, str]) -> str:
    return item.value if isinstance(item, Enum) else str(item)


def next_statuses(kind: KindLike, from_status: StatusLike) -> FrozenSet[EntityStatus]:
    allowed = _lookup(kind, from_status)
    if allowed is None:
        _config_defect(kind, from_status)
        return frozenset()
    return allowed


def is_terminal(kind: KindLike, status: StatusLike) -> bool:
    """True for a known status with no outgoing transitions."""
    allowed = _lookup(kind, status)
    if allowed is None:
        _config_defect(kind, status)
        return False
    return not allowed


def validate_transition(
    kind: KindLike,
    from_status: StatusLike,
    to_status: StatusLike,
) -> TransitionCheck:
    allowed = _lookup(kind, from_status)
    if allowed is None:
        return TransitionCheck(False, _config_defect(kind, from_status), config_error=True)

    try:
        target = EntityStatus(to_status)
    except ValueError:
        return TransitionCheck(False, f"Unknown status {_value(to_status)}")

    if target in allowed:
        return TransitionCheck(True)
    return TransitionCheck(False, transition_error_message(kind, from_status, to_status))


def transition_error_message(
    kind: KindLike,
    from_status: StatusLike,
    to_status: StatusLike,
) -> str:
    """Human-readable explanation of why a transition is refused."""
    src = _value(from_status)
    dst = _value(to_status)
    allowed = _lookup(kind, from_status)
    if allowed is None:
        return f'Unknown status "{src}" for {_value(kind).replace("_", " ")}'
    if not allowed:
        return f'Cannot change status from "{src}" - this is a final state.'

    options = ", ".join(sorted(s.value for s in allowed))
    entity_name = _value(kind).replace("_", " ")
    return f'Cannot transition {entity_name} from "{src}" to "{dst}". Valid options: {options}'


def can_cancel(kind: KindLike, status: StatusLike) -> bool:
    return S.CANCELLED in next_statuses(kind, status)


def can_complete(kind: KindLike, status: StatusLike) -> bool:
    return S.COMPLETED in next_statuses(kind, status)


def can_put_on_hold(kind: KindLike, status: StatusLike) -> bool:
    return S.ON_HOLD in next_statuses(kind, status)


def can_reopen(kind: KindLike, status: StatusLike) -> bool:
    allowed = next_statuses(kind, status)
    return S.OPEN in allowed or S.IN_PROGRESS in allowed


def reachable_terminal_statuses(kind: KindLike, from_status: StatusLike) -> FrozenSet[EntityStatus]:
    """Terminal statuses reachable from `from_status` (breadth-first)."""
    if _lookup(kind, from_status) is None:
        _config_defect(kind, from_status)
        return frozenset()

    start = EntityStatus(from_status)
    seen = {start}
    queue = deque([start])
    terminals = set()
    while queue:
        status = queue.popleft()
        allowed = _lookup(kind, status) or frozenset()
        if not allowed:
            terminals.add(status)
        for nxt in allowed:
            if nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return frozenset(terminals)


def decision_target(kind: KindLike, decision: Union[ApprovalDecision, str]) -> EntityStatus:
    """
    Entity status an approval decision leads to.

    Raises ConfigurationError for a kind without decision rules.
    """
    try:
        return DECISION_TARGETS[EntityKind(kind)][ApprovalDecision(decision)]
    except (KeyError, ValueError):
        raise ConfigurationError(
            f"No decision rule for {_value(kind)} / {_value(decision)}",
            config_key="DECISION_TARGETS",
            config_value=_value(kind),
        ) from None


def assert_table_consistency() -> None:
    """
    Check every transition target is itself a row of the same table.

    Raises ConfigurationError on the first inconsistency.
    """
    for kind in EntityKind:
        table = TRANSITIONS.get(kind)
        if table is None:
            raise ConfigurationError(
                f"Entity kind {kind.value} has no transition table",
                config_key="TRANSITIONS",
                config_value=kind.value,
            )
        for status, targets in table.items():
            missing = [t.value for t in targets if t not in table]
            if missing:
                raise ConfigurationError(
                    f"{kind.value}: {status.value} leads to statuses without rules: {missing}",
                    config_key="TRANSITIONS",
                    config_value=kind.value,
                )
        for decision, target in DECISION_TARGETS.get(kind, {}).items():
            if target not in table:
                raise ConfigurationError(
                    f"{kind.value}: decision {decision.value} targets unknown status {target.value}",
                    config_key="DECISION_TARGETS",
                    config_value=kind.value,
                )


__all__ = [
    "TRANSITIONS",
    "DECISION_TARGETS",
    "TransitionCheck",
    "next_statuses",
    "is_terminal",
    "validate_transition",
    "transition_error_message",
    "can_cancel",
    "can_complete",
    "can_put_on_hold",
    "can_reopen",
    "reachable_terminal_statuses",
    "decision_target",
    "assert_table_consistency",
]
