"""
Pytest fixtures for the approval core test suite.

Provides:
- In-memory SQLite engine and a session per test
- A DeterministicClock shared by every service under test
- `org` builder for employees, roles, delegations and gated entities
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from hotelops.core.clock import DeterministicClock
from hotelops.core.config import WorkflowSettings
from hotelops.models import (
    Base,
    Employee,
    JobPosting,
    LeaveRequest,
    MaintenanceTicket,
    RoleAssignment,
    Task,
    TemporaryDelegation,
)
from hotelops.models.common.enums import AppRole, DelegationScope
from hotelops.services.delegation import DelegationService
from hotelops.services.org import EscalationChainBuilder, OrganizationGraph
from hotelops.services.workflows.approval_request_service import ApprovalRequestService
from hotelops.services.workflows.approver_resolver import ApproverResolver
from hotelops.services.workflows.escalation_sweep_service import EscalationSweepService
from hotelops.repositories.org import DelegationRepository


START_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine) -> Session:
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = factory()
    yield session
    session.close()


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(START_TIME)


@pytest.fixture
def workflow_settings() -> WorkflowSettings:
    return WorkflowSettings(
        WORKFLOW_MAX_ESCALATION_DEPTH=20,
        WORKFLOW_DEFAULT_ESCALATION_HOURS=48,
        WORKFLOW_MIN_PENDING_HOURS=1,
        WORKFLOW_MAX_DELEGATION_DAYS=90,
    )


# =============================================================================
# Builders
# =============================================================================


class OrgBuilder:
    """Inserts fixture rows and commits immediately."""

    def __init__(self, session: Session, clock: DeterministicClock):
        self.session = session
        self.clock = clock
        self._tick = 0

    def _stamp(self) -> datetime:
        # distinct, increasing creation times without moving the shared clock
        self._tick += 1
        return self.clock.now() - timedelta(days=365) + timedelta(seconds=self._tick)

    def _save(self, obj):
        self.session.add(obj)
        self.session.commit()
        return obj

    def employee(
        self,
        employee_id: str,
        role: Optional[AppRole] = None,
        reporting_to: Optional[str] = None,
        property_id: Optional[str] = None,
        is_active: bool = True,
    ) -> Employee:
        stamp = self._stamp()
        employee = Employee(
            id=employee_id,
            full_name=employee_id.replace("-", " ").title(),
            email=f"{employee_id}@hotel.example",
            reporting_to=reporting_to,
            is_active=is_active,
            created_at=stamp,
            updated_at=stamp,
        )
        self.session.add(employee)
        if role is not None:
            self.session.add(RoleAssignment(
                employee_id=employee_id,
                role=role.value,
                property_id=property_id,
                created_at=stamp,
                updated_at=stamp,
            ))
        self.session.commit()
        return employee

    def report(self, employee_id: str, manager_id: Optional[str]) -> None:
        employee = self.session.get(Employee, employee_id)
        employee.reporting_to = manager_id
        self.session.commit()

    def deactivate(self, employee_id: str) -> None:
        employee = self.session.get(Employee, employee_id)
        employee.is_active = False
        self.session.commit()

    def delegation(
        self,
        delegator_id: str,
        delegate_id: str,
        scope_type: DelegationScope = DelegationScope.ALL,
        scope_id: Optional[str] = None,
        start_at: Optional[datetime] = None,
        end_at: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
    ) -> TemporaryDelegation:
        now = self.clock.now()
        stamp = created_at or self._stamp()
        return self._save(TemporaryDelegation(
            delegator_id=delegator_id,
            delegate_id=delegate_id,
            scope_type=scope_type.value,
            scope_id=scope_id,
            start_at=start_at or now - timedelta(days=1),
            end_at=end_at or now + timedelta(days=7),
            created_at=stamp,
            updated_at=stamp,
        ))

    def leave_request(self, requester_id: str, entity_id: str = "LR1", status: str = "pending") -> LeaveRequest:
        return self._save(LeaveRequest(id=entity_id, requester_id=requester_id, status=status))

    def task(self, entity_id: str = "T1", status: str = "open") -> Task:
        return self._save(Task(id=entity_id, title="Restock minibars", status=status))

    def job_posting(self, entity_id: str = "JP1", status: str = "draft") -> JobPosting:
        return self._save(JobPosting(id=entity_id, title="Night auditor", status=status))

    def maintenance_ticket(self, entity_id: str = "MT1", status: str = "open") -> MaintenanceTicket:
        return self._save(MaintenanceTicket(id=entity_id, title="Leaking tap, room 204", status=status))

    def status_of(self, model, entity_id: str) -> str:
        self.session.expire_all()
        return self.session.get(model, entity_id).status


@pytest.fixture
def org(session, clock) -> OrgBuilder:
    return OrgBuilder(session, clock)


# =============================================================================
# Service fixtures
# =============================================================================


@pytest.fixture
def graph(session) -> OrganizationGraph:
    return OrganizationGraph(session)


@pytest.fixture
def chain_builder(graph, workflow_settings) -> EscalationChainBuilder:
    return EscalationChainBuilder(graph, max_depth=workflow_settings.WORKFLOW_MAX_ESCALATION_DEPTH)


@pytest.fixture
def resolver(session, graph, clock) -> ApproverResolver:
    return ApproverResolver(graph, DelegationRepository(session), clock)


@pytest.fixture
def approvals(session, clock, workflow_settings) -> ApprovalRequestService:
    return ApprovalRequestService(session, clock, workflow_settings)


@pytest.fixture
def sweep(session, clock, workflow_settings, approvals) -> EscalationSweepService:
    return EscalationSweepService(session, clock, workflow_settings, approvals=approvals)


@pytest.fixture
def delegation_service(session, clock, workflow_settings) -> DelegationService:
    return DelegationService(session, clock, workflow_settings)
