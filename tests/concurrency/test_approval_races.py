"""
Race tests against a file-backed SQLite database.

Each worker thread gets its own session and connection; a Barrier releases
them together so the store, not the test ordering, decides the winner.

Skip with: pytest -m "not concurrency"
"""

from concurrent.futures import ThreadPoolExecutor
from threading import Barrier

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker

from hotelops.core.clock import DeterministicClock
from hotelops.models import ApprovalHistory, ApprovalRequest, Base, Employee, LeaveRequest, RoleAssignment
from hotelops.models.common.enums import AppRole, ApprovalStatus
from hotelops.services.base import ErrorCode
from hotelops.services.workflows.approval_request_service import ApprovalRequestService

pytestmark = pytest.mark.concurrency

WORKERS = 8


@pytest.fixture
def file_engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'races.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(file_engine):
    return sessionmaker(bind=file_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def seeded(session_factory):
    with session_factory() as session:
        session.add_all([
            Employee(id="M", full_name="Manager", reporting_to=None),
            Employee(id="E", full_name="Employee", reporting_to="M"),
        ])
        session.flush()
        session.add(RoleAssignment(employee_id="M", role=AppRole.DEPARTMENT_HEAD.value))
        session.add(LeaveRequest(id="LR1", requester_id="E", status="pending"))
        session.commit()
    return session_factory


def _run_concurrently(session_factory, clock, call):
    barrier = Barrier(WORKERS)

    def worker(index):
        session = session_factory()
        try:
            service = ApprovalRequestService(session, clock)
            barrier.wait()
            return call(service, index)
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        return list(pool.map(worker, range(WORKERS)))


class TestConcurrentOpen:

    def test_exactly_one_pending_request(self, seeded):
        clock = DeterministicClock()

        results = _run_concurrently(
            seeded, clock, lambda service, _: service.open("leave_request", "LR1", "E")
        )

        winners = [r for r in results if r.is_success]
        losers = [r for r in results if not r.is_success]
        assert len(winners) == 1
        assert {r.error.code for r in losers} == {ErrorCode.CONFLICT}

        with seeded() as session:
            count = session.execute(
                select(func.count(ApprovalRequest.id)).where(ApprovalRequest.entity_id == "LR1")
            ).scalar_one()
            assert count == 1


class TestConcurrentDecide:

    def test_entity_changes_exactly_once(self, seeded):
        clock = DeterministicClock()
        with seeded() as session:
            request_id = ApprovalRequestService(session, clock).open("leave_request", "LR1", "E").data.id

        decisions = ["approved", "rejected"]
        results = _run_concurrently(
            seeded,
            clock,
            lambda service, i: service.decide(request_id, decisions[i % 2], "M"),
        )

        winners = [r for r in results if r.is_success]
        losers = [r for r in results if not r.is_success]
        assert len(winners) == 1
        assert {r.error.code for r in losers} == {ErrorCode.INVALID_STATE}

        winner = winners[0].data
        with seeded() as session:
            request = session.get(ApprovalRequest, request_id)
            assert request.status == winner.status.value
            assert request.status != ApprovalStatus.PENDING.value
            assert session.get(LeaveRequest, "LR1").status == winner.status.value

            history_rows = session.execute(
                select(func.count(ApprovalHistory.id)).where(ApprovalHistory.approval_request_id == request_id)
            ).scalar_one()
            assert history_rows == 2
