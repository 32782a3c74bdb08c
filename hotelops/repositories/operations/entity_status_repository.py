# hotelops/repositories/operations/entity_status_repository.py
from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional, Type

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hotelops.core.exceptions import ConfigurationError, handle_database_exception
from hotelops.models.base import BaseEntity
from hotelops.models.common.enums import EntityKind, EntityStatus
from hotelops.models.leave import LeaveRequest
from hotelops.models.maintenance import MaintenanceTicket
from hotelops.models.recruitment import JobPosting
from hotelops.models.tasks import Task


MODEL_BY_KIND: Dict[EntityKind, Type[BaseEntity]] = {
    EntityKind.TASK: Task,
    EntityKind.MAINTENANCE_TICKET: MaintenanceTicket,
    EntityKind.LEAVE_REQUEST: LeaveRequest,
    EntityKind.JOB_POSTING: JobPosting,
}


class EntityStatusRepository:
    """
    Status access for every stateful entity kind through one interface.

    Only the `status` column is read or written here; the rest of each
    entity belongs to the modules that own it.
    """

    def __init__(self, session: Session):
        self.session = session

    def _model_for(self, kind: EntityKind) -> Type[BaseEntity]:
        try:
            return MODEL_BY_KIND[kind]
        except KeyError:
            raise ConfigurationError(
                f"No table registered for entity kind {kind!r}",
                config_key="MODEL_BY_KIND",
                config_value=kind,
            ) from None

    def get_status(self, kind: EntityKind, entity_id: str) -> Optional[EntityStatus]:
        """Current status, or None when the entity does not exist."""
        model = self._model_for(kind)
        try:
            raw = self.session.execute(
                select(model.status).where(model.id == entity_id)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise handle_database_exception(e, operation="get_status") from e
        if raw is None:
            return None
        try:
            return EntityStatus(raw)
        except ValueError:
            raise ConfigurationError(
                f"Unknown status {raw!r} stored for {kind.value} {entity_id}",
                config_key="status",
                config_value=raw,
            ) from None

    def compare_and_set_status(
        self,
        kind: EntityKind,
        entity_id: str,
        expected: EntityStatus,
        new: EntityStatus,
        now: datetime,
    ) -> bool:
        """Set `new` only if the row still holds `expected`."""
        model = self._model_for(kind)
        stmt = (
            update(model)
            .where(model.id == entity_id, model.status == expected.value)
            .values(status=new.value, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise handle_database_exception(e, operation="compare_and_set_status") from e
        return (result.rowcount or 0) == 1
