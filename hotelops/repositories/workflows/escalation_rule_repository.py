# hotelops/repositories/workflows/escalation_rule_repository.py
from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from hotelops.models.workflows import EscalationRule
from hotelops.repositories.base import BaseRepository


class EscalationRuleRepository(BaseRepository[EscalationRule]):
    def __init__(self, session: Session):
        super().__init__(session, EscalationRule)

    def get_for_entity_type(self, entity_type: str) -> Optional[EscalationRule]:
        stmt = self._base_select().where(EscalationRule.entity_type == entity_type)
        with self._guard("get_for_entity_type"):
            return self.session.execute(stmt).scalar_one_or_none()

    def list_rules(self) -> List[EscalationRule]:
        return list(self.get_multi(limit=0, order_by=[EscalationRule.entity_type]))
