# hotelops/repositories/base.py
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterable, Iterator, Optional, Sequence, Type, TypeVar

from sqlalchemy import Select, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from hotelops.core.exceptions import DuplicateEntryError, handle_database_exception
from hotelops.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository with common CRUD and query helpers.

    - Does not commit/rollback; caller manages transactions.
    - Store failures surface as StoreError (retryable); unique-constraint
      violations as DuplicateEntryError.
    """

    def __init__(self, session: Session, model: Type[ModelType]):
        self.session = session
        self.model = model

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except IntegrityError as e:
            raise DuplicateEntryError(
                f"{self.model.__name__} violates a unique constraint",
                operation=operation,
                table=self.model.__tablename__,
            ) from e
        except SQLAlchemyError as e:
            raise handle_database_exception(e, operation=operation) from e

    def _base_select(self) -> Select[tuple[ModelType]]:
        return select(self.model)

    def _apply_filters(
        self,
        stmt,
        filters: Optional[Dict[str, Any]] = None,
    ):
        if not filters:
            return stmt

        for key, value in filters.items():
            column = getattr(self.model, key, None)
            if column is None:
                continue

            if value is None:
                stmt = stmt.where(column.is_(None))
            elif isinstance(value, (list, tuple, set, frozenset)):
                stmt = stmt.where(column.in_(value))
            else:
                stmt = stmt.where(column == value)
        return stmt

    # ------------------------------------------------------------------ #
    # Basic CRUD
    # ------------------------------------------------------------------ #
    def get(self, id_: str) -> Optional[ModelType]:
        with self._guard("get"):
            stmt = self._base_select().where(self.model.id == id_)
            return self.session.execute(stmt).scalar_one_or_none()

    def get_multi(
        self,
        *,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[Iterable[Any]] = None,
    ) -> Sequence[ModelType]:
        stmt = self._base_select()
        stmt = self._apply_filters(stmt, filters)

        if order_by:
            stmt = stmt.order_by(*order_by)

        if skip:
            stmt = stmt.offset(skip)
        if limit:
            stmt = stmt.limit(limit)

        with self._guard("get_multi"):
            return self.session.execute(stmt).scalars().all()

    def create(self, obj_in: Dict[str, Any] | ModelType) -> ModelType:
        if isinstance(obj_in, self.model):
            db_obj = obj_in
        else:
            db_obj = self.model(**obj_in)  # type: ignore[arg-type]
        with self._guard("create"):
            self.session.add(db_obj)
            # flush to populate PK and hit unique constraints now
            self.session.flush()
        return db_obj

    def update(
        self,
        db_obj: ModelType,
        obj_in: Dict[str, Any],
    ) -> ModelType:
        for field, value in obj_in.items():
            if hasattr(db_obj, field) and field != "id":
                setattr(db_obj, field, value)

        with self._guard("update"):
            self.session.flush()
        return db_obj

    # ------------------------------------------------------------------ #
    # Conditional writes
    # ------------------------------------------------------------------ #
    def compare_and_set(
        self,
        id_: str,
        expected: Dict[str, Any],
        values: Dict[str, Any],
    ) -> bool:
        """
        UPDATE ... WHERE id = :id AND <expected> in a single statement.

        Returns True when exactly one row matched. A False return means the
        row is missing or another writer changed one of the expected columns
        first.
        """
        stmt = update(self.model).where(self.model.id == id_)
        stmt = self._apply_filters(stmt, expected)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)

        with self._guard("compare_and_set"):
            result = self.session.execute(stmt)
            self.session.flush()
        return (result.rowcount or 0) == 1

    def refresh(self, db_obj: ModelType) -> ModelType:
        with self._guard("refresh"):
            self.session.refresh(db_obj)
        return db_obj
