# models/base.py
from uuid import uuid4

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .mixins.timestamp_mixin import TimestampMixin


def new_id() -> str:
    return str(uuid4())


class Base(DeclarativeBase):
    """Root SQLAlchemy base class."""
    pass


class BaseEntity(Base, TimestampMixin):
    """
    Base for all persisted records.

    - string primary key (UUID text by default, callers may supply their own)
    - created_at / updated_at
    """
    __abstract__ = True

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=new_id,
    )

    def to_dict(self) -> dict:
        return {c.key: getattr(self, c.key) for c in self.__table__.columns}

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id!r}>"
