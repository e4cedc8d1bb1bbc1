from datetime import datetime, timezone
import uuid

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import Mapped, as_declarative, declared_attr, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@as_declarative()
class Base:
    __abstract__ = True  # Prevents creating a table for the base class

    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower()

    # Portable UUID type: native on PostgreSQL, CHAR(32) elsewhere
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, index=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )
