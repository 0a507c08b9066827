"""Base Models and Mixins shared across domains"""

import enum
import uuid
from typing import Type

from sqlalchemy import Column, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID, ENUM
from sqlalchemy.orm import declared_attr

from app.database import Base
from app.utils.time import get_utc_now


def pg_enum(enum_cls: Type[enum.Enum], name: str) -> ENUM:
    """Postgres ENUM storing member values (e.g. '발주처', 'new') rather than names."""
    return ENUM(enum_cls, name=name, values_callable=lambda x: [e.value for e in x])


class BaseModel(Base):
    """
    Base model class with common fields for all models.

    Provides:
    - UUID primary key
    - created_at timestamp
    - updated_at timestamp
    """
    __abstract__ = True

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    created_at = Column(DateTime, default=get_utc_now, nullable=False)
    updated_at = Column(DateTime, default=get_utc_now, onupdate=get_utc_now, nullable=False)


class AuditMixin:
    """
    Mixin recording which user created and last changed a row.

    Provides:
    - created_by / updated_by foreign keys to users (nullable, SET NULL)
    """

    @declared_attr
    def created_by(cls):
        return Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    @declared_attr
    def updated_by(cls):
        return Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
