"""
Base model class for all SQLAlchemy models in the petshop-core package.

This module provides the foundational base model class that the customer and
pet models inherit from, including the UUID primary key, audit timestamps and
utility methods.

Example:
    >>> from petshop_core.models.base import BaseModel
    >>> from sqlalchemy.orm import Mapped, mapped_column
    >>> from sqlalchemy import String

    >>> class MyModel(BaseModel):
    ...     __tablename__ = "my_table"
    ...     name: Mapped[str] = mapped_column(String(100))

    >>> instance = MyModel(name="Test")
    >>> data = instance.to_dict()
"""

import enum
import uuid
from datetime import date, datetime
from typing import Any, Dict, TypeVar

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func

# Type variable for model classes
T = TypeVar("T", bound="BaseModel")


class Base(DeclarativeBase):
    """
    Base declarative class for all SQLAlchemy models.

    Uses the generic ``Uuid`` type so the same models run on PostgreSQL and
    on SQLite.
    """

    type_annotation_map = {
        uuid.UUID: Uuid(as_uuid=True),
    }


class BaseModel(Base):
    """
    Abstract base model class providing common functionality for all entities.

    Attributes:
        id (UUID): Primary key, generated client-side as UUID4
        created_at (datetime): Timestamp when record was created
        updated_at (datetime): Timestamp when record was last updated

    Note:
        This is an abstract base class and cannot be instantiated directly.
        All concrete models must define a __tablename__ attribute.
    """

    __abstract__ = True

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # Audit fields
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        """Return string representation of the model instance."""
        return f"<{self.__class__.__name__}(id={self.id})>"

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model instance to dictionary representation.

        Converts all column values to JSON-serializable types:
        - datetime and date objects to ISO format strings
        - UUID objects to string representation
        - Enum members to their values

        Returns:
            Dictionary with column names as keys and serialized values.
        """
        result: Dict[str, Any] = {}
        for column in self.__table__.columns:
            value = getattr(self, column.name)
            if isinstance(value, (datetime, date)):
                result[column.name] = value.isoformat()
            elif isinstance(value, uuid.UUID):
                result[column.name] = str(value)
            elif isinstance(value, enum.Enum):
                result[column.name] = value.value
            else:
                result[column.name] = value
        return result
