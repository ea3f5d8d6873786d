"""
Customer model for the petshop-core package.

A customer is the owner ("family") record created first by the onboarding
wizard; pets reference it through ``owner_id``.
"""

from typing import Optional

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel


class Customer(BaseModel):
    """Pet owner contact record."""

    __tablename__ = "customers"

    name: Mapped[str] = mapped_column(
        String(200), nullable=False, comment="Owner's full name"
    )

    phone: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        index=True,
        comment="Owner's phone number, digits only",
    )

    email: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, comment="Owner's email address"
    )

    address: Mapped[Optional[str]] = mapped_column(
        String(500), nullable=True, comment="Owner's street address"
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text, nullable=True, comment="Free-text notes about the family"
    )

    organization_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        comment="Pet shop the customer belongs to",
    )

    __table_args__ = (
        Index("idx_customers_organization_phone", "organization_id", "phone"),
    )

    pets = relationship("Pet", back_populates="owner", passive_deletes=True)

    def __repr__(self) -> str:
        """String representation of the Customer model."""
        return f"<Customer(id={self.id}, name='{self.name}', phone='{self.phone}')>"
