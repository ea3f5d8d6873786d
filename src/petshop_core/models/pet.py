"""
Pet model for the petshop-core package.

This module contains the Pet SQLAlchemy model and the fixed enumerations the
onboarding form offers for species, size and temperament.
"""

import enum
import uuid
from datetime import date
from typing import Any, Optional

from sqlalchemy import Boolean, Date, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel


class PetSpecies(enum.Enum):
    """Enumeration of pet species accepted by the onboarding form."""

    DOG = "dog"
    CAT = "cat"
    BIRD = "bird"
    RABBIT = "rabbit"
    HAMSTER = "hamster"
    FISH = "fish"
    TURTLE = "turtle"
    OTHER = "other"


class PetSize(enum.Enum):
    """Enumeration of pet sizes ("porte")."""

    SMALL = "small"  # < 10kg
    MEDIUM = "medium"  # 10-25kg
    LARGE = "large"  # 25-45kg
    GIANT = "giant"  # > 45kg


class PetTemperament(enum.Enum):
    """Enumeration of temperament options."""

    CALM = "calm"
    ACTIVE = "active"
    ANXIOUS = "anxious"
    AGGRESSIVE = "aggressive"
    FEARFUL = "fearful"
    FRIENDLY = "friendly"


def _enum_values(enum_cls: Any) -> list:
    return [member.value for member in enum_cls]


class Pet(BaseModel):
    """
    Pet record owned by a customer.

    Enum columns store the lowercase enum values ("dog", "medium", ...).
    """

    __tablename__ = "pets"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize Pet with default values."""
        if "is_neutered" not in kwargs:
            kwargs["is_neutered"] = False
        if "is_vaccinated" not in kwargs:
            kwargs["is_vaccinated"] = False

        super().__init__(**kwargs)

    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="UUID of the pet's owner",
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False, comment="Pet's name")

    species: Mapped[PetSpecies] = mapped_column(
        Enum(PetSpecies, values_callable=_enum_values, native_enum=False),
        nullable=False,
        index=True,
        comment="Pet's species",
    )

    breed: Mapped[Optional[str]] = mapped_column(
        String(100), nullable=True, comment="Pet's breed"
    )

    birth_date: Mapped[Optional[date]] = mapped_column(
        Date, nullable=True, comment="Approximate birth date"
    )

    size: Mapped[Optional[PetSize]] = mapped_column(
        Enum(PetSize, values_callable=_enum_values, native_enum=False),
        nullable=True,
        comment="Pet's size category",
    )

    temperament: Mapped[Optional[PetTemperament]] = mapped_column(
        Enum(PetTemperament, values_callable=_enum_values, native_enum=False),
        nullable=True,
        comment="Pet's temperament",
    )

    is_neutered: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, comment="Whether the pet is neutered"
    )

    is_vaccinated: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether the pet's vaccines are up to date",
    )

    allergies: Mapped[Optional[str]] = mapped_column(
        Text, nullable=True, comment="Known allergies"
    )

    medical_notes: Mapped[Optional[str]] = mapped_column(
        Text, nullable=True, comment="Medical observations"
    )

    organization_id: Mapped[Optional[str]] = mapped_column(
        String(64), nullable=True, comment="Pet shop the pet belongs to"
    )

    __table_args__ = (
        Index("idx_pets_owner_name", "owner_id", "name"),
        Index("idx_pets_owner_species", "owner_id", "species"),
    )

    owner = relationship("Customer", back_populates="pets")

    def __repr__(self) -> str:
        """String representation of the Pet model."""
        return f"<Pet(id={self.id}, name='{self.name}', species='{self.species.value}', owner_id={self.owner_id})>"
