"""
Pet Pydantic schemas for create payloads and returned records.

This module contains the payload the wizard sends for each pet of a family
and the normalized record shape the create collaborator's result is mapped
into.
"""

from datetime import date, datetime
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ..models.pet import PetSize, PetSpecies, PetTemperament
from .customer import EntityId


class PetCreate(BaseModel):
    """Schema for creating a new pet linked to an owner."""

    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=True,
        validate_assignment=True,
        str_strip_whitespace=True,
    )

    owner_id: EntityId = Field(..., description="Identifier of the pet's owner")
    name: str = Field(..., description="Pet's name", min_length=1, max_length=100)
    species: PetSpecies = Field(..., description="Pet's species")
    size: PetSize = Field(..., description="Pet's size category")
    breed: Optional[str] = Field(None, description="Pet's breed", max_length=100)
    birth_date: Optional[date] = Field(None, description="Approximate birth date")
    temperament: Optional[PetTemperament] = Field(None, description="Temperament")
    is_neutered: bool = Field(False, description="Whether the pet is neutered")
    is_vaccinated: bool = Field(False, description="Whether vaccines are up to date")
    allergies: Optional[str] = Field(None, description="Known allergies")
    medical_notes: Optional[str] = Field(None, description="Medical observations")
    organization_id: Optional[str] = Field(
        None, description="Pet shop the pet belongs to", max_length=64
    )

    @field_validator("temperament", mode="before")
    @classmethod
    def blank_temperament(cls, v: Any) -> Any:
        """An unselected temperament is omitted."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("breed", "allergies", "medical_notes", "organization_id")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Optional text fields left blank are omitted."""
        if v is None or not v.strip():
            return None
        return v

    def as_payload(self) -> Dict[str, Any]:
        """Insert payload with unset optional fields omitted."""
        return self.model_dump(mode="json", exclude_none=True)


class PetRecord(BaseModel):
    """
    Normalized pet record returned by the create collaborator.

    Every field is optional: backends that answer an insert with only the new
    id (or nothing at all) still produce a record.
    """

    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=True,
    )

    id: Optional[EntityId] = Field(None, description="Pet identifier")
    owner_id: Optional[EntityId] = Field(
        None,
        description="Identifier of the pet's owner",
        validation_alias=AliasChoices("owner_id", "customer_id", "whatsapp_contact_id"),
    )
    name: Optional[str] = None
    species: Optional[PetSpecies] = None
    size: Optional[PetSize] = None
    breed: Optional[str] = None
    birth_date: Optional[date] = None
    created_at: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("created_at", "createdAt", "date_created"),
    )
