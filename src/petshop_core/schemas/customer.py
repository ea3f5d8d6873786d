"""
Customer Pydantic schemas for create payloads and returned records.

``CustomerCreate`` is what the wizard hands to the "create customer"
collaborator. ``CustomerRecord`` normalizes whatever that collaborator
returns (an ORM object or a mapping from a hosted backend) into one shape,
accepting the alternate key names older tables use.
"""

import re
from datetime import datetime
from typing import Annotated, Any, Dict, Optional, Union
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# Backends key records by UUID, serial integer or opaque string. UUID-shaped
# strings are parsed as UUIDs; anything else is kept as given.
EntityId = Annotated[Union[UUID, str, int], Field(union_mode="left_to_right")]


class CustomerCreate(BaseModel):
    """Schema for creating a new customer (family owner)."""

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        str_strip_whitespace=True,
    )

    name: str = Field(..., description="Owner's full name", min_length=1, max_length=200)
    phone: str = Field(..., description="Owner's phone, digits only", max_length=20)
    email: Optional[str] = Field(None, description="Owner's email", max_length=255)
    address: Optional[str] = Field(None, description="Owner's address", max_length=500)
    notes: Optional[str] = Field(None, description="Free-text notes")
    organization_id: Optional[str] = Field(
        None, description="Pet shop the customer belongs to", max_length=64
    )

    @field_validator("phone", mode="before")
    @classmethod
    def validate_phone(cls, v: Any) -> str:
        """Strip the display mask, keeping digits only."""
        digits = re.sub(r"\D", "", str(v) if v is not None else "")
        if not digits:
            raise ValueError("Phone number is required")
        return digits

    @field_validator("email", "address", "notes", "organization_id")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Optional text fields left blank are omitted."""
        if v is None or not v.strip():
            return None
        return v

    def as_payload(self) -> Dict[str, Any]:
        """Insert payload with unset optional fields omitted."""
        return self.model_dump(mode="json", exclude_none=True)


class CustomerRecord(BaseModel):
    """Normalized customer record returned by the create collaborator."""

    model_config = ConfigDict(
        from_attributes=True,
    )

    id: EntityId = Field(..., description="Customer identifier")
    name: Optional[str] = Field(None, description="Owner's full name")
    phone: Optional[str] = Field(
        None,
        description="Owner's phone",
        validation_alias=AliasChoices("phone", "phone_number"),
    )
    email: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = Field(
        None,
        description="Free-text notes",
        validation_alias=AliasChoices("notes", "description", "comments"),
    )
    organization_id: Optional[str] = None
    created_at: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("created_at", "createdAt", "date_created"),
    )

    @field_validator("organization_id", mode="before")
    @classmethod
    def stringify_organization(cls, v: Any) -> Optional[str]:
        """Organization ids arrive as UUIDs or strings depending on the backend."""
        if v is None:
            return None
        return str(v)
