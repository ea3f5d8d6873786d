"""
In-memory draft of a family being onboarded.

The draft holds the owner form, the pets already added to the family, and
knows how to validate itself and turn into create payloads. Nothing here
touches the backend.
"""

import time
from dataclasses import dataclass, field, fields
from datetime import date
from typing import Callable, Iterable, List, Optional

from ..models.pet import PetSize, PetSpecies
from ..schemas.customer import CustomerCreate, EntityId
from ..schemas.pet import PetCreate
from ..utils.config import DEFAULT_BREED_PLACEHOLDER
from ..utils.datetime_utils import birth_date_from_age_bracket
from ..utils.validation import (
    ValidationResult,
    digits_only,
    is_blank,
    validate_choice,
    validate_required,
)
from . import messages

TEMP_ID_PREFIX = "temp-"

SPECIES_CHOICES = [species.value for species in PetSpecies]
SIZE_CHOICES = [size.value for size in PetSize]


def new_temp_id(
    existing: Iterable[str] = (), clock: Callable[[], float] = time.time
) -> str:
    """
    Generate a client-side id for a pet that has not been persisted yet.

    The id is ``temp-`` followed by the epoch in milliseconds; a numeric
    suffix is added only when that id is already taken in ``existing``.
    """
    base = f"{TEMP_ID_PREFIX}{int(clock() * 1000)}"
    taken = set(existing)
    candidate = base
    suffix = 1
    while candidate in taken:
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate


@dataclass
class OwnerDraft:
    """Owner ("family") form. ``phone`` keeps the masked display value."""

    name: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    notes: str = ""

    def validate(self) -> ValidationResult["OwnerDraft"]:
        """Name and phone are required; both are checked after trimming."""
        result: ValidationResult[OwnerDraft] = ValidationResult()

        for error in (
            validate_required(self.name, "name", messages.OWNER_NAME_REQUIRED),
            validate_required(self.phone, "phone", messages.OWNER_PHONE_REQUIRED),
        ):
            if error is not None:
                result.add_error(error)

        if result.is_valid:
            result.value = self
        return result

    @property
    def phone_digits(self) -> str:
        """Phone as it is submitted: digits only."""
        return digits_only(self.phone)

    def to_create_schema(self, organization_id: Optional[str] = None) -> CustomerCreate:
        """Build the customer create payload."""
        return CustomerCreate(
            name=self.name,
            phone=self.phone_digits,
            email=self.email or None,
            address=self.address or None,
            notes=self.notes or None,
            organization_id=organization_id,
        )

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]


@dataclass
class PetDraft:
    """
    One pet of the family.

    Selection fields (species, size, temperament, age) hold the string
    values offered by the form; an empty string means "not selected".
    """

    name: str = ""
    species: str = ""
    size: str = ""
    breed: str = ""
    age: str = ""
    temperament: str = ""
    is_neutered: bool = False
    is_vaccinated: bool = False
    allergies: str = ""
    medical_notes: str = ""
    temp_id: Optional[str] = None

    def validate(self) -> ValidationResult["PetDraft"]:
        """Name, species and size are required; every other field is optional."""
        result: ValidationResult[PetDraft] = ValidationResult()

        checks = (
            validate_required(self.name, "name", messages.PET_NAME_REQUIRED),
            validate_choice(
                self.species, "species", SPECIES_CHOICES, messages.PET_SPECIES_REQUIRED
            ),
            validate_choice(
                self.size, "size", SIZE_CHOICES, messages.PET_SIZE_REQUIRED
            ),
        )
        for error in checks:
            if error is not None:
                result.add_error(error)

        if result.is_valid:
            result.value = self
        return result

    def to_create_schema(
        self,
        owner_id: EntityId,
        organization_id: Optional[str] = None,
        default_breed: str = DEFAULT_BREED_PLACEHOLDER,
        reference_date: Optional[date] = None,
    ) -> PetCreate:
        """
        Build the pet create payload.

        The temporary id is deliberately left out. A blank breed falls back to
        ``default_breed`` and the age bracket becomes an approximate birth date.
        """
        return PetCreate(
            owner_id=owner_id,
            name=self.name,
            species=self.species,
            size=self.size,
            breed=self.breed if not is_blank(self.breed) else default_breed,
            birth_date=birth_date_from_age_bracket(self.age, reference_date),
            temperament=self.temperament or None,
            is_neutered=bool(self.is_neutered),
            is_vaccinated=bool(self.is_vaccinated),
            allergies=self.allergies or None,
            medical_notes=self.medical_notes or None,
            organization_id=organization_id,
        )

    @classmethod
    def form_field_names(cls) -> List[str]:
        """Fields editable through the pet sub-form."""
        return [f.name for f in fields(cls) if f.name != "temp_id"]


@dataclass
class FamilyDraft:
    """The owner plus the pets added so far."""

    owner: OwnerDraft = field(default_factory=OwnerDraft)
    pets: List[PetDraft] = field(default_factory=list)

    def find_pet(self, temp_id: str) -> Optional[PetDraft]:
        for pet in self.pets:
            if pet.temp_id == temp_id:
                return pet
        return None

    def temp_ids(self) -> List[str]:
        return [pet.temp_id for pet in self.pets if pet.temp_id]

    def is_empty(self) -> bool:
        """True when the draft equals a freshly opened one."""
        return self.owner == OwnerDraft() and not self.pets
