"""
Tests for customer and pet Pydantic schemas.

This module covers the create payloads the wizard sends and the record
schemas that normalize collaborator results with alternate key names.
"""

from datetime import date
from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from petshop_core.models.pet import PetSpecies
from petshop_core.schemas import CustomerCreate, CustomerRecord, PetCreate, PetRecord


class TestCustomerCreate:
    """Test CustomerCreate validation."""

    def test_phone_keeps_digits_only(self):
        customer = CustomerCreate(name="Maria Silva", phone="(11) 99999-1234")

        assert customer.phone == "11999991234"

    def test_phone_without_digits_is_rejected(self):
        with pytest.raises(ValidationError):
            CustomerCreate(name="Maria Silva", phone="() -")

    def test_name_is_required(self):
        with pytest.raises(ValidationError):
            CustomerCreate(name="   ", phone="11999991234")

    def test_blank_optional_fields_are_omitted(self):
        customer = CustomerCreate(
            name=" Maria Silva ", phone="11999991234", email="  ", address="", notes=None
        )

        assert customer.name == "Maria Silva"
        assert customer.as_payload() == {"name": "Maria Silva", "phone": "11999991234"}


class TestPetCreate:
    """Test PetCreate validation."""

    def test_valid_pet(self):
        owner_id = uuid4()
        pet = PetCreate(
            owner_id=owner_id,
            name="Luna",
            species="dog",
            size="medium",
            breed="Golden Retriever",
            birth_date=date(2021, 1, 1),
        )

        assert pet.species == "dog"
        assert pet.size == "medium"
        assert pet.is_neutered is False
        assert pet.is_vaccinated is False

        payload = pet.as_payload()
        assert payload["owner_id"] == str(owner_id)
        assert payload["birth_date"] == "2021-01-01"
        assert "temperament" not in payload

    def test_enum_members_are_accepted(self):
        pet = PetCreate(owner_id=uuid4(), name="Luna", species=PetSpecies.CAT, size="small")

        assert pet.species == "cat"

    def test_blank_temperament_is_omitted(self):
        pet = PetCreate(
            owner_id=uuid4(), name="Luna", species="dog", size="medium", temperament=""
        )

        assert pet.temperament is None

    @pytest.mark.parametrize(
        "field,value", [("species", "dragon"), ("size", "huge"), ("temperament", "sleepy")]
    )
    def test_invalid_enum_values(self, field, value):
        data = {"owner_id": uuid4(), "name": "Luna", "species": "dog", "size": "medium"}
        data[field] = value

        with pytest.raises(ValidationError):
            PetCreate(**data)

    def test_size_is_required(self):
        with pytest.raises(ValidationError):
            PetCreate(owner_id=uuid4(), name="Luna", species="dog")


class TestRecordSchemas:
    """Test record normalization across key-name variants."""

    def test_customer_record_from_mapping_with_alternate_keys(self):
        record_id = uuid4()
        record = CustomerRecord.model_validate(
            {
                "id": str(record_id),
                "name": "Maria Silva",
                "phone_number": "11999991234",
                "description": "Cliente antiga",
                "createdAt": "2024-09-20T12:00:00+00:00",
            }
        )

        assert record.id == record_id
        assert record.phone == "11999991234"
        assert record.notes == "Cliente antiga"
        assert record.created_at.year == 2024

    def test_customer_record_from_attributes(self):
        org_id = uuid4()
        source = SimpleNamespace(
            id=uuid4(),
            name="Maria Silva",
            phone="11999991234",
            email=None,
            address=None,
            notes=None,
            organization_id=org_id,
            created_at=None,
        )

        record = CustomerRecord.model_validate(source)

        assert record.organization_id == str(org_id)

    def test_customer_record_requires_id(self):
        with pytest.raises(ValidationError):
            CustomerRecord.model_validate({"name": "Maria Silva"})

    @pytest.mark.parametrize("owner_key", ["owner_id", "customer_id", "whatsapp_contact_id"])
    def test_pet_record_owner_aliases(self, owner_key):
        owner_id = uuid4()
        record = PetRecord.model_validate(
            {"id": str(uuid4()), owner_key: str(owner_id), "name": "Luna", "species": "dog"}
        )

        assert record.owner_id == owner_id
        assert record.species == "dog"

    def test_pet_record_id_is_uuid(self):
        record = PetRecord.model_validate(
            {
                "id": "12345678-1234-5678-1234-567812345678",
                "owner_id": str(uuid4()),
                "name": "Luna",
            }
        )

        assert isinstance(record.id, UUID)

    def test_pet_record_with_only_an_id(self):
        record = PetRecord.model_validate({"id": 7})

        assert record.id == 7
        assert record.owner_id is None
        assert record.name is None

    @pytest.mark.parametrize(
        "raw_id, expected",
        [
            (42, 42),
            ("cus_8f2k1", "cus_8f2k1"),
            ("42", "42"),
            (
                "12345678-1234-5678-1234-567812345678",
                UUID("12345678-1234-5678-1234-567812345678"),
            ),
        ],
    )
    def test_customer_record_id_types(self, raw_id, expected):
        record = CustomerRecord.model_validate({"id": raw_id})

        assert record.id == expected
        assert type(record.id) is type(expected)

    def test_pet_create_accepts_integer_owner(self):
        pet = PetCreate(owner_id=42, name="Luna", species="dog", size="medium")

        assert pet.owner_id == 42
        assert pet.as_payload()["owner_id"] == 42
