"""
Tests for the SQLAlchemy persistence layer.

These run against a temporary SQLite database through aiosqlite, using the
same session manager and gateway the wizard is wired to in production.
"""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy import func, inspect, select
from sqlalchemy.exc import SQLAlchemyError

from conftest import add_pet, fill_owner
from petshop_core.database import SQLAlchemyEntityGateway, SessionManager
from petshop_core.database.session import (
    get_session_manager,
    initialize_session_manager,
)
from petshop_core.exceptions import TransactionException
from petshop_core.models import Base, Customer, Pet, PetSize, PetSpecies
from petshop_core.schemas import CustomerCreate, PetCreate
from petshop_core.wizard import FamilyWizard


class TestSessionManager:
    """Test session and transaction helpers."""

    @pytest.mark.asyncio
    async def test_transaction_commits(self, test_session_manager):
        async with test_session_manager.get_transaction() as session:
            session.add(Customer(name="Maria Silva", phone="11999991234"))

        async with test_session_manager.get_session() as session:
            count = await session.scalar(select(func.count()).select_from(Customer))

        assert count == 1

    @pytest.mark.asyncio
    async def test_transaction_rolls_back_on_error(self, test_session_manager):
        with pytest.raises(RuntimeError):
            async with test_session_manager.get_transaction() as session:
                session.add(Customer(name="Maria Silva", phone="11999991234"))
                await session.flush()
                raise RuntimeError("abort")

        async with test_session_manager.get_session() as session:
            count = await session.scalar(select(func.count()).select_from(Customer))

        assert count == 0

    @pytest.mark.asyncio
    async def test_execute_in_transaction_wraps_database_errors(self, test_session_manager):
        async def failing_operation(session):
            raise SQLAlchemyError("constraint violated")

        with pytest.raises(TransactionException) as exc_info:
            await test_session_manager.execute_in_transaction(failing_operation)

        assert exc_info.value.details["operation"] == "failing_operation"

    @pytest.mark.asyncio
    async def test_drop_and_create_schema(self, test_session_manager):
        async with test_session_manager.get_transaction() as session:
            session.add(Customer(name="Maria Silva", phone="11999991234"))

        await test_session_manager.drop_schema(Base.metadata)
        async with test_session_manager.engine.connect() as conn:
            tables = await conn.run_sync(lambda sync: inspect(sync).get_table_names())
        assert tables == []

        await test_session_manager.create_schema(Base.metadata)
        async with test_session_manager.get_session() as session:
            count = await session.scalar(select(func.count()).select_from(Customer))
        assert count == 0

    @pytest.mark.asyncio
    async def test_global_session_manager(self, test_engine):
        manager = initialize_session_manager(test_engine)

        assert get_session_manager() is manager
        assert isinstance(manager, SessionManager)


class TestEntityGateway:
    """Test customer and pet inserts."""

    @pytest.mark.asyncio
    async def test_create_customer(self, test_session_manager):
        gateway = SQLAlchemyEntityGateway(test_session_manager)

        customer = await gateway.create_customer(
            CustomerCreate(name="Maria Silva", phone="(11) 99999-1234", email="")
        )

        assert customer.id is not None
        assert customer.phone == "11999991234"
        assert customer.email is None
        assert customer.created_at is not None

    @pytest.mark.asyncio
    async def test_create_pet(self, test_session_manager):
        gateway = SQLAlchemyEntityGateway(test_session_manager)
        customer = await gateway.create_customer(
            CustomerCreate(name="Maria Silva", phone="11999991234")
        )

        pet = await gateway.create_pet(
            PetCreate(owner_id=customer.id, name="Luna", species="dog", size="medium")
        )

        assert pet.owner_id == customer.id
        assert pet.species is PetSpecies.DOG
        assert pet.size is PetSize.MEDIUM
        assert pet.is_neutered is False
        assert pet.to_dict()["species"] == "dog"

    @pytest.mark.asyncio
    async def test_insert_failure_raises_transaction_exception(self, test_session_manager):
        gateway = SQLAlchemyEntityGateway(test_session_manager)
        test_session_manager.execute_in_transaction = AsyncMock(
            side_effect=TransactionException(operation="_insert")
        )

        with pytest.raises(TransactionException):
            await gateway.create_pet(
                PetCreate(owner_id=uuid4(), name="Luna", species="dog", size="medium")
            )


class TestWizardWithDatabase:
    """End-to-end confirmation against the database."""

    @pytest.mark.asyncio
    async def test_family_is_persisted(self, test_session_manager, notifier):
        gateway = SQLAlchemyEntityGateway(test_session_manager)
        wizard = FamilyWizard(gateway.create_customer, gateway.create_pet, notifier=notifier)
        wizard.open()
        fill_owner(wizard)
        wizard.continue_to_pets()
        add_pet(wizard, "Luna", breed="Golden Retriever", age="3", temperament="friendly")
        add_pet(wizard, "Mingau", species="cat", size="small")
        wizard.continue_to_review()

        parent = await wizard.confirm()

        async with test_session_manager.get_session() as session:
            customers = (await session.scalars(select(Customer))).all()
            pets = (
                await session.scalars(select(Pet).where(Pet.owner_id == parent.id))
            ).all()

        assert [customer.id for customer in customers] == [parent.id]
        assert sorted(pet.name for pet in pets) == ["Luna", "Mingau"]
        mingau = next(pet for pet in pets if pet.name == "Mingau")
        assert mingau.breed == "Não informado"
        assert mingau.birth_date is None
