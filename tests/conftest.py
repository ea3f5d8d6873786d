"""
Pytest configuration and fixtures for petshop-core tests.

This module provides common fixtures for all tests in the petshop-core
package: a recording notifier, fake create collaborators for the wizard,
and a SQLite-backed session manager for the persistence tests.
"""

import asyncio
import uuid
from datetime import date, datetime, timezone
from typing import Any, AsyncGenerator, Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine

from petshop_core.database.connection import create_engine
from petshop_core.database.session import SessionManager
from petshop_core.models.base import Base
from petshop_core.wizard import FamilyWizard

FIXED_EPOCH = 1700000000.0
FIXED_TODAY = date(2024, 9, 20)


class RecordingNotifier:
    """Notifier that keeps every notification for assertions."""

    def __init__(self) -> None:
        self.successes: List[Tuple[str, Optional[str]]] = []
        self.errors: List[Tuple[str, Optional[str]]] = []
        self.celebrations = 0

    def notify_success(self, title: str, description: Optional[str] = None) -> None:
        self.successes.append((title, description))

    def notify_error(self, title: str, description: Optional[str] = None) -> None:
        self.errors.append((title, description))

    def celebrate(self) -> None:
        self.celebrations += 1


class FakeBackend:
    """
    In-memory stand-in for the customer and pet create capabilities.

    Records every payload in call order. ``fail_customer`` makes the customer
    create raise; ``fail_pets`` names the pets whose create raises.
    ``pet_gates`` holds back the create of the named pets until the event is set.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Any]] = []
        self.customers: List[Dict[str, Any]] = []
        self.pets: List[Dict[str, Any]] = []
        self.fail_customer: Optional[Exception] = None
        self.fail_pets: Dict[str, Exception] = {}
        self.pet_gates: Dict[str, asyncio.Event] = {}

    async def create_customer(self, payload):
        self.calls.append(("customer", payload))
        if self.fail_customer is not None:
            raise self.fail_customer
        record = {
            "id": str(uuid.uuid4()),
            "name": payload.name,
            "phone_number": payload.phone,
            "email": payload.email,
            "createdAt": datetime(2024, 9, 20, 12, 0, tzinfo=timezone.utc).isoformat(),
        }
        self.customers.append(record)
        return record

    async def create_pet(self, payload):
        self.calls.append(("pet", payload))
        gate = self.pet_gates.get(payload.name)
        if gate is not None:
            await gate.wait()
        if payload.name in self.fail_pets:
            raise self.fail_pets[payload.name]
        record = {
            "id": str(uuid.uuid4()),
            "customer_id": str(payload.owner_id),
            "name": payload.name,
            "species": payload.species,
            "size": payload.size,
        }
        self.pets.append(record)
        return record

    @property
    def pet_calls(self) -> List[Any]:
        return [payload for kind, payload in self.calls if kind == "pet"]

    @property
    def customer_calls(self) -> List[Any]:
        return [payload for kind, payload in self.calls if kind == "customer"]


class StepClock:
    """Deterministic epoch clock advancing one millisecond per call."""

    def __init__(self, start: float = FIXED_EPOCH, step: float = 0.001):
        self.now = start
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def wizard(backend: FakeBackend, notifier: RecordingNotifier) -> FamilyWizard:
    """An opened wizard wired to the fake backend."""
    family_wizard = FamilyWizard(
        backend.create_customer,
        backend.create_pet,
        notifier=notifier,
        clock=StepClock(),
        today=lambda: FIXED_TODAY,
    )
    family_wizard.open()
    return family_wizard


def fill_owner(wizard: FamilyWizard, name: str = "Maria Silva", phone: str = "11999991234"):
    wizard.set_owner_field("name", name)
    wizard.set_owner_field("phone", phone)


def add_pet(wizard: FamilyWizard, name: str, species: str = "dog", size: str = "medium", **extra):
    wizard.set_pet_field("name", name)
    wizard.set_pet_field("species", species)
    wizard.set_pet_field("size", size)
    for field, value in extra.items():
        wizard.set_pet_field(field, value)
    return wizard.add_pet()


@pytest.fixture
def ready_wizard(wizard: FamilyWizard) -> FamilyWizard:
    """Wizard at the review stage with an owner and two pets."""
    fill_owner(wizard)
    assert wizard.continue_to_pets()
    add_pet(wizard, "Luna")
    add_pet(wizard, "Mingau", species="cat", size="small")
    assert wizard.continue_to_review()
    return wizard


@pytest_asyncio.fixture
async def test_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """SQLite engine on a temporary file, with the schema created."""
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'petshop_test.db'}"
    engine = create_engine(database_url, use_null_pool=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session_manager(
    test_engine: AsyncEngine,
) -> AsyncGenerator[SessionManager, None]:
    """Create a session manager for testing."""
    manager = SessionManager(test_engine)
    yield manager
    await manager.close()
