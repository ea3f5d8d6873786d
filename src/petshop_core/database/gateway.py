"""
SQLAlchemy implementation of the wizard's create capabilities.

``SQLAlchemyEntityGateway.create_customer`` and ``create_pet`` match the
callables ``FamilyWizard`` expects, so a wizard can be wired straight to the
database:

    gateway = SQLAlchemyEntityGateway(session_manager)
    wizard = FamilyWizard(gateway.create_customer, gateway.create_pet)

Each call runs in its own transaction, so concurrent pet creates never share
a session.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.customer import Customer
from ..models.pet import Pet
from ..schemas.customer import CustomerCreate
from ..schemas.pet import PetCreate
from .session import SessionManager

logger = logging.getLogger(__name__)


class SQLAlchemyEntityGateway:
    """Persists customers and pets through a ``SessionManager``."""

    def __init__(self, session_manager: SessionManager):
        self.session_manager = session_manager

    async def create_customer(self, payload: CustomerCreate) -> Customer:
        """
        Insert a customer.

        Raises:
            TransactionException: If the insert fails
        """
        customer = await self.session_manager.execute_in_transaction(
            self._insert, Customer(**payload.model_dump(exclude_none=True))
        )
        logger.info(f"Customer {customer.id} created")
        return customer

    async def create_pet(self, payload: PetCreate) -> Pet:
        """
        Insert a pet for an existing customer.

        Raises:
            TransactionException: If the insert fails
        """
        pet = await self.session_manager.execute_in_transaction(
            self._insert, Pet(**payload.model_dump(exclude_none=True))
        )
        logger.info(f"Pet {pet.id} created for customer {pet.owner_id}")
        return pet

    @staticmethod
    async def _insert(session: AsyncSession, instance):
        session.add(instance)
        await session.flush()
        # Load server-side defaults before the session is closed
        await session.refresh(instance)
        return instance
