#!/usr/bin/env python3
"""
Family onboarding example for the petshop-core package.

This example walks the wizard through its three stages and confirms the
family against a database, then shows how a partial failure is reported
when pets are created with the ``settle_all`` policy.
"""

import asyncio
import os

from petshop_core.database import SQLAlchemyEntityGateway, SessionManager, create_engine
from petshop_core.exceptions import (
    DependentCreationException,
    ParentCreationException,
    create_error_response,
)
from petshop_core.models import Base
from petshop_core.utils import FanOutPolicy, LoggingConfigurator, WizardSettings
from petshop_core.wizard import FamilyWizard


async def setup_database() -> SessionManager:
    """Set up database connection and schema for the example."""
    database_url = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///petshop_example.db")

    engine = create_engine(database_url, echo=False)
    session_manager = SessionManager(engine)
    await session_manager.create_schema(Base.metadata)
    return session_manager


def fill_family(wizard: FamilyWizard) -> None:
    """Owner stage, pets stage and review, as a user would go through them."""
    wizard.open()

    print("\n=== Owner stage ===")
    wizard.set_owner_field("name", "Maria Silva")
    wizard.set_owner_field("phone", "11999991234")
    print(f"✓ Phone shown as {wizard.draft.owner.phone}")
    wizard.continue_to_pets()

    print("\n=== Pets stage ===")
    wizard.set_pet_field("name", "Luna")
    wizard.set_pet_field("species", "dog")
    print(f"✓ Breed suggestions for 'retr': {wizard.suggest_breeds('retr')}")
    wizard.set_pet_field("breed", "Golden Retriever")
    wizard.set_pet_field("size", "medium")
    wizard.set_pet_field("age", "3")
    wizard.add_pet()

    wizard.set_pet_field("name", "Mingau")
    wizard.set_pet_field("species", "cat")
    wizard.set_pet_field("size", "small")
    wizard.add_pet()
    print(f"✓ {len(wizard.draft.pets)} pets in the family")

    print("\n=== Review stage ===")
    wizard.continue_to_review()
    summary = wizard.summary()
    for pet in summary["pets"]:
        print(f"• {pet['name']} ({pet['species_label']}, {pet['size_label']})")


async def confirm_example(gateway: SQLAlchemyEntityGateway) -> None:
    """Example: confirming a family against the database."""
    wizard = FamilyWizard(
        gateway.create_customer,
        gateway.create_pet,
        on_family_created=lambda customer: print(f"✓ Family created: {customer.id}"),
    )
    fill_family(wizard)

    try:
        await wizard.confirm()
    except ParentCreationException as e:
        print(f"✗ Owner could not be created: {e.original_error}")


async def partial_failure_example() -> None:
    """Example: one pet fails while the others are created."""
    print("\n=== Partial failure ===")

    async def create_customer(payload):
        return {"id": "12345678-1234-5678-1234-567812345678", "name": payload.name}

    async def create_pet(payload):
        if payload.name == "Mingau":
            raise RuntimeError("pet service unavailable")
        return {
            "id": "87654321-4321-8765-4321-876543218765",
            "owner_id": str(payload.owner_id),
            "name": payload.name,
        }

    wizard = FamilyWizard(
        create_customer,
        create_pet,
        settings=WizardSettings(
            fan_out_policy=FanOutPolicy.SETTLE_ALL,
            resume_partial_submissions=True,
        ),
    )
    fill_family(wizard)

    try:
        await wizard.confirm()
    except DependentCreationException as e:
        response = create_error_response(e)
        print(f"✓ Owner kept: {e.parent_record.id}")
        print(f"✓ Created: {e.created}")
        print(f"✓ Failed: {e.failed}")
        print(f"✓ Error code: {response['error']['code']}")


async def main():
    """Run the onboarding examples."""
    LoggingConfigurator.configure_basic_logging()
    print("🐾 Pet Shop Core - Family Onboarding Example")
    print("=" * 60)

    session_manager = await setup_database()
    try:
        await confirm_example(SQLAlchemyEntityGateway(session_manager))
        await partial_failure_example()
    finally:
        await session_manager.close()

    print("\n" + "=" * 60)
    print("🎉 Onboarding examples completed!")


if __name__ == "__main__":
    print("Set DATABASE_URL to use PostgreSQL instead of a local SQLite file")
    print()

    asyncio.run(main())
