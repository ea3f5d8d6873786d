"""
Pydantic schemas for data validation and serialization.

This module contains the create payloads the onboarding wizard sends and the
record schemas that map collaborator results into a single shape.
"""

from .customer import CustomerCreate, CustomerRecord
from .pet import PetCreate, PetRecord

__all__ = [
    "CustomerCreate",
    "CustomerRecord",
    "PetCreate",
    "PetRecord",
]
