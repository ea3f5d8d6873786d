"""
Database models for the petshop core package.

This module contains the SQLAlchemy models for the two tables the onboarding
wizard writes: customers and their pets.
"""

# Base model will be imported by all other models
from .base import Base, BaseModel
from .customer import Customer
from .pet import Pet, PetSize, PetSpecies, PetTemperament

__all__ = [
    "Base",
    "BaseModel",
    "Customer",
    "Pet",
    "PetSpecies",
    "PetSize",
    "PetTemperament",
]
