"""
Family onboarding wizard.

Collects an owner and one or more pets across three stages and persists them
on confirmation: the owner first, then every pet concurrently.
"""

from .controller import FamilyWizard, WizardStage
from .draft import FamilyDraft, OwnerDraft, PetDraft, new_temp_id
from .notifier import LoggingNotifier, Notifier

__all__ = [
    "FamilyWizard",
    "WizardStage",
    "FamilyDraft",
    "OwnerDraft",
    "PetDraft",
    "new_temp_id",
    "Notifier",
    "LoggingNotifier",
]
