"""
Family onboarding wizard controller.

This module drives the three-stage flow used to register a new family:

1. ``OWNER``: owner name and phone (required), email, address, notes.
2. ``PETS``: pets are added one at a time through a sub-form.
3. ``REVIEW``: read-only summary and the final confirmation.

Nothing reaches the backend until ``confirm`` runs. Confirmation creates the
owner first, then every pet concurrently with the owner's id. The way the
pet calls are joined is controlled by ``WizardSettings.fan_out_policy``:

- ``fail_fast``: the first failing pet fails the whole submission. The
  owner and any pets that did succeed stay persisted; there is no rollback.
  Pet calls still running at that point are left to finish.
- ``settle_all``: every pet call is awaited and the failure reports which
  pets were created and which were not.

With ``resume_partial_submissions`` enabled, a retry after a pet failure
reuses the owner that was already created, waits for pet calls left running
by the failed attempt and skips pets known to be persisted, instead of
creating a duplicate owner.

Example:
    >>> wizard = FamilyWizard(gateway.create_customer, gateway.create_pet)
    >>> wizard.open()
    >>> wizard.set_owner_field("name", "Maria Silva")
    >>> wizard.set_owner_field("phone", "11999991234")
    >>> wizard.continue_to_pets()
    True
    >>> wizard.set_pet_field("name", "Luna")
    >>> wizard.set_pet_field("species", "dog")
    >>> wizard.set_pet_field("size", "medium")
    >>> wizard.add_pet()
    >>> wizard.continue_to_review()
    True
    >>> customer = await wizard.confirm()
"""

import asyncio
import enum
import inspect
import logging
from datetime import date
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set, Tuple, Union

from pydantic import ValidationError

from ..catalogs import (
    BreedCatalog,
    age_label,
    size_label,
    species_label,
    temperament_label,
)
from ..exceptions import (
    DependentCreationException,
    ParentCreationException,
    ParentRecordException,
    StageValidationException,
    SubmissionException,
    SubmissionPreconditionException,
    log_exception_context,
)
from ..schemas.customer import CustomerCreate, CustomerRecord
from ..schemas.pet import PetCreate, PetRecord
from ..utils.config import FanOutPolicy, WizardSettings
from ..utils.datetime_utils import parse_age_bracket
from ..utils.validation import format_br_phone
from . import messages
from .draft import FamilyDraft, OwnerDraft, PetDraft, new_temp_id
from .notifier import LoggingNotifier, Notifier

logger = logging.getLogger(__name__)

CreateCustomer = Callable[[CustomerCreate], Awaitable[Any]]
CreatePet = Callable[[PetCreate], Awaitable[Any]]
FamilyCreatedCallback = Callable[[CustomerRecord], Union[None, Awaitable[None]]]


class WizardStage(enum.Enum):
    """Stages of the onboarding flow, in order."""

    OWNER = "owner"
    PETS = "pets"
    REVIEW = "review"


_STAGE_ORDER = [WizardStage.OWNER, WizardStage.PETS, WizardStage.REVIEW]


class FamilyWizard:
    """State holder and submission orchestrator for one onboarding session."""

    def __init__(
        self,
        create_customer: CreateCustomer,
        create_pet: CreatePet,
        notifier: Optional[Notifier] = None,
        settings: Optional[WizardSettings] = None,
        breed_catalog: Optional[BreedCatalog] = None,
        on_family_created: Optional[FamilyCreatedCallback] = None,
        clock: Optional[Callable[[], float]] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        """
        Initialize the wizard.

        Args:
            create_customer: Async capability creating the owner record
            create_pet: Async capability creating one pet record
            notifier: Presentation hooks (defaults to LoggingNotifier)
            settings: Submission settings (defaults to WizardSettings())
            breed_catalog: Breed dictionary for the autocomplete
            on_family_created: Called once with the owner record after success
            clock: Epoch-seconds source used for temporary pet ids
            today: Date source used to turn age brackets into birth dates
        """
        self._create_customer = create_customer
        self._create_pet = create_pet
        self.notifier: Notifier = notifier or LoggingNotifier()
        self.settings = settings or WizardSettings()
        self.breed_catalog = breed_catalog or BreedCatalog()
        self.on_family_created = on_family_created
        self._clock = clock
        self._today = today or date.today

        self.is_open = False
        self.is_submitting = False
        self.stage = WizardStage.OWNER
        self.draft = FamilyDraft()
        self.current_pet = PetDraft()
        self.validation_errors: Dict[str, str] = {}

        # Partial-submission state kept between confirm attempts
        self._pending_parent: Optional[CustomerRecord] = None
        self._created_pet_ids: Set[str] = set()
        self._in_flight: Dict[str, "asyncio.Task[PetRecord]"] = {}

    # Lifecycle

    def open(self) -> None:
        """Open the wizard on a fresh, empty draft."""
        self.reset()
        self.is_open = True
        logger.debug("Family wizard opened")

    def close(self) -> None:
        """Close the wizard, discarding the draft."""
        self.reset()
        self.is_open = False
        logger.debug("Family wizard closed")

    cancel = close

    def reset(self) -> None:
        """Return every piece of session state to its initial value."""
        self.stage = WizardStage.OWNER
        self.draft = FamilyDraft()
        self.current_pet = PetDraft()
        self.validation_errors = {}
        self._pending_parent = None
        self._created_pet_ids = set()
        self._in_flight = {}

    # Owner stage

    def set_owner_field(self, field: str, value: str) -> None:
        """
        Update one owner field. The phone is stored with the display mask.

        Raises:
            AttributeError: If the field does not exist on the owner form
        """
        if field not in OwnerDraft.field_names():
            raise AttributeError(f"'OwnerDraft' has no attribute '{field}'")
        if field == "phone":
            value = format_br_phone(value or "")
        setattr(self.draft.owner, field, value)
        self.validation_errors.pop(field, None)

    def continue_to_pets(self) -> bool:
        """
        Validate the owner form and move to the pets stage.

        Returns:
            True if the stage changed, False if the owner form is incomplete
        """
        result = self.draft.owner.validate()
        if not result.is_valid:
            self.validation_errors = result.field_errors()
            logger.info(
                "Owner stage blocked, missing fields: %s",
                ", ".join(sorted(self.validation_errors)),
            )
            self.notifier.notify_error(
                messages.OWNER_FIELDS_TITLE, messages.OWNER_FIELDS_DESCRIPTION
            )
            return False

        self.validation_errors = {}
        self.stage = WizardStage.PETS
        return True

    # Pets stage

    def set_pet_field(self, field: str, value: Any) -> None:
        """
        Update one field of the pet sub-form and clear its pending error.

        Enum members are stored as their values.

        Raises:
            AttributeError: If the field does not exist on the pet form
            ValueError: If ``age`` is not a known age bracket
        """
        if field not in PetDraft.form_field_names():
            raise AttributeError(f"'PetDraft' has no attribute '{field}'")
        if isinstance(value, enum.Enum):
            value = value.value
        if field == "age":
            parse_age_bracket(value)
        setattr(self.current_pet, field, value)
        self.validation_errors.pop(field, None)

    def add_pet(self) -> Optional[PetDraft]:
        """
        Validate the sub-form and append it to the family.

        On failure the pet list is untouched and ``validation_errors`` holds one
        message per missing field.

        Returns:
            The added pet, or None when validation failed
        """
        result = self.current_pet.validate()
        if not result.is_valid:
            self.validation_errors = result.field_errors()
            self.notifier.notify_error(
                messages.PET_FIELDS_TITLE, messages.PET_FIELDS_DESCRIPTION
            )
            return None

        pet = self.current_pet
        pet.temp_id = self._new_temp_id()
        self.draft.pets.append(pet)
        self.current_pet = PetDraft()
        self.validation_errors = {}

        logger.debug("Pet %s added to draft as %s", pet.name, pet.temp_id)
        self.notifier.notify_success(
            messages.PET_ADDED_TITLE,
            messages.PET_ADDED_DESCRIPTION.format(name=pet.name),
        )
        return pet

    def remove_pet(self, temp_id: str) -> bool:
        """Remove a pet from the family by its temporary id."""
        before = len(self.draft.pets)
        self.draft.pets = [pet for pet in self.draft.pets if pet.temp_id != temp_id]
        return len(self.draft.pets) != before

    def suggest_breeds(self, query: str = "", limit: int = 8) -> List[str]:
        """Breed autocomplete for the species selected in the sub-form."""
        return self.breed_catalog.suggest(self.current_pet.species, query, limit)

    def continue_to_review(self) -> bool:
        """
        Move to the review stage.

        Returns:
            True if the stage changed, False if no pet has been added
        """
        if not self.draft.pets:
            self.notifier.notify_error(messages.NO_PETS_TITLE, messages.NO_PETS_DESCRIPTION)
            return False
        self.stage = WizardStage.REVIEW
        return True

    # Navigation

    def go_back(self, stage: Optional[WizardStage] = None) -> None:
        """
        Navigate to an earlier stage, keeping everything entered so far.

        Args:
            stage: Target stage; defaults to the previous one

        Raises:
            ValueError: If the target is not before the current stage
        """
        current = _STAGE_ORDER.index(self.stage)
        if stage is None:
            target = _STAGE_ORDER[max(current - 1, 0)]
        else:
            target = stage
            if _STAGE_ORDER.index(target) > current:
                raise ValueError(
                    f"Cannot go back from {self.stage.value} to {target.value}"
                )
        self.stage = target

    def raise_for_stage(self) -> None:
        """
        Raise if the current stage cannot be left.

        Raises:
            StageValidationException: With the missing fields of the stage
        """
        if self.stage is WizardStage.OWNER:
            errors = self.draft.owner.validate().field_errors()
            if errors:
                raise StageValidationException(
                    messages.OWNER_FIELDS_DESCRIPTION,
                    stage=self.stage.value,
                    validation_errors=errors,
                )
        elif not self.draft.pets:
            raise StageValidationException(
                messages.NO_PETS_DESCRIPTION,
                stage=self.stage.value,
                validation_errors={"pets": messages.NO_PETS_TITLE},
            )

    # Review stage

    def summary(self) -> Dict[str, Any]:
        """Read-only view of the draft for the review screen."""
        owner = self.draft.owner
        return {
            "owner": {
                "name": owner.name.strip(),
                "phone": owner.phone,
                "email": owner.email or None,
                "address": owner.address or None,
                "notes": owner.notes or None,
            },
            "pets": [
                {
                    "temp_id": pet.temp_id,
                    "name": pet.name.strip(),
                    "species": pet.species,
                    "species_label": species_label(pet.species),
                    "size": pet.size,
                    "size_label": size_label(pet.size),
                    "breed": pet.breed or None,
                    "age_label": age_label(pet.age) or None,
                    "temperament_label": temperament_label(pet.temperament) or None,
                    "is_neutered": pet.is_neutered,
                    "is_vaccinated": pet.is_vaccinated,
                }
                for pet in self.draft.pets
            ],
            "pet_count": len(self.draft.pets),
        }

    async def confirm(self) -> Optional[CustomerRecord]:
        """
        Persist the family.

        Returns:
            The created owner record, or None when the submission was refused
            (no pets, or a submission already in flight)

        Raises:
            ParentCreationException: The owner create call failed; the draft
                is kept
            ParentRecordException: The owner was created but its result has
                no usable id; the draft is kept
            DependentCreationException: The owner was created but at least one
                pet was not; the draft is kept
        """
        if self.is_submitting:
            logger.warning("Confirm ignored: a submission is already in progress")
            return None

        if not self.draft.pets:
            SubmissionPreconditionException(
                messages.NO_PETS_DESCRIPTION, rule_name="at_least_one_pet"
            ).log_error(logger, logging.WARNING)
            self.notifier.notify_error(messages.NO_PETS_TITLE, messages.NO_PETS_DESCRIPTION)
            return None

        self.is_submitting = True
        try:
            parent = await self._create_parent()
            await self._create_dependents(parent)
        except SubmissionException as exc:
            log_exception_context(
                exc,
                {
                    "owner": self.draft.owner.name,
                    "pet_count": len(self.draft.pets),
                    "fan_out_policy": self.settings.fan_out_policy.value,
                },
                logger,
            )
            self.notifier.notify_error(
                messages.SUBMISSION_FAILED_TITLE, messages.SUBMISSION_FAILED_DESCRIPTION
            )
            raise
        finally:
            self.is_submitting = False

        pet_count = len(self.draft.pets)
        owner_name = self.draft.owner.name.strip()
        logger.info("Family %s created with %d pets", parent.id, pet_count)

        self.notifier.notify_success(
            messages.FAMILY_CREATED_TITLE,
            messages.FAMILY_CREATED_DESCRIPTION.format(owner=owner_name, count=pet_count),
        )
        self.notifier.celebrate()
        self.close()

        if self.on_family_created is not None:
            outcome = self.on_family_created(parent)
            if inspect.isawaitable(outcome):
                await outcome

        return parent

    # Internals

    def _new_temp_id(self) -> str:
        if self._clock is None:
            return new_temp_id(self.draft.temp_ids())
        return new_temp_id(self.draft.temp_ids(), self._clock)

    async def _create_parent(self) -> CustomerRecord:
        if not self.settings.resume_partial_submissions:
            self._pending_parent = None
            self._created_pet_ids = set()
            self._in_flight = {}

        if self._pending_parent is not None:
            logger.info(
                "Reusing owner %s from the previous attempt", self._pending_parent.id
            )
            return self._pending_parent

        try:
            payload = self.draft.owner.to_create_schema(self.settings.organization_id)
            raw = await self._create_customer(payload)
        except Exception as e:
            raise ParentCreationException(original_error=e) from e

        try:
            record = CustomerRecord.model_validate(raw)
        except ValidationError as e:
            raise ParentRecordException(raw_record=raw, original_error=e) from e

        logger.debug("Owner %s created", record.id)
        return record

    async def _create_one_pet(self, temp_id: str, payload: PetCreate) -> PetRecord:
        created_ids = self._created_pet_ids
        raw = await self._create_pet(payload)
        # A resolved call means the pet exists, whatever shape the result has
        created_ids.add(temp_id)
        return _pet_record(raw, payload)

    async def _create_dependents(self, parent: CustomerRecord) -> List[PetRecord]:
        if self._in_flight:
            logger.info(
                "Waiting for %d pet creates from the previous attempt",
                len(self._in_flight),
            )
            await asyncio.gather(*self._in_flight.values(), return_exceptions=True)
            self._in_flight = {}

        reference_date = self._today()
        pending: List[Tuple[str, PetCreate]] = []
        try:
            for pet in self.draft.pets:
                if pet.temp_id in self._created_pet_ids:
                    continue
                pending.append(
                    (
                        pet.temp_id or "",
                        pet.to_create_schema(
                            parent.id,
                            organization_id=self.settings.organization_id,
                            default_breed=self.settings.default_breed,
                            reference_date=reference_date,
                        ),
                    )
                )
        except Exception as e:
            self._pending_parent = parent
            raise DependentCreationException(
                parent_record=parent,
                created=sorted(self._created_pet_ids),
                original_error=e,
            ) from e

        calls = [self._create_one_pet(temp_id, payload) for temp_id, payload in pending]

        if self.settings.fan_out_policy is FanOutPolicy.SETTLE_ALL:
            return await self._settle_all(parent, pending, calls)

        tasks = {
            temp_id: asyncio.ensure_future(call)
            for (temp_id, _), call in zip(pending, calls)
        }
        for task in tasks.values():
            task.add_done_callback(_log_pet_task_failure)

        try:
            return list(await asyncio.gather(*tasks.values()))
        except Exception as e:
            self._pending_parent = parent
            # Still running: a resumed attempt waits for these instead of re-issuing them
            self._in_flight = {
                temp_id: task for temp_id, task in tasks.items() if not task.done()
            }
            raise DependentCreationException(
                parent_record=parent,
                created=sorted(self._created_pet_ids),
                in_flight=sorted(self._in_flight),
                original_error=e,
            ) from e

    async def _settle_all(
        self,
        parent: CustomerRecord,
        pending: List[Tuple[str, PetCreate]],
        calls: List[Awaitable[PetRecord]],
    ) -> List[PetRecord]:
        results = await asyncio.gather(*calls, return_exceptions=True)

        created: List[PetRecord] = []
        failed: Dict[str, str] = {}
        first_error: Optional[BaseException] = None
        for (temp_id, _), outcome in zip(pending, results):
            if isinstance(outcome, Exception):
                failed[temp_id] = str(outcome)
                first_error = first_error or outcome
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                created.append(outcome)

        if failed:
            self._pending_parent = parent
            raise DependentCreationException(
                f"{len(failed)} of {len(pending)} pets could not be created",
                parent_record=parent,
                created=sorted(self._created_pet_ids),
                failed=failed,
                original_error=first_error,
            )
        return created


def _pet_record(raw: Any, payload: PetCreate) -> PetRecord:
    """Normalize a pet create result, filling gaps from the payload."""
    try:
        record = PetRecord() if raw is None else PetRecord.model_validate(raw)
    except ValidationError as e:
        logger.warning("Pet %s created but its record could not be read: %s", payload.name, e)
        record = PetRecord()

    updates: Dict[str, Any] = {}
    if record.owner_id is None:
        updates["owner_id"] = payload.owner_id
    if record.name is None:
        updates["name"] = payload.name
    return record.model_copy(update=updates)


def _log_pet_task_failure(task: "asyncio.Task[PetRecord]") -> None:
    if not task.cancelled() and task.exception() is not None:
        logger.debug("Pet create finished with an error: %s", task.exception())
