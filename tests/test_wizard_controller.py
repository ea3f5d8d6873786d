"""
Tests for the wizard stage flow: navigation, validation and pet list edits.
"""

import pytest

from conftest import add_pet, fill_owner
from petshop_core.exceptions import StageValidationException
from petshop_core.models.pet import PetSpecies
from petshop_core.wizard import FamilyWizard, LoggingNotifier, Notifier, WizardStage
from petshop_core.wizard import messages


class TestLifecycle:
    """Test opening, closing and resetting the wizard."""

    def test_starts_closed_on_owner_stage(self, backend):
        wizard = FamilyWizard(backend.create_customer, backend.create_pet)

        assert not wizard.is_open
        assert wizard.stage is WizardStage.OWNER
        assert wizard.draft.is_empty()
        assert isinstance(wizard.notifier, LoggingNotifier)
        assert isinstance(wizard.notifier, Notifier)

    def test_open_resets_previous_session(self, wizard):
        fill_owner(wizard)
        wizard.continue_to_pets()

        wizard.open()

        assert wizard.is_open
        assert wizard.stage is WizardStage.OWNER
        assert wizard.draft.is_empty()

    def test_cancel_discards_draft(self, wizard):
        fill_owner(wizard)
        wizard.continue_to_pets()
        add_pet(wizard, "Luna")

        wizard.cancel()

        assert not wizard.is_open
        assert wizard.stage is WizardStage.OWNER
        assert wizard.draft.is_empty()
        assert wizard.validation_errors == {}


class TestOwnerStage:
    """Test the owner stage and its transition guard."""

    def test_phone_is_masked_while_typing(self, wizard):
        wizard.set_owner_field("phone", "119")
        assert wizard.draft.owner.phone == "(11) 9"

        wizard.set_owner_field("phone", "11999991234")
        assert wizard.draft.owner.phone == "(11) 99999-1234"
        assert wizard.draft.owner.phone_digits == "11999991234"

    def test_unknown_owner_field(self, wizard):
        with pytest.raises(AttributeError):
            wizard.set_owner_field("cpf", "123")

    def test_blocked_without_required_fields(self, wizard, notifier):
        wizard.set_owner_field("name", "   ")

        assert wizard.continue_to_pets() is False
        assert wizard.stage is WizardStage.OWNER
        assert set(wizard.validation_errors) == {"name", "phone"}
        assert notifier.errors == [
            (messages.OWNER_FIELDS_TITLE, messages.OWNER_FIELDS_DESCRIPTION)
        ]

    def test_blocked_without_phone(self, wizard):
        wizard.set_owner_field("name", "Maria Silva")

        assert wizard.continue_to_pets() is False
        assert wizard.validation_errors == {"phone": "Telefone é obrigatório"}

    def test_editing_a_field_clears_its_error(self, wizard):
        wizard.continue_to_pets()

        wizard.set_owner_field("name", "Maria Silva")

        assert "name" not in wizard.validation_errors
        assert "phone" in wizard.validation_errors

    def test_advances_with_name_and_phone(self, wizard, notifier):
        fill_owner(wizard)

        assert wizard.continue_to_pets() is True
        assert wizard.stage is WizardStage.PETS
        assert notifier.errors == []

    def test_raise_for_stage(self, wizard):
        with pytest.raises(StageValidationException) as exc_info:
            wizard.raise_for_stage()

        assert exc_info.value.stage == "owner"
        assert set(exc_info.value.validation_errors) == {"name", "phone"}

        fill_owner(wizard)
        wizard.raise_for_stage()


class TestPetsStage:
    """Test adding and removing pets."""

    @pytest.fixture
    def pets_wizard(self, wizard):
        fill_owner(wizard)
        wizard.continue_to_pets()
        return wizard

    def test_add_pet(self, pets_wizard, notifier):
        pet = add_pet(pets_wizard, "Luna", breed="Golden Retriever", age="3")

        assert pet is not None
        assert pet.temp_id.startswith("temp-")
        assert pets_wizard.draft.pets == [pet]
        assert pets_wizard.current_pet.name == ""
        assert notifier.successes[-1] == (
            messages.PET_ADDED_TITLE,
            "Luna foi adicionado à família",
        )

    def test_add_pet_reports_exactly_the_missing_fields(self, pets_wizard, notifier):
        pets_wizard.set_pet_field("name", "Luna")

        assert pets_wizard.add_pet() is None
        assert pets_wizard.draft.pets == []
        assert pets_wizard.validation_errors == {
            "species": "Selecione uma espécie",
            "size": "Selecione o porte",
        }
        assert notifier.errors[-1][0] == messages.PET_FIELDS_TITLE

    def test_failed_add_keeps_sub_form(self, pets_wizard):
        pets_wizard.set_pet_field("name", "Luna")
        pets_wizard.add_pet()

        assert pets_wizard.current_pet.name == "Luna"

    def test_editing_pet_field_clears_its_error(self, pets_wizard):
        pets_wizard.add_pet()

        pets_wizard.set_pet_field("species", PetSpecies.CAT)

        assert pets_wizard.current_pet.species == "cat"
        assert "species" not in pets_wizard.validation_errors
        assert "size" in pets_wizard.validation_errors

    def test_invalid_age_bracket(self, pets_wizard):
        with pytest.raises(ValueError):
            pets_wizard.set_pet_field("age", "20")

    def test_temp_id_is_not_editable(self, pets_wizard):
        with pytest.raises(AttributeError):
            pets_wizard.set_pet_field("temp_id", "temp-1")

    def test_temp_ids_are_unique(self, pets_wizard):
        first = add_pet(pets_wizard, "Luna")
        second = add_pet(pets_wizard, "Mingau", species="cat", size="small")

        assert first.temp_id != second.temp_id

    def test_remove_pet(self, pets_wizard):
        luna = add_pet(pets_wizard, "Luna")
        mingau = add_pet(pets_wizard, "Mingau", species="cat", size="small")

        assert pets_wizard.remove_pet(luna.temp_id) is True
        assert pets_wizard.draft.pets == [mingau]
        assert pets_wizard.remove_pet("temp-unknown") is False

    def test_review_requires_a_pet(self, pets_wizard, notifier):
        assert pets_wizard.continue_to_review() is False
        assert pets_wizard.stage is WizardStage.PETS
        assert notifier.errors[-1] == (messages.NO_PETS_TITLE, messages.NO_PETS_DESCRIPTION)

        with pytest.raises(StageValidationException):
            pets_wizard.raise_for_stage()

        add_pet(pets_wizard, "Luna")
        assert pets_wizard.continue_to_review() is True
        assert pets_wizard.stage is WizardStage.REVIEW

    def test_breed_suggestions_follow_selected_species(self, pets_wizard):
        assert pets_wizard.suggest_breeds("retr") == []

        pets_wizard.set_pet_field("species", "dog")

        assert pets_wizard.suggest_breeds("retr") == [
            "Labrador Retriever",
            "Golden Retriever",
        ]


class TestNavigation:
    """Test back navigation and the review summary."""

    def test_back_navigation_preserves_data(self, ready_wizard):
        ready_wizard.go_back(WizardStage.OWNER)

        assert ready_wizard.stage is WizardStage.OWNER
        assert ready_wizard.draft.owner.name == "Maria Silva"
        assert len(ready_wizard.draft.pets) == 2

        assert ready_wizard.continue_to_pets()
        assert ready_wizard.continue_to_review()

    def test_go_back_one_stage(self, ready_wizard):
        ready_wizard.go_back()
        assert ready_wizard.stage is WizardStage.PETS

        ready_wizard.go_back()
        assert ready_wizard.stage is WizardStage.OWNER

        ready_wizard.go_back()
        assert ready_wizard.stage is WizardStage.OWNER

    def test_cannot_go_forward_with_go_back(self, wizard):
        with pytest.raises(ValueError):
            wizard.go_back(WizardStage.REVIEW)

    def test_summary(self, ready_wizard):
        summary = ready_wizard.summary()

        assert summary["owner"]["name"] == "Maria Silva"
        assert summary["owner"]["phone"] == "(11) 99999-1234"
        assert summary["owner"]["email"] is None
        assert summary["pet_count"] == 2
        assert summary["pets"][0]["species_label"] == "Cão"
        assert summary["pets"][1]["size_label"] == "Pequeno"
        assert summary["pets"][0]["age_label"] is None


class TestLoggingNotifier:
    """Test the default log-backed notifier."""

    def test_notifications_are_logged(self, caplog):
        notifier = LoggingNotifier()

        with caplog.at_level("DEBUG", logger="petshop_core.wizard.notifier"):
            notifier.notify_success("Pet adicionado! 🐾", "Luna foi adicionado à família")
            notifier.notify_error(messages.NO_PETS_TITLE)
            notifier.celebrate()

        levels = [record.levelname for record in caplog.records]
        assert levels == ["INFO", "WARNING", "DEBUG"]
        assert caplog.records[0].getMessage() == (
            "Pet adicionado! 🐾: Luna foi adicionado à família"
        )
        assert caplog.records[1].getMessage() == messages.NO_PETS_TITLE
