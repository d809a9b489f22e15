"""Unit tests for the quotation validator."""

import pytest

from interio.models import AppSettings, InstallationCharge, LineItem, Quotation, Room
from interio.services.quotation_validator import (
    ACCESSORY_WARNING_MESSAGE,
    QuotationValidator,
)


pytestmark = pytest.mark.unit


def item(name, price=1000, kind="product"):
    return LineItem(room_id="room-1", kind=kind, name=name, selling_price=price)


def charge():
    return InstallationCharge(room_id="room-1", cabinet_type="Base unit", width_mm=600, height_mm=900)


def room(name="Kitchen", products=(), accessories=(), charges=()):
    return Room(
        id="room-1",
        quotation_id="q-1",
        name=name,
        products=list(products),
        accessories=list(accessories),
        installation_charges=list(charges),
    )


def quotation(rooms=(), handling=0.0):
    return Quotation(
        id="q-1",
        quotation_number="Q-2510-0001",
        customer_id="c-1",
        installation_handling=handling,
        rooms=list(rooms),
    )


@pytest.fixture
def validator():
    return QuotationValidator()


@pytest.fixture
def app_settings():
    return AppSettings(required_accessories="skirting,handles")


class TestQuotationValidator:
    """Tests for the save checklist."""

    def test_no_rooms_single_error(self, validator, app_settings):
        """A quotation without rooms stops at one error."""
        result = validator.validate(quotation(handling=0), app_settings)

        assert result.is_valid is False
        assert len(result.errors) == 1
        assert result.errors[0].type == "room_zero_value"
        assert result.errors[0].message == "Quotation must have at least one room."
        assert result.warnings == []

    def test_product_only_room_yields_three_errors(self, validator, app_settings):
        """One product, no accessories, no charges and no handling."""
        result = validator.validate(quotation([room(products=[item("Wardrobe")])]), app_settings)

        assert result.is_valid is False
        assert [e.type for e in result.errors] == [
            "missing_accessory",
            "missing_installation",
            "missing_handling_charge",
        ]
        assert result.errors[0].room_id == "room-1"
        assert result.errors[0].room_name == "Kitchen"
        assert result.errors[2].room_id is None

    def test_complete_quotation_is_valid(self, validator, app_settings):
        """All checks pass; warnings do not block."""
        q = quotation(
            [room(products=[item("Base unit")], accessories=[item("Skirting PVC", 200, "accessory")], charges=[charge()])],
            handling=500,
        )

        result = validator.validate(q, app_settings)

        assert result.is_valid is True
        assert result.errors == []
        assert len(result.warnings) == 1
        assert result.warnings[0].accessories == ["handles"]

    def test_zero_value_room(self, validator, app_settings):
        """A room whose discounted total is zero is flagged."""
        q = quotation(
            [room(products=[item("Free sample", 0)], accessories=[item("Handles", 0, "accessory")], charges=[charge()])],
            handling=100,
        )

        result = validator.validate(q, app_settings)

        assert [e.type for e in result.errors] == ["room_zero_value"]
        assert result.errors[0].message == 'Room "Kitchen" has a zero value.'

    def test_untitled_room_name_in_messages(self, validator, app_settings):
        """Blank room names are reported as Untitled."""
        result = validator.validate(quotation([room(name="")], handling=100), app_settings)

        messages = [e.message for e in result.errors]
        assert 'Room "Untitled" has a zero value.' in messages
        assert 'Room "Untitled" does not have any products.' in messages
        assert all(e.room_name == "Untitled" for e in result.errors)

    def test_missing_required_accessories_warning(self, validator, app_settings):
        """Soft-close Hinges matches neither skirting nor handles."""
        q = quotation(
            [room(products=[item("Base")], accessories=[item("Soft-close Hinges", 300, "accessory")], charges=[charge()])],
            handling=500,
        )

        result = validator.validate(q, app_settings)

        assert len(result.warnings) == 1
        warning = result.warnings[0]
        assert warning.type == "check_accessories"
        assert warning.message == ACCESSORY_WARNING_MESSAGE
        assert warning.accessories == ["skirting", "handles"]

    def test_keyword_matching_is_case_insensitive_substring(self, validator):
        """Keywords are trimmed and lower-cased; names are lower-cased."""
        settings = AppSettings(required_accessories=" Skirting , ,T Profile")
        q = quotation(
            [room(accessories=[item("Aluminium t profile 2m", 100, "accessory"), item("SKIRTING board", 100, "accessory")])],
        )

        assert QuotationValidator.missing_accessories(q, settings) == []

    @pytest.mark.parametrize("raw", [None, ""])
    def test_default_keywords_when_unset_or_empty(self, raw):
        """None and the empty string fall back to the default keyword list."""
        settings = AppSettings(required_accessories=raw)
        assert settings.required_accessory_keywords() == [
            "skirting",
            "handles",
            "sliding mechanism",
            "t profile",
        ]

    def test_empty_keyword_setting_still_warns(self, validator):
        """An empty setting checks the default keywords."""
        settings = AppSettings(required_accessories="")
        q = quotation(
            [room(products=[item("Base")], accessories=[item("Handles - Brushed Steel", 500, "accessory")], charges=[charge()])],
            handling=100,
        )

        result = validator.validate(q, settings)

        assert len(result.warnings) == 1
        assert result.warnings[0].accessories == ["skirting", "sliding mechanism", "t profile"]

    def test_result_serialises_with_camel_case(self, validator, app_settings):
        """API output uses isValid / roomId / roomName."""
        data = validator.validate(quotation([room()]), app_settings).model_dump(by_alias=True)

        assert data["isValid"] is False
        assert "roomId" in data["errors"][0]
        assert "roomName" in data["errors"][0]
