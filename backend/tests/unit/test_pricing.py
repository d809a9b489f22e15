"""Unit tests for the pricing calculator."""

import pytest

from interio.models import InstallationCharge, LineItem, Quotation, Room
from interio.services.pricing import PricingCalculator, get_pricing_calculator


pytestmark = pytest.mark.unit


def make_item(price, qty=1, discount=0, kind="product", room_id="room-1", name="Item"):
    return LineItem(
        room_id=room_id,
        kind=kind,
        name=name,
        selling_price=price,
        quantity=qty,
        discount_percent=discount,
    )


def make_room(products=(), accessories=(), charges=(), name="Kitchen", room_id="room-1"):
    return Room(
        id=room_id,
        quotation_id="q-1",
        name=name,
        products=list(products),
        accessories=list(accessories),
        installation_charges=list(charges),
    )


def make_charge(amount_sqft, rate=130.0, room_id="room-1"):
    return InstallationCharge(
        room_id=room_id,
        cabinet_type="Base unit",
        width_mm=1000,
        height_mm=1000,
        area_sqft=amount_sqft,
        price_per_sqft=rate,
    )


def make_quotation(rooms=(), gst=18.0, discount=0.0, handling=0.0):
    return Quotation(
        id="q-1",
        quotation_number="Q-2510-0001",
        customer_id="c-1",
        gst_percent=gst,
        global_discount_percent=discount,
        installation_handling=handling,
        rooms=list(rooms),
    )


@pytest.fixture
def calculator():
    return PricingCalculator()


class TestLineTotals:
    """Tests for per-line arithmetic."""

    @pytest.mark.parametrize(
        "price,qty,discount,expected",
        [
            (10000, 1, 10, 9000),
            (500, 2, 0, 1000),
            (1200, 3, 100, 0),
            (0, 5, 50, 0),
            (250, 0, 0, 0),
        ],
    )
    def test_line_total(self, calculator, price, qty, discount, expected):
        """Contribution is price x qty x (1 - discount / 100)."""
        assert calculator.line_total(make_item(price, qty, discount)) == pytest.approx(expected)

    def test_line_total_non_increasing_in_discount(self, calculator):
        """A larger discount never increases the contribution."""
        totals = [calculator.line_total(make_item(999.99, 3, d)) for d in range(0, 101, 5)]
        assert all(a >= b for a, b in zip(totals, totals[1:]))

    def test_quantity_defaults_to_one(self, calculator):
        """An item without a quantity counts once."""
        item = LineItem(room_id="room-1", name="Shelf", selling_price=700)
        assert item.quantity == 1
        assert calculator.line_total(item) == 700


class TestRoomTotals:
    """Tests for room level totals."""

    def test_room_totals_include_accessories(self, calculator):
        """Selling and discounted totals cover products and accessories."""
        room = make_room(
            products=[make_item(10000, 1, 10)],
            accessories=[make_item(500, 2, 0, kind="accessory")],
        )

        totals = calculator.room_totals(room)

        assert totals.selling_price == 11000
        assert totals.discounted_price == 10000
        assert totals.name == "Kitchen"

    def test_empty_room_is_zero(self, calculator):
        """A room without items totals zero."""
        totals = calculator.room_totals(make_room())
        assert totals.selling_price == 0
        assert totals.discounted_price == 0
        assert totals.installation_charges == 0

    def test_blank_room_name_is_untitled(self, calculator):
        """Blank names are displayed as Untitled."""
        assert calculator.room_totals(make_room(name="  ")).name == "Untitled"


class TestQuotationTotals:
    """Tests for quotation level totals."""

    def test_zero_rooms_without_handling(self, calculator):
        """No rooms and no handling gives all zeros."""
        totals = calculator.calculate(make_quotation(handling=0))

        assert totals.subtotal == 0
        assert totals.gst_amount == 0
        assert totals.final_price == 0
        assert totals.rooms == []

    def test_zero_rooms_final_price_is_handling_plus_gst(self, calculator):
        """With no rooms the final price is the handling charge plus GST."""
        totals = calculator.calculate(make_quotation(handling=500, gst=18))

        assert totals.subtotal == 0
        assert totals.total_installation_charges == 500
        assert totals.final_price == pytest.approx(500 * 1.18)
        assert totals.gst_amount == pytest.approx(totals.final_price - 500)

    def test_end_to_end_two_rooms(self, calculator):
        """Two rooms of 10000, 1000 of charges and 500 handling at 18% GST."""
        room_a = make_room(
            products=[make_item(10000, room_id="a")],
            charges=[make_charge(4, rate=125, room_id="a")],
            room_id="a",
        )
        room_b = make_room(
            products=[make_item(12500, discount=20, room_id="b")],
            charges=[make_charge(5, rate=100, room_id="b")],
            room_id="b",
            name="Bedroom",
        )

        totals = calculator.calculate(make_quotation([room_a, room_b], gst=18, handling=500))

        assert totals.subtotal == 20000
        assert totals.total_installation_charges == 1500
        assert totals.gst_base == 21500
        assert totals.gst_amount == 3870
        assert totals.final_price == 25370
        assert [r.room_id for r in totals.rooms] == ["a", "b"]

    def test_global_discount_applies_before_installation(self, calculator):
        """Global discount reduces the subtotal only."""
        room = make_room(products=[make_item(10000)], charges=[make_charge(10, rate=100)])

        totals = calculator.calculate(make_quotation([room], gst=0, discount=10, handling=0))

        assert totals.global_discount_amount == 1000
        assert totals.after_global_discount == 9000
        assert totals.total_installation_charges == 1000
        assert totals.final_price == 10000

    def test_final_price_non_decreasing_in_gst(self, calculator):
        """Raising GST never lowers the final price."""
        room = make_room(products=[make_item(3333.33, 3, 7)], charges=[make_charge(2.5)])
        prices = [
            calculator.calculate(make_quotation([room], gst=g, handling=250)).final_price
            for g in range(0, 101, 10)
        ]
        assert all(a <= b for a, b in zip(prices, prices[1:]))

    def test_final_price_non_increasing_in_global_discount(self, calculator):
        """Raising the global discount never raises the final price."""
        room = make_room(products=[make_item(4999.5, 2, 12.5)])
        prices = [
            calculator.calculate(make_quotation([room], discount=d, handling=100)).final_price
            for d in range(0, 101, 10)
        ]
        assert all(a >= b for a, b in zip(prices, prices[1:]))

    def test_calculation_is_idempotent(self, calculator):
        """The same input always produces identical output."""
        room = make_room(
            products=[make_item(1234.567, 3, 12.5)],
            accessories=[make_item(99.99, 7, 3, kind="accessory")],
            charges=[make_charge(3.3333)],
        )
        quotation = make_quotation([room], gst=18, discount=2.5, handling=333.33)

        assert calculator.calculate(quotation) == calculator.calculate(quotation)

    def test_outputs_rounded_to_paise(self, calculator):
        """Every output field has at most two decimals."""
        room = make_room(products=[make_item(333.333, 1, 0)])
        totals = calculator.calculate(make_quotation([room], gst=18))

        for value in (totals.subtotal, totals.gst_amount, totals.final_price):
            assert round(value, 2) == value

    def test_very_large_prices(self, calculator):
        """Huge but finite prices are priced without decimal overflow."""
        room = make_room(products=[make_item(1e27)])
        totals = calculator.calculate(make_quotation([room], gst=18))

        assert totals.subtotal == 1e27
        assert totals.final_price == pytest.approx(1.18e27)

    def test_totals_serialise_with_camel_case(self, calculator):
        """API output uses camelCase keys."""
        data = calculator.calculate(make_quotation()).model_dump(by_alias=True)

        assert "finalPrice" in data
        assert "gstBase" in data
        assert "totalInstallationCharges" in data


class TestInstallationCharge:
    """Tests for installation charge derivation."""

    def test_area_derived_from_dimensions(self):
        """304.8mm x 304.8mm is one square foot."""
        charge = InstallationCharge(
            room_id="room-1", cabinet_type="Loft", width_mm=304.8, height_mm=304.8
        )
        assert charge.area_sqft == pytest.approx(1.0)
        assert charge.amount == 130

    def test_amount_rounded_half_up(self):
        """Amount is rounded once to paise."""
        charge = InstallationCharge(
            room_id="room-1",
            cabinet_type="Base unit",
            width_mm=1000,
            height_mm=1000,
            price_per_sqft=130,
        )
        assert charge.amount == 1399.31

    def test_supplied_area_wins(self):
        """An explicit area is used instead of width x height."""
        charge = InstallationCharge(
            room_id="room-1",
            cabinet_type="Tall unit",
            width_mm=600,
            height_mm=2100,
            area_sqft=20,
            price_per_sqft=150,
        )
        assert charge.amount == 3000


def test_get_pricing_calculator_singleton():
    """Factory returns the same instance."""
    assert get_pricing_calculator() is get_pricing_calculator()
