"""Quotation pricing calculator.

Turns a quotation's rooms, line items and installation charges into the
figures shown on screen, printed on documents and cached on the records.

Order of operations at quotation level:

1. subtotal = sum of room discounted totals
2. global discount on the subtotal
3. installation = itemised charges of every room + installation handling
4. GST base = subtotal after global discount + installation
5. GST on the base
6. final price = base + GST

Arithmetic runs on raw floats; each output field is rounded to paise only
when the result record is built, so feeding the same quotation twice always
yields identical numbers.
"""

import logging
from typing import Iterable

from ..models.quotation import InstallationCharge, LineItem, Quotation, Room
from ..models.pricing import QuotationTotals, RoomTotals
from ..utils.money import round_money
from .service_factory import service_factory

logger = logging.getLogger(__name__)


class PricingCalculator:
    """Stateless pricing calculator."""

    @staticmethod
    def line_selling_total(item: LineItem) -> float:
        """Unit price x quantity, before discount."""
        return item.selling_price * item.quantity

    @staticmethod
    def line_total(item: LineItem) -> float:
        """Unit price x quantity x (1 - discount / 100)."""
        return item.selling_price * item.quantity * (1 - item.discount_percent / 100)

    @staticmethod
    def installation_total(charges: Iterable[InstallationCharge]) -> float:
        """Sum of installation charge amounts."""
        return sum((charge.amount for charge in charges), 0.0)

    def _room_raw(self, room: Room) -> tuple[float, float, float]:
        items = room.line_items
        selling = sum((self.line_selling_total(i) for i in items), 0.0)
        discounted = sum((self.line_total(i) for i in items), 0.0)
        installation = self.installation_total(room.installation_charges)
        return selling, discounted, installation

    def room_totals(self, room: Room) -> RoomTotals:
        """
        Compute selling and discounted totals for one room.

        Both figures are derived from the same line items independently so a
        document can print them side by side.

        Args:
            room: Room with its products and accessories

        Returns:
            RoomTotals rounded to paise
        """
        selling, discounted, installation = self._room_raw(room)
        return RoomTotals(
            room_id=room.id,
            name=room.display_name,
            selling_price=round_money(selling),
            discounted_price=round_money(discounted),
            installation_charges=round_money(installation),
        )

    def calculate(self, quotation: Quotation) -> QuotationTotals:
        """
        Compute all derived monetary figures of a quotation.

        Args:
            quotation: Quotation with its full room tree

        Returns:
            QuotationTotals; a quotation without rooms yields only the
            installation handling plus GST on it
        """
        total_selling = 0.0
        subtotal = 0.0
        itemised_installation = 0.0
        room_totals = []

        for room in quotation.rooms:
            selling, discounted, installation = self._room_raw(room)
            total_selling += selling
            subtotal += discounted
            itemised_installation += installation
            room_totals.append(
                RoomTotals(
                    room_id=room.id,
                    name=room.display_name,
                    selling_price=round_money(selling),
                    discounted_price=round_money(discounted),
                    installation_charges=round_money(installation),
                )
            )

        global_discount_amount = subtotal * quotation.global_discount_percent / 100
        after_global_discount = subtotal - global_discount_amount
        total_installation = itemised_installation + quotation.installation_handling
        gst_base = after_global_discount + total_installation
        gst_amount = gst_base * quotation.gst_percent / 100
        final_price = gst_base + gst_amount

        totals = QuotationTotals(
            total_selling_price=round_money(total_selling),
            subtotal=round_money(subtotal),
            global_discount_amount=round_money(global_discount_amount),
            after_global_discount=round_money(after_global_discount),
            total_installation_charges=round_money(total_installation),
            gst_base=round_money(gst_base),
            gst_amount=round_money(gst_amount),
            final_price=round_money(final_price),
            rooms=room_totals,
        )
        logger.debug(
            f"Priced quotation {quotation.id}: subtotal={totals.subtotal} "
            f"gst={totals.gst_amount} final={totals.final_price}"
        )
        return totals


@service_factory
def get_pricing_calculator() -> PricingCalculator:
    """Get PricingCalculator singleton."""
    return PricingCalculator()
