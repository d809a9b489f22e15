"""Quotation editing workflow.

Every mutation of a quotation tree goes through this service, which re-runs
the pricing calculator and writes the cached totals back onto the rooms and
the quotation before storing it.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..models import (
    InstallationCharge,
    LineItem,
    Quotation,
    QuotationTotals,
    Room,
    ValidationResult,
)
from ..store import InMemoryStore, get_store
from ..utils import ErrorCode, build_model, log_error, raise_error
from .pricing import PricingCalculator, get_pricing_calculator
from .quotation_validator import QuotationValidator, get_quotation_validator

logger = logging.getLogger(__name__)

QUOTATION_FIELDS = {
    "title",
    "customer_id",
    "global_discount_percent",
    "gst_percent",
    "installation_handling",
}
ITEM_FIELDS = {"name", "description", "category", "selling_price", "discount_percent", "quantity"}
ROOM_FIELDS = {"name", "description"}
CHARGE_FIELDS = {"cabinet_type", "width_mm", "height_mm", "price_per_sqft", "area_sqft"}


def _room_contents(room: Room) -> Dict[str, Any]:
    """Room fields without IDs or cached totals, in the shape add_room accepts."""
    item_exclude = {"id", "room_id", "kind", "created_at", "updated_at"}
    return {
        "name": room.name,
        "description": room.description,
        "products": [i.model_dump(exclude=item_exclude) for i in room.products],
        "accessories": [i.model_dump(exclude=item_exclude) for i in room.accessories],
        "installation_charges": [
            c.model_dump(exclude={"id", "room_id", "amount", "created_at"})
            for c in room.installation_charges
        ],
    }


class QuotationService:
    """Create, edit, price and finalise quotations."""

    def __init__(
        self,
        store: Optional[InMemoryStore] = None,
        calculator: Optional[PricingCalculator] = None,
        validator: Optional[QuotationValidator] = None,
    ):
        """
        Initialize QuotationService.

        Args:
            store: Backing store; None uses the global store
            calculator: PricingCalculator; None uses the singleton
            validator: QuotationValidator; None uses the singleton
        """
        self.store = store or get_store()
        self.calculator = calculator or get_pricing_calculator()
        self.validator = validator or get_quotation_validator()

    # ===== Pricing =====

    def apply_totals(self, quotation: Quotation) -> QuotationTotals:
        """
        Recompute totals and write them onto the quotation and its rooms.

        Args:
            quotation: Quotation to update in place

        Returns:
            The calculator output that was applied
        """
        totals = self.calculator.calculate(quotation)
        for room, room_totals in zip(quotation.rooms, totals.rooms):
            room.selling_price = room_totals.selling_price
            room.discounted_price = room_totals.discounted_price

        quotation.total_selling_price = totals.total_selling_price
        quotation.total_discounted_price = totals.subtotal
        quotation.gst_amount = totals.gst_amount
        quotation.final_price = totals.final_price
        return totals

    def get_totals(self, quotation_id: str) -> QuotationTotals:
        """Calculator output for a stored quotation."""
        return self.calculator.calculate(self.store.get_quotation(quotation_id))

    def _save(self, quotation: Quotation, reopen: bool = True) -> Quotation:
        """Reprice and store; an edited saved quotation drops back to draft."""
        if reopen and quotation.status == "saved":
            logger.info(f"Quotation {quotation.id} edited after save, reopening as draft")
            quotation.status = "draft"
        self.apply_totals(quotation)
        self.store.update_quotation(quotation)
        return quotation

    def _editable(self, quotation_id: str) -> Quotation:
        quotation = self.store.get_quotation(quotation_id)
        if quotation.status == "converted":
            raise_error(ErrorCode.QUOTATION_LOCKED, status_code=409)
        return quotation

    def _room(self, quotation: Quotation, room_id: str) -> Room:
        room = quotation.find_room(room_id)
        if room is None:
            raise_error(ErrorCode.ROOM_NOT_FOUND, status_code=404)
        return room

    # ===== Quotation =====

    def next_quotation_number(self) -> str:
        """Q-YYMM-NNNN."""
        seq = self.store.next_sequence("quotation")
        return f"Q-{datetime.now():%y%m}-{seq:04d}"

    def create_quotation(
        self,
        customer_id: str,
        title: Optional[str] = None,
        global_discount_percent: Optional[float] = None,
        gst_percent: Optional[float] = None,
        installation_handling: float = 0.0,
        rooms: Optional[List[Dict[str, Any]]] = None,
    ) -> Quotation:
        """
        Create a draft quotation.

        GST and global discount fall back to the current AppSettings
        defaults when omitted.

        Args:
            customer_id: Existing customer ID
            title: Project title
            global_discount_percent: Global discount (%)
            gst_percent: GST (%)
            installation_handling: Installation & handling charge
            rooms: Optional nested rooms, each with name/description/products/
                accessories/installation_charges

        Returns:
            Stored, priced Quotation
        """
        self.store.get_customer(customer_id)
        app_settings = self.store.get_app_settings()

        quotation = build_model(
            Quotation,
            {
                "quotation_number": self.next_quotation_number(),
                "customer_id": customer_id,
                "title": title,
                "global_discount_percent": (
                    app_settings.default_global_discount
                    if global_discount_percent is None
                    else global_discount_percent
                ),
                "gst_percent": (
                    app_settings.default_gst_percent if gst_percent is None else gst_percent
                ),
                "installation_handling": installation_handling,
            },
        )
        for room_data in rooms or []:
            quotation.rooms.append(self._build_room(quotation, room_data))

        self.apply_totals(quotation)
        self.store.add_quotation(quotation)
        logger.info(f"Quotation {quotation.quotation_number} created with {len(quotation.rooms)} room(s)")
        return quotation

    def update_quotation(self, quotation_id: str, updates: Dict[str, Any]) -> Quotation:
        """
        Update pricing inputs or header fields of a quotation.

        Args:
            quotation_id: Quotation ID
            updates: Any of title, customer_id, global_discount_percent,
                gst_percent, installation_handling

        Returns:
            Repriced Quotation
        """
        quotation = self._editable(quotation_id)
        updates = {k: v for k, v in updates.items() if k in QUOTATION_FIELDS}
        if "customer_id" in updates:
            self.store.get_customer(updates["customer_id"])

        updated = build_model(Quotation, {**quotation.model_dump(), **updates})
        return self._save(updated)

    def delete_quotation(self, quotation_id: str) -> None:
        """Delete a quotation that has not been converted."""
        self._editable(quotation_id)
        self.store.delete_quotation(quotation_id)

    def duplicate_quotation(self, quotation_id: str, customer_id: Optional[str] = None) -> Quotation:
        """
        Copy a quotation with all its rooms, items and charges.

        The copy is a new draft with its own number and IDs, titled
        "<title> (Copy)". Converted quotations can be duplicated too.

        Args:
            quotation_id: Quotation to copy
            customer_id: Customer of the copy; defaults to the original customer

        Returns:
            The stored, priced copy
        """
        original = self.store.get_quotation(quotation_id)
        if customer_id:
            self.store.get_customer(customer_id)

        duplicate = build_model(
            Quotation,
            {
                "quotation_number": self.next_quotation_number(),
                "customer_id": customer_id or original.customer_id,
                "title": f"{original.title or 'Untitled'} (Copy)",
                "global_discount_percent": original.global_discount_percent,
                "gst_percent": original.gst_percent,
                "installation_handling": original.installation_handling,
            },
        )
        for room in original.rooms:
            duplicate.rooms.append(self._build_room(duplicate, _room_contents(room)))

        self.apply_totals(duplicate)
        self.store.add_quotation(duplicate)
        logger.info(f"Quotation {original.quotation_number} duplicated as {duplicate.quotation_number}")
        return duplicate

    # ===== Rooms =====

    def _build_room(self, quotation: Quotation, data: Dict[str, Any]) -> Room:
        room = build_model(
            Room,
            {
                "quotation_id": quotation.id,
                "name": data.get("name") or "",
                "description": data.get("description"),
            },
        )
        for item_data in data.get("products") or []:
            room.products.append(self._build_item(room, {**item_data, "kind": "product"}))
        for item_data in data.get("accessories") or []:
            room.accessories.append(self._build_item(room, {**item_data, "kind": "accessory"}))
        for charge_data in data.get("installation_charges") or []:
            room.installation_charges.append(self._build_charge(room, charge_data))
        return room

    def add_room(self, quotation_id: str, data: Dict[str, Any]) -> Room:
        """
        Append a room (optionally with its items and charges).

        Args:
            quotation_id: Quotation ID
            data: name, description, products, accessories, installation_charges

        Returns:
            The new Room as stored
        """
        quotation = self._editable(quotation_id)
        room = self._build_room(quotation, data)
        quotation.rooms.append(room)
        self._save(quotation)
        return room

    def update_room(self, quotation_id: str, room_id: str, updates: Dict[str, Any]) -> Room:
        """Rename or re-describe a room."""
        quotation = self._editable(quotation_id)
        room = self._room(quotation, room_id)

        updates = {k: v for k, v in updates.items() if k in ROOM_FIELDS}
        if "name" in updates and updates["name"] is None:
            updates["name"] = ""
        updated = build_model(Room, {**room.model_dump(), **updates})
        quotation.rooms[quotation.rooms.index(room)] = updated
        self._save(quotation)
        return updated

    def reorder_rooms(self, quotation_id: str, room_ids: List[str]) -> Quotation:
        """
        Put the rooms of a quotation in the given order.

        Args:
            quotation_id: Quotation ID
            room_ids: Every room ID of the quotation, each exactly once

        Returns:
            The quotation with its rooms reordered

        Raises:
            APIError: INVALID_REQUEST when room_ids is not a permutation
                of the quotation's rooms
        """
        quotation = self._editable(quotation_id)
        current = {room.id: room for room in quotation.rooms}
        if len(room_ids) != len(current) or set(room_ids) != set(current):
            raise_error(
                ErrorCode.INVALID_REQUEST,
                "room_ids must list every room of the quotation exactly once",
            )

        quotation.rooms = [current[room_id] for room_id in room_ids]
        # Order only; totals and checks are unchanged
        return self._save(quotation, reopen=False)

    def delete_room(self, quotation_id: str, room_id: str) -> None:
        """Remove a room and everything in it."""
        quotation = self._editable(quotation_id)
        room = self._room(quotation, room_id)
        quotation.rooms.remove(room)
        self._save(quotation)

    # ===== Line items =====

    def _build_item(self, room: Room, data: Dict[str, Any]) -> LineItem:
        return build_model(LineItem, {**data, "room_id": room.id})

    def add_item(self, quotation_id: str, room_id: str, data: Dict[str, Any]) -> LineItem:
        """
        Add a product or accessory to a room.

        Args:
            quotation_id: Quotation ID
            room_id: Room ID within the quotation
            data: kind, name, selling_price, discount_percent, quantity, ...

        Returns:
            The new LineItem
        """
        quotation = self._editable(quotation_id)
        room = self._room(quotation, room_id)
        item = self._build_item(room, data)
        if item.kind == "accessory":
            room.accessories.append(item)
        else:
            room.products.append(item)
        self._save(quotation)
        return item

    def update_item(
        self, quotation_id: str, room_id: str, item_id: str, updates: Dict[str, Any]
    ) -> LineItem:
        """Update price, discount, quantity or descriptive fields of an item."""
        quotation = self._editable(quotation_id)
        room = self._room(quotation, room_id)
        item = room.find_item(item_id)
        if item is None:
            raise_error(ErrorCode.ITEM_NOT_FOUND, status_code=404)

        updates = {k: v for k, v in updates.items() if k in ITEM_FIELDS}
        updated = build_model(
            LineItem, {**item.model_dump(), **updates, "updated_at": datetime.now()}
        )
        collection = room.accessories if item.kind == "accessory" else room.products
        collection[collection.index(item)] = updated
        self._save(quotation)
        return updated

    def delete_item(self, quotation_id: str, room_id: str, item_id: str) -> None:
        """Remove a product or accessory."""
        quotation = self._editable(quotation_id)
        room = self._room(quotation, room_id)
        item = room.find_item(item_id)
        if item is None:
            raise_error(ErrorCode.ITEM_NOT_FOUND, status_code=404)
        collection = room.accessories if item.kind == "accessory" else room.products
        collection.remove(item)
        self._save(quotation)

    # ===== Installation charges =====

    def _build_charge(self, room: Room, data: Dict[str, Any]) -> InstallationCharge:
        data = {**data, "room_id": room.id}
        if data.get("price_per_sqft") is None:
            data["price_per_sqft"] = self.store.get_app_settings().default_price_per_sqft
        return build_model(InstallationCharge, data)

    def add_installation_charge(
        self, quotation_id: str, room_id: str, data: Dict[str, Any]
    ) -> InstallationCharge:
        """
        Add an area-based installation charge to a room.

        The rate defaults to AppSettings.default_price_per_sqft.

        Args:
            quotation_id: Quotation ID
            room_id: Room ID within the quotation
            data: cabinet_type, width_mm, height_mm, price_per_sqft, area_sqft

        Returns:
            The new InstallationCharge with area and amount filled in
        """
        quotation = self._editable(quotation_id)
        room = self._room(quotation, room_id)
        charge = self._build_charge(room, data)
        room.installation_charges.append(charge)
        self._save(quotation)
        return charge

    def update_installation_charge(
        self, quotation_id: str, room_id: str, charge_id: str, updates: Dict[str, Any]
    ) -> InstallationCharge:
        """
        Update the dimensions, rate or type of an installation charge.

        Changing width or height without an explicit area re-derives the
        area; the amount is always recomputed.

        Args:
            quotation_id: Quotation ID
            room_id: Room ID within the quotation
            charge_id: Installation charge ID within the room
            updates: Any of cabinet_type, width_mm, height_mm, price_per_sqft, area_sqft

        Returns:
            The updated InstallationCharge
        """
        quotation = self._editable(quotation_id)
        room = self._room(quotation, room_id)
        charge = room.find_installation_charge(charge_id)
        if charge is None:
            raise_error(ErrorCode.INSTALLATION_CHARGE_NOT_FOUND, status_code=404)

        updates = {k: v for k, v in updates.items() if k in CHARGE_FIELDS}
        data = {**charge.model_dump(), **updates}
        if ("width_mm" in updates or "height_mm" in updates) and "area_sqft" not in updates:
            data["area_sqft"] = None
        updated = build_model(InstallationCharge, data)
        room.installation_charges[room.installation_charges.index(charge)] = updated
        self._save(quotation)
        return updated

    def delete_installation_charge(self, quotation_id: str, room_id: str, charge_id: str) -> None:
        """Remove an installation charge."""
        quotation = self._editable(quotation_id)
        room = self._room(quotation, room_id)
        charge = room.find_installation_charge(charge_id)
        if charge is None:
            raise_error(ErrorCode.INSTALLATION_CHARGE_NOT_FOUND, status_code=404)
        room.installation_charges.remove(charge)
        self._save(quotation)

    # ===== Validation & status =====

    def validate(self, quotation_id: str) -> ValidationResult:
        """
        Run the save checklist on a stored quotation.

        Raises:
            APIError: QUOTATION_NOT_FOUND when the quotation is missing,
                VALIDATION_UNAVAILABLE when settings cannot be read
        """
        quotation = self.store.get_quotation(quotation_id)
        try:
            app_settings = self.store.get_app_settings()
        except Exception as e:
            log_error(e, context=f"Load settings for validation: {quotation_id}")
            raise_error(ErrorCode.VALIDATION_UNAVAILABLE, status_code=503)
        return self.validator.validate(quotation, app_settings)

    def set_status(self, quotation_id: str, status: str) -> Quotation:
        """
        Move a quotation between draft and saved.

        Saving requires a passing validation. Conversion happens only
        through the invoice service.

        Raises:
            APIError: QUOTATION_INVALID (422, validation result as data),
                QUOTATION_LOCKED (409) for converted quotations,
                INVALID_REQUEST for any other target status
        """
        quotation = self._editable(quotation_id)

        if status == "saved":
            result = self.validate(quotation_id)
            if not result.is_valid:
                raise_error(
                    ErrorCode.QUOTATION_INVALID,
                    status_code=422,
                    details=result.model_dump(by_alias=True),
                )
        elif status != "draft":
            raise_error(ErrorCode.INVALID_REQUEST, f"Cannot set status to '{status}'")

        quotation.status = status
        self._save(quotation, reopen=False)
        logger.info(f"Quotation {quotation.quotation_number} marked {status}")
        return quotation
