"""Quotation data models.

A quotation owns an ordered list of rooms; each room owns its products,
accessories and installation charges. Cached price fields are written by
the quotation service from the pricing calculator and must never be
edited directly.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional, Literal
from datetime import datetime
import uuid

from ..utils.money import round_money

# 1 sq.ft = 304.8 mm x 304.8 mm
SQ_MM_PER_SQ_FT = 92903.04

QuotationStatus = Literal["draft", "saved", "converted"]
LineItemKind = Literal["product", "accessory"]


def _new_id() -> str:
    return str(uuid.uuid4())


class LineItem(BaseModel):
    """A product or accessory placed in a room."""

    id: str = Field(default_factory=_new_id, description="Unique identifier (UUID)")
    room_id: str = Field(..., description="Owning room ID")
    kind: LineItemKind = Field("product", description="product or accessory")

    name: str = Field(..., description="Display name")
    description: Optional[str] = Field(None, description="Free-text description")
    category: Optional[str] = Field(None, description="Catalogue category")

    selling_price: float = Field(0.0, ge=0, description="Unit selling price")
    discount_percent: float = Field(0.0, ge=0, le=100, description="Line discount (%)")
    quantity: float = Field(1.0, ge=0, description="Quantity, 1 when not given")

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject blank names."""
        if not v or not v.strip():
            raise ValueError("Name is required")
        return v.strip()


class InstallationCharge(BaseModel):
    """Area-based installation charge for one cabinet run."""

    id: str = Field(default_factory=_new_id, description="Unique identifier (UUID)")
    room_id: str = Field(..., description="Owning room ID")
    cabinet_type: str = Field(..., description="Type of cabinets, e.g. Base unit")
    width_mm: float = Field(..., gt=0, description="Width in millimetres")
    height_mm: float = Field(..., gt=0, description="Height in millimetres")
    area_sqft: Optional[float] = Field(
        None, ge=0, description="Area in sq.ft, derived from width x height when omitted"
    )
    price_per_sqft: float = Field(130.0, gt=0, description="Rate per sq.ft")
    amount: float = Field(0.0, ge=0, description="area_sqft x price_per_sqft, rounded to paise")

    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("cabinet_type")
    @classmethod
    def validate_cabinet_type(cls, v: str) -> str:
        """Reject blank cabinet types."""
        if not v or not v.strip():
            raise ValueError("Type of cabinets is required")
        return v.strip()

    @model_validator(mode="after")
    def derive_area_and_amount(self) -> "InstallationCharge":
        """Fill in the area when missing and always recompute the amount."""
        if self.area_sqft is None:
            self.area_sqft = self.width_mm * self.height_mm / SQ_MM_PER_SQ_FT
        self.amount = round_money(self.area_sqft * self.price_per_sqft)
        return self


class Room(BaseModel):
    """A billable grouping within a quotation (kitchen, wardrobe, ...)."""

    id: str = Field(default_factory=_new_id, description="Unique identifier (UUID)")
    quotation_id: str = Field(..., description="Owning quotation ID")
    name: str = Field("", description="Room name")
    description: Optional[str] = Field(None, description="Room description")

    products: List[LineItem] = Field(default_factory=list)
    accessories: List[LineItem] = Field(default_factory=list)
    installation_charges: List[InstallationCharge] = Field(default_factory=list)

    # Cached totals
    selling_price: float = Field(0.0, ge=0, description="Sum of unit price x qty")
    discounted_price: float = Field(0.0, ge=0, description="Sum after line discounts")

    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def line_items(self) -> List[LineItem]:
        """Products followed by accessories."""
        return [*self.products, *self.accessories]

    @property
    def display_name(self) -> str:
        """Name for messages and documents."""
        return self.name.strip() or "Untitled"

    def find_item(self, item_id: str) -> Optional[LineItem]:
        """Look up a product or accessory owned by this room."""
        return next((i for i in self.line_items if i.id == item_id), None)

    def find_installation_charge(self, charge_id: str) -> Optional[InstallationCharge]:
        """Look up an installation charge owned by this room."""
        return next((c for c in self.installation_charges if c.id == charge_id), None)


class Quotation(BaseModel):
    """Quotation data model."""

    id: str = Field(default_factory=_new_id, description="Unique identifier (UUID)")
    quotation_number: str = Field(..., description="Human readable number, Q-YYMM-NNNN")
    customer_id: str = Field(..., description="Owning customer ID")
    title: Optional[str] = Field(None, description="Project title")
    status: QuotationStatus = Field("draft", description="Workflow status")

    # Pricing inputs
    global_discount_percent: float = Field(0.0, ge=0, le=100, description="Global discount (%)")
    gst_percent: float = Field(18.0, ge=0, le=100, description="GST (%)")
    installation_handling: float = Field(0.0, ge=0, description="Installation & handling charge")

    rooms: List[Room] = Field(default_factory=list, description="Ordered rooms")

    # Cached totals
    total_selling_price: float = Field(0.0, ge=0)
    total_discounted_price: float = Field(0.0, ge=0)
    gst_amount: float = Field(0.0, ge=0)
    final_price: float = Field(0.0, ge=0)

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    def find_room(self, room_id: str) -> Optional[Room]:
        """Look up a room owned by this quotation."""
        return next((r for r in self.rooms if r.id == room_id), None)

    @property
    def accessory_names(self) -> List[str]:
        """Names of every accessory across all rooms."""
        return [acc.name for room in self.rooms for acc in room.accessories]

    class Config:
        """Pydantic configuration."""
        json_schema_extra = {
            "example": {
                "quotation_number": "Q-2510-0042",
                "customer_id": "2f6c1f0e-7d1b-4a8e-9a57-7d9c8f1b2a10",
                "title": "3BHK Whitefield",
                "global_discount_percent": 5,
                "gst_percent": 18,
                "installation_handling": 500,
                "rooms": [],
            }
        }
