"""Pricing calculator and validation result models.

Serialised with camelCase aliases at the API (``model_dump(by_alias=True)``).
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional, Literal


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RoomTotals(_CamelModel):
    """Per-room figures for two-column document display."""

    room_id: str
    name: str
    selling_price: float = Field(..., description="Sum of unit price x quantity")
    discounted_price: float = Field(..., description="Sum after line discounts")
    installation_charges: float = Field(0.0, description="Sum of this room's installation charges")


class QuotationTotals(_CamelModel):
    """Output of the pricing calculator."""

    total_selling_price: float = Field(..., description="Pre-discount sum over all rooms")
    subtotal: float = Field(..., description="Sum of room discounted totals")
    global_discount_amount: float
    after_global_discount: float
    total_installation_charges: float = Field(
        ..., description="Itemised installation charges plus installation handling"
    )
    gst_base: float
    gst_amount: float
    final_price: float
    rooms: List[RoomTotals] = Field(default_factory=list)


ValidationErrorType = Literal[
    "room_zero_value",
    "missing_product",
    "missing_accessory",
    "missing_installation",
    "missing_handling_charge",
]


class ValidationIssue(_CamelModel):
    """A blocking problem found by the quotation validator."""

    type: ValidationErrorType
    message: str
    room_id: Optional[str] = None
    room_name: Optional[str] = None


class ValidationWarning(_CamelModel):
    """An advisory finding; never blocks saving."""

    type: Literal["check_accessories"] = "check_accessories"
    message: str
    accessories: List[str] = Field(default_factory=list)


class ValidationResult(_CamelModel):
    """Outcome of validating a quotation before it is saved."""

    is_valid: bool
    errors: List[ValidationIssue] = Field(default_factory=list)
    warnings: List[ValidationWarning] = Field(default_factory=list)
