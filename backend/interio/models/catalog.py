"""Accessory catalogue model."""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal
from datetime import datetime
import uuid

AccessoryCategory = Literal["handle", "kitchen", "light", "wardrobe"]


class AccessoryCatalogItem(BaseModel):
    """A stock accessory that can be priced into rooms."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique identifier (UUID)")
    category: AccessoryCategory = Field(..., description="handle, kitchen, light or wardrobe")
    code: str = Field(..., description="Supplier code, e.g. LH-101")
    name: str = Field(..., description="Display name")
    description: Optional[str] = Field(None, description="Free-text description")
    selling_price: float = Field(..., ge=0, description="Default selling price")
    kitchen_price: Optional[float] = Field(None, ge=0, description="Price when fitted in a kitchen")
    wardrobe_price: Optional[float] = Field(None, ge=0, description="Price when fitted in a wardrobe")
    size: Optional[str] = Field(None, description="Size label, e.g. 128mm")
    image: Optional[str] = Field(None, description="Image file name")

    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("code", "name")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        """Reject blank code and name."""
        if not v or not v.strip():
            raise ValueError("Value is required")
        return v.strip()

    class Config:
        """Pydantic configuration."""
        json_schema_extra = {
            "example": {
                "category": "handle",
                "code": "LH-101",
                "name": "Modern Chrome Pull Handle",
                "selling_price": 850,
                "kitchen_price": 850,
                "wardrobe_price": 850,
                "size": "128mm",
            }
        }
