"""Customer data model."""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
import uuid


class Customer(BaseModel):
    """Customer record."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique identifier (UUID)")
    name: str = Field(..., description="Customer name")
    email: Optional[str] = Field(None, description="Email address")
    phone: Optional[str] = Field(None, description="Phone number")
    address: Optional[str] = Field(None, description="Postal address")
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject blank names."""
        if not v or not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        """Loose email check: something@something."""
        if v is None or not v.strip():
            return None
        v = v.strip()
        local, _, domain = v.partition("@")
        if not local or "." not in domain:
            raise ValueError("Invalid email address")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        """Phone numbers need at least 8 digits."""
        if v is None or not v.strip():
            return None
        if sum(ch.isdigit() for ch in v) < 8:
            raise ValueError("Phone number must be at least 8 digits")
        return v.strip()

    class Config:
        """Pydantic configuration."""
        json_schema_extra = {
            "example": {
                "name": "Demo Customer",
                "email": "demo@example.com",
                "phone": "9988776655",
                "address": "123 Demo Street",
            }
        }
