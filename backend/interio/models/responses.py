"""API Response models."""

from pydantic import BaseModel, Field
from typing import Optional, Generic, TypeVar, Any
from datetime import datetime


T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    success: bool = Field(..., description="Whether the request succeeded")
    message: str = Field(..., description="Human readable message")
    data: Optional[T] = Field(None, description="Response payload")
    timestamp: datetime = Field(default_factory=datetime.now, description="Response time")


class ErrorResponse(BaseModel):
    """Error response model."""

    success: bool = Field(False, description="Whether the request succeeded")
    message: str = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Error code")
    data: Optional[Any] = Field(None, description="Error details, e.g. a validation result")
    timestamp: datetime = Field(default_factory=datetime.now, description="Response time")
