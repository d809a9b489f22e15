"""Runtime application settings."""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

DEFAULT_REQUIRED_ACCESSORIES = "skirting,handles,sliding mechanism,t profile"

DEFAULT_TERMS = (
    "1. All prices are valid for 30 days from quotation date.\n"
    "2. 50% advance payment required to start work.\n"
    "3. Balance payment due upon completion.\n"
    "4. Material colors may vary slightly from samples.\n"
    "5. Changes to design after approval may incur additional charges."
)


class AppSettings(BaseModel):
    """Editable defaults used when pricing and validating quotations.

    Passed explicitly into the calculator and validator; neither reads it
    from the store.
    """

    default_gst_percent: float = Field(18.0, ge=0, le=100, description="GST for new quotations (%)")
    default_global_discount: float = Field(
        0.0, ge=0, le=100, description="Global discount for new quotations (%)"
    )
    default_price_per_sqft: float = Field(130.0, gt=0, description="Installation rate per sq.ft")
    required_accessories: Optional[str] = Field(
        DEFAULT_REQUIRED_ACCESSORIES,
        description="Comma-separated accessory keywords checked before saving",
    )
    quotation_template_id: str = Field("default", description="Quotation document template")
    presentation_template_id: str = Field("default", description="Presentation template")
    terms_and_conditions: str = Field(DEFAULT_TERMS, description="Printed on quotations")
    updated_at: datetime = Field(default_factory=datetime.now)

    def required_accessory_keywords(self) -> List[str]:
        """Trimmed, lower-cased keywords; blank entries dropped.

        An unset or empty setting falls back to the default keyword list.
        """
        raw = self.required_accessories or DEFAULT_REQUIRED_ACCESSORIES
        return [kw.strip().lower() for kw in raw.split(",") if kw.strip()]
