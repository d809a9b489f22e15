"""Formatting utility routes."""

import logging
import math
from fastapi import APIRouter, Query

from ...models import APIResponse
from ...services.number_words import amount_in_words
from ...utils import ErrorCode, format_inr, log_error, raise_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/utils", tags=["Utils"])


@router.get(
    "/amount-in-words",
    response_model=APIResponse,
    summary="Amount in words",
)
async def get_amount_in_words(
    amount: float = Query(..., description="Amount in rupees"),
) -> dict:
    """Spell a rupee amount using lakh / crore and format it with Indian grouping."""
    try:
        if not math.isfinite(amount):
            raise_error(ErrorCode.INVALID_REQUEST, "Amount must be a finite number")

        return {
            "success": True,
            "message": "Amount converted",
            "data": {
                "amount": amount,
                "formatted": format_inr(amount),
                "words": amount_in_words(amount),
            },
        }

    except Exception as e:
        log_error(e, context=f"Amount in words: {amount}")
        raise
