"""App settings API routes."""

import logging
from typing import Optional
from fastapi import APIRouter
from pydantic import BaseModel

from ...models import APIResponse, AppSettings
from ...api.dependencies import StoreDep
from ...utils import build_model, log_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/settings", tags=["Settings"])


class UpdateAppSettingsRequest(BaseModel):
    """Request model for updating app settings; unset fields are kept."""
    default_gst_percent: Optional[float] = None
    default_global_discount: Optional[float] = None
    default_price_per_sqft: Optional[float] = None
    required_accessories: Optional[str] = None
    quotation_template_id: Optional[str] = None
    presentation_template_id: Optional[str] = None
    terms_and_conditions: Optional[str] = None


@router.get(
    "/app",
    response_model=APIResponse,
    summary="Get app settings",
)
async def get_app_settings(store: StoreDep) -> dict:
    """Current defaults for GST, discount, installation rate and accessory checks."""
    try:
        app_settings = store.get_app_settings()

        return {
            "success": True,
            "message": "App settings",
            "data": app_settings.model_dump(),
        }

    except Exception as e:
        log_error(e, context="Get app settings")
        raise


@router.put(
    "/app",
    response_model=APIResponse,
    summary="Update app settings",
)
async def update_app_settings(request: UpdateAppSettingsRequest, store: StoreDep) -> dict:
    """
    Update app settings.

    - **required_accessories**: comma-separated keywords; empty falls back to the defaults
    - changed defaults apply to quotations created afterwards
    """
    try:
        current = store.get_app_settings()
        app_settings = build_model(
            AppSettings,
            {**current.model_dump(), **request.model_dump(exclude_unset=True)},
        )
        store.update_app_settings(app_settings)

        return {
            "success": True,
            "message": "App settings updated",
            "data": app_settings.model_dump(),
        }

    except Exception as e:
        log_error(e, context="Update app settings")
        raise
