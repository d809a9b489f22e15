"""Accessory catalogue API routes."""

import logging
from typing import Optional
from fastapi import APIRouter, Query
from pydantic import BaseModel

from ...models import APIResponse, AccessoryCatalogItem
from ...models.catalog import AccessoryCategory
from ...api.dependencies import StoreDep
from ...utils import build_model, log_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Accessory Catalogue"])


class CatalogItemRequest(BaseModel):
    """Request model for creating a catalogue item."""
    category: AccessoryCategory
    code: str
    name: str
    description: Optional[str] = None
    selling_price: float
    kitchen_price: Optional[float] = None
    wardrobe_price: Optional[float] = None
    size: Optional[str] = None
    image: Optional[str] = None


class UpdateCatalogItemRequest(BaseModel):
    """Request model for updating a catalogue item; unset fields are kept."""
    category: Optional[AccessoryCategory] = None
    code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    selling_price: Optional[float] = None
    kitchen_price: Optional[float] = None
    wardrobe_price: Optional[float] = None
    size: Optional[str] = None
    image: Optional[str] = None


@router.get(
    "/accessory-catalog",
    response_model=APIResponse,
    summary="List accessory catalogue",
)
async def list_catalog_items(
    store: StoreDep,
    category: Optional[str] = Query(
        None, pattern="^(handle|kitchen|light|wardrobe)$", description="Filter by category"
    ),
) -> dict:
    """
    List catalogue items ordered by code.

    - **category**: handle / kitchen / light / wardrobe
    """
    try:
        items = store.list_catalog_items(category=category)

        return {
            "success": True,
            "message": f"Found {len(items)} catalogue item(s)",
            "data": {
                "items": [item.model_dump() for item in items],
                "total": len(items),
            },
        }

    except Exception as e:
        log_error(e, context="List accessory catalogue")
        raise


@router.post(
    "/accessory-catalog",
    status_code=201,
    response_model=APIResponse,
    summary="Create catalogue item",
)
async def create_catalog_item(request: CatalogItemRequest, store: StoreDep) -> dict:
    """Add an accessory to the catalogue."""
    try:
        item = build_model(AccessoryCatalogItem, request.model_dump())
        store.add_catalog_item(item)

        return {
            "success": True,
            "message": f"Catalogue item created: {item.code}",
            "data": item.model_dump(),
        }

    except Exception as e:
        log_error(e, context="Create catalogue item")
        raise


@router.get(
    "/accessory-catalog/{item_id}",
    response_model=APIResponse,
    summary="Get catalogue item",
)
async def get_catalog_item(item_id: str, store: StoreDep) -> dict:
    """Get one catalogue item."""
    try:
        item = store.get_catalog_item(item_id)

        return {
            "success": True,
            "message": "Catalogue item found",
            "data": item.model_dump(),
        }

    except Exception as e:
        log_error(e, context=f"Get catalogue item: {item_id}")
        raise


@router.put(
    "/accessory-catalog/{item_id}",
    response_model=APIResponse,
    summary="Update catalogue item",
)
async def update_catalog_item(
    item_id: str,
    request: UpdateCatalogItemRequest,
    store: StoreDep,
) -> dict:
    """Update the fields present in the request body."""
    try:
        existing = store.get_catalog_item(item_id)
        item = build_model(
            AccessoryCatalogItem,
            {**existing.model_dump(), **request.model_dump(exclude_unset=True)},
        )
        store.update_catalog_item(item)

        return {
            "success": True,
            "message": "Catalogue item updated",
            "data": item.model_dump(),
        }

    except Exception as e:
        log_error(e, context=f"Update catalogue item: {item_id}")
        raise


@router.delete(
    "/accessory-catalog/{item_id}",
    response_model=APIResponse,
    summary="Delete catalogue item",
)
async def delete_catalog_item(item_id: str, store: StoreDep) -> dict:
    """Remove an item from the catalogue."""
    try:
        store.delete_catalog_item(item_id)

        return {
            "success": True,
            "message": "Catalogue item deleted",
            "data": None,
        }

    except Exception as e:
        log_error(e, context=f"Delete catalogue item: {item_id}")
        raise
