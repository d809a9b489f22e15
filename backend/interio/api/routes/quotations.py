"""Quotation API routes."""

import logging
from datetime import datetime
from typing import List, Literal, Optional
from fastapi import APIRouter, Query
from fastapi.responses import FileResponse
from pydantic import BaseModel

from ...models import APIResponse
from ...api.dependencies import (
    ExcelGeneratorDep,
    InvoiceServiceDep,
    QuotationServiceDep,
    StoreDep,
)
from ...utils import log_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Quotation"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class ItemRequest(BaseModel):
    """Request model for adding a product or accessory."""
    kind: Literal["product", "accessory"] = "product"
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    selling_price: float = 0.0
    discount_percent: float = 0.0
    quantity: Optional[float] = None


class UpdateItemRequest(BaseModel):
    """Request model for updating a line item; unset fields are kept."""
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    selling_price: Optional[float] = None
    discount_percent: Optional[float] = None
    quantity: Optional[float] = None


class InstallationChargeRequest(BaseModel):
    """Request model for adding an installation charge."""
    cabinet_type: str
    width_mm: float
    height_mm: float
    price_per_sqft: Optional[float] = None
    area_sqft: Optional[float] = None


class UpdateInstallationChargeRequest(BaseModel):
    """Request model for updating an installation charge; unset fields are kept."""
    cabinet_type: Optional[str] = None
    width_mm: Optional[float] = None
    height_mm: Optional[float] = None
    price_per_sqft: Optional[float] = None
    area_sqft: Optional[float] = None


class RoomRequest(BaseModel):
    """Request model for adding a room, optionally with its contents."""
    name: str = ""
    description: Optional[str] = None
    products: List[ItemRequest] = []
    accessories: List[ItemRequest] = []
    installation_charges: List[InstallationChargeRequest] = []


class UpdateRoomRequest(BaseModel):
    """Request model for renaming a room."""
    name: Optional[str] = None
    description: Optional[str] = None


class ReorderRoomsRequest(BaseModel):
    """Request model for reordering rooms."""
    room_ids: List[str]


class CreateQuotationRequest(BaseModel):
    """Request model for creating quotation."""
    customer_id: str
    title: Optional[str] = None
    global_discount_percent: Optional[float] = None
    gst_percent: Optional[float] = None
    installation_handling: float = 0.0
    rooms: List[RoomRequest] = []


class UpdateQuotationRequest(BaseModel):
    """Request model for updating quotation settings."""
    customer_id: Optional[str] = None
    title: Optional[str] = None
    global_discount_percent: Optional[float] = None
    gst_percent: Optional[float] = None
    installation_handling: Optional[float] = None


class DuplicateRequest(BaseModel):
    """Request model for duplicating a quotation."""
    customer_id: Optional[str] = None


class StatusRequest(BaseModel):
    """Request model for changing quotation status."""
    status: str


class ConvertRequest(BaseModel):
    """Request model for converting a quotation to an invoice."""
    expected_delivery_date: Optional[datetime] = None
    notes: str = ""


def _room_data(room: RoomRequest) -> dict:
    data = room.model_dump(exclude_none=True)
    data["products"] = [i.model_dump(exclude_none=True) for i in room.products]
    data["accessories"] = [i.model_dump(exclude_none=True) for i in room.accessories]
    data["installation_charges"] = [c.model_dump(exclude_none=True) for c in room.installation_charges]
    return data


@router.get(
    "/quotations",
    response_model=APIResponse,
    summary="List quotations",
)
async def list_quotations(
    store: StoreDep,
    customer_id: Optional[str] = Query(None, description="Only this customer's quotations"),
    status: Optional[str] = Query(None, pattern="^(draft|saved|converted)$", description="Filter by status"),
) -> dict:
    """
    List quotations, newest first.

    - **customer_id**: filter by customer
    - **status**: draft / saved / converted
    """
    try:
        quotations = store.list_quotations(customer_id=customer_id)
        if status:
            quotations = [q for q in quotations if q.status == status]

        return {
            "success": True,
            "message": f"Found {len(quotations)} quotation(s)",
            "data": {
                "quotations": [q.model_dump() for q in quotations],
                "total": len(quotations),
            },
        }

    except Exception as e:
        log_error(e, context="List quotations")
        raise


@router.post(
    "/quotations",
    status_code=201,
    response_model=APIResponse,
    summary="Create quotation",
)
async def create_quotation(request: CreateQuotationRequest, service: QuotationServiceDep) -> dict:
    """
    Create a draft quotation.

    - **customer_id**: existing customer
    - **gst_percent** / **global_discount_percent**: default from app settings
    - **rooms**: optional rooms with products, accessories and installation charges
    """
    try:
        quotation = service.create_quotation(
            customer_id=request.customer_id,
            title=request.title,
            global_discount_percent=request.global_discount_percent,
            gst_percent=request.gst_percent,
            installation_handling=request.installation_handling,
            rooms=[_room_data(room) for room in request.rooms],
        )

        return {
            "success": True,
            "message": f"Quotation created: {quotation.quotation_number}",
            "data": quotation.model_dump(),
        }

    except Exception as e:
        log_error(e, context="Create quotation")
        raise


@router.get(
    "/quotations/{quotation_id}",
    response_model=APIResponse,
    summary="Get quotation",
)
async def get_quotation(quotation_id: str, store: StoreDep) -> dict:
    """Get a quotation with its rooms, items and charges."""
    try:
        quotation = store.get_quotation(quotation_id)

        return {
            "success": True,
            "message": "Quotation found",
            "data": quotation.model_dump(),
        }

    except Exception as e:
        log_error(e, context=f"Get quotation: {quotation_id}")
        raise


@router.patch(
    "/quotations/{quotation_id}",
    response_model=APIResponse,
    summary="Update quotation",
)
async def update_quotation(
    quotation_id: str,
    request: UpdateQuotationRequest,
    service: QuotationServiceDep,
) -> dict:
    """Update title, customer, discount, GST or installation handling."""
    try:
        quotation = service.update_quotation(quotation_id, request.model_dump(exclude_unset=True))

        return {
            "success": True,
            "message": "Quotation updated",
            "data": quotation.model_dump(),
        }

    except Exception as e:
        log_error(e, context=f"Update quotation: {quotation_id}")
        raise


@router.delete(
    "/quotations/{quotation_id}",
    response_model=APIResponse,
    summary="Delete quotation",
)
async def delete_quotation(quotation_id: str, service: QuotationServiceDep) -> dict:
    """Delete a quotation that has not been converted."""
    try:
        service.delete_quotation(quotation_id)

        return {
            "success": True,
            "message": "Quotation deleted",
            "data": None,
        }

    except Exception as e:
        log_error(e, context=f"Delete quotation: {quotation_id}")
        raise


@router.post(
    "/quotations/{quotation_id}/duplicate",
    status_code=201,
    response_model=APIResponse,
    summary="Duplicate quotation",
)
async def duplicate_quotation(
    quotation_id: str,
    service: QuotationServiceDep,
    request: Optional[DuplicateRequest] = None,
) -> dict:
    """
    Copy a quotation with its rooms, items and charges as a new draft.

    - **customer_id**: customer of the copy; defaults to the original customer
    """
    try:
        request = request or DuplicateRequest()
        quotation = service.duplicate_quotation(quotation_id, customer_id=request.customer_id)

        return {
            "success": True,
            "message": f"Quotation duplicated: {quotation.quotation_number}",
            "data": quotation.model_dump(),
        }

    except Exception as e:
        log_error(e, context=f"Duplicate quotation: {quotation_id}")
        raise


# ===== Rooms =====

@router.post(
    "/quotations/{quotation_id}/rooms",
    status_code=201,
    response_model=APIResponse,
    summary="Add room",
)
async def add_room(quotation_id: str, request: RoomRequest, service: QuotationServiceDep) -> dict:
    """Add a room, optionally with its products, accessories and charges."""
    try:
        room = service.add_room(quotation_id, _room_data(request))

        return {
            "success": True,
            "message": f"Room added: {room.display_name}",
            "data": room.model_dump(),
        }

    except Exception as e:
        log_error(e, context=f"Add room: {quotation_id}")
        raise


@router.post(
    "/quotations/{quotation_id}/rooms/reorder",
    response_model=APIResponse,
    summary="Reorder rooms",
)
async def reorder_rooms(
    quotation_id: str,
    request: ReorderRoomsRequest,
    service: QuotationServiceDep,
) -> dict:
    """
    Put the rooms in the given order.

    - **room_ids**: every room ID of the quotation, each exactly once
    """
    try:
        quotation = service.reorder_rooms(quotation_id, request.room_ids)

        return {
            "success": True,
            "message": "Rooms reordered",
            "data": quotation.model_dump(),
        }

    except Exception as e:
        log_error(e, context=f"Reorder rooms: {quotation_id}")
        raise


@router.patch(
    "/quotations/{quotation_id}/rooms/{room_id}",
    response_model=APIResponse,
    summary="Update room",
)
async def update_room(
    quotation_id: str,
    room_id: str,
    request: UpdateRoomRequest,
    service: QuotationServiceDep,
) -> dict:
    """Rename or re-describe a room."""
    try:
        room = service.update_room(quotation_id, room_id, request.model_dump(exclude_unset=True))

        return {
            "success": True,
            "message": "Room updated",
            "data": room.model_dump(),
        }

    except Exception as e:
        log_error(e, context=f"Update room: {quotation_id}/{room_id}")
        raise


@router.delete(
    "/quotations/{quotation_id}/rooms/{room_id}",
    response_model=APIResponse,
    summary="Delete room",
)
async def delete_room(quotation_id: str, room_id: str, service: QuotationServiceDep) -> dict:
    """Delete a room and everything in it."""
    try:
        service.delete_room(quotation_id, room_id)

        return {
            "success": True,
            "message": "Room deleted",
            "data": None,
        }

    except Exception as e:
        log_error(e, context=f"Delete room: {quotation_id}/{room_id}")
        raise


# ===== Line items =====

@router.post(
    "/quotations/{quotation_id}/rooms/{room_id}/items",
    status_code=201,
    response_model=APIResponse,
    summary="Add product or accessory",
)
async def add_item(
    quotation_id: str,
    room_id: str,
    request: ItemRequest,
    service: QuotationServiceDep,
) -> dict:
    """
    Add a line item to a room.

    - **kind**: product or accessory
    - **quantity**: defaults to 1
    """
    try:
        item = service.add_item(quotation_id, room_id, request.model_dump(exclude_none=True))

        return {
            "success": True,
            "message": f"{item.kind.capitalize()} added: {item.name}",
            "data": item.model_dump(),
        }

    except Exception as e:
        log_error(e, context=f"Add item: {quotation_id}/{room_id}")
        raise


@router.patch(
    "/quotations/{quotation_id}/rooms/{room_id}/items/{item_id}",
    response_model=APIResponse,
    summary="Update line item",
)
async def update_item(
    quotation_id: str,
    room_id: str,
    item_id: str,
    request: UpdateItemRequest,
    service: QuotationServiceDep,
) -> dict:
    """Update price, discount, quantity or descriptive fields of a line item."""
    try:
        item = service.update_item(
            quotation_id, room_id, item_id, request.model_dump(exclude_unset=True)
        )

        return {
            "success": True,
            "message": "Item updated",
            "data": item.model_dump(),
        }

    except Exception as e:
        log_error(e, context=f"Update item: {quotation_id}/{room_id}/{item_id}")
        raise


@router.delete(
    "/quotations/{quotation_id}/rooms/{room_id}/items/{item_id}",
    response_model=APIResponse,
    summary="Delete line item",
)
async def delete_item(
    quotation_id: str,
    room_id: str,
    item_id: str,
    service: QuotationServiceDep,
) -> dict:
    """Remove a product or accessory."""
    try:
        service.delete_item(quotation_id, room_id, item_id)

        return {
            "success": True,
            "message": "Item deleted",
            "data": None,
        }

    except Exception as e:
        log_error(e, context=f"Delete item: {quotation_id}/{room_id}/{item_id}")
        raise


# ===== Installation charges =====

@router.post(
    "/quotations/{quotation_id}/rooms/{room_id}/installation-charges",
    status_code=201,
    response_model=APIResponse,
    summary="Add installation charge",
)
async def add_installation_charge(
    quotation_id: str,
    room_id: str,
    request: InstallationChargeRequest,
    service: QuotationServiceDep,
) -> dict:
    """
    Add an area-based installation charge.

    - **width_mm** x **height_mm** give the area in sq.ft
    - **price_per_sqft** defaults to the app settings rate
    """
    try:
        charge = service.add_installation_charge(
            quotation_id, room_id, request.model_dump(exclude_none=True)
        )

        return {
            "success": True,
            "message": f"Installation charge added: {charge.amount:.2f}",
            "data": charge.model_dump(),
        }

    except Exception as e:
        log_error(e, context=f"Add installation charge: {quotation_id}/{room_id}")
        raise


@router.patch(
    "/quotations/{quotation_id}/rooms/{room_id}/installation-charges/{charge_id}",
    response_model=APIResponse,
    summary="Update installation charge",
)
async def update_installation_charge(
    quotation_id: str,
    room_id: str,
    charge_id: str,
    request: UpdateInstallationChargeRequest,
    service: QuotationServiceDep,
) -> dict:
    """
    Update an installation charge.

    - changing **width_mm** or **height_mm** without **area_sqft** re-derives the area
    """
    try:
        charge = service.update_installation_charge(
            quotation_id, room_id, charge_id, request.model_dump(exclude_unset=True)
        )

        return {
            "success": True,
            "message": f"Installation charge updated: {charge.amount:.2f}",
            "data": charge.model_dump(),
        }

    except Exception as e:
        log_error(e, context=f"Update installation charge: {quotation_id}/{charge_id}")
        raise


@router.delete(
    "/quotations/{quotation_id}/rooms/{room_id}/installation-charges/{charge_id}",
    response_model=APIResponse,
    summary="Delete installation charge",
)
async def delete_installation_charge(
    quotation_id: str,
    room_id: str,
    charge_id: str,
    service: QuotationServiceDep,
) -> dict:
    """Remove an installation charge."""
    try:
        service.delete_installation_charge(quotation_id, room_id, charge_id)

        return {
            "success": True,
            "message": "Installation charge deleted",
            "data": None,
        }

    except Exception as e:
        log_error(e, context=f"Delete installation charge: {quotation_id}/{charge_id}")
        raise


# ===== Pricing, validation and status =====

@router.get(
    "/quotations/{quotation_id}/totals",
    response_model=APIResponse,
    summary="Quotation totals",
)
async def get_totals(quotation_id: str, service: QuotationServiceDep) -> dict:
    """Calculator output: subtotal, discount, installation, GST and final price."""
    try:
        totals = service.get_totals(quotation_id)

        return {
            "success": True,
            "message": "Totals calculated",
            "data": totals.model_dump(by_alias=True),
        }

    except Exception as e:
        log_error(e, context=f"Get totals: {quotation_id}")
        raise


@router.get(
    "/quotations/{quotation_id}/validation",
    response_model=APIResponse,
    summary="Validate quotation",
)
async def validate_quotation(quotation_id: str, service: QuotationServiceDep) -> dict:
    """Blocking errors and advisory warnings checked before saving."""
    try:
        result = service.validate(quotation_id)

        return {
            "success": True,
            "message": (
                "Quotation is valid" if result.is_valid
                else f"Quotation has {len(result.errors)} error(s)"
            ),
            "data": result.model_dump(by_alias=True),
        }

    except Exception as e:
        log_error(e, context=f"Validate quotation: {quotation_id}")
        raise


@router.put(
    "/quotations/{quotation_id}/status",
    response_model=APIResponse,
    summary="Change quotation status",
)
async def set_quotation_status(
    quotation_id: str,
    request: StatusRequest,
    service: QuotationServiceDep,
) -> dict:
    """
    Save a quotation or reopen it as draft.

    - **status**: saved (requires a passing validation) or draft
    """
    try:
        quotation = service.set_status(quotation_id, request.status)

        return {
            "success": True,
            "message": f"Quotation {quotation.quotation_number} is {quotation.status}",
            "data": quotation.model_dump(),
        }

    except Exception as e:
        log_error(e, context=f"Set quotation status: {quotation_id}")
        raise


# ===== Export and conversion =====

@router.get(
    "/quotations/{quotation_id}/excel",
    summary="Download quotation Excel",
    response_class=FileResponse,
)
async def download_excel(
    quotation_id: str,
    store: StoreDep,
    generator: ExcelGeneratorDep,
) -> FileResponse:
    """Generate and download the quotation as an .xlsx workbook."""
    try:
        quotation = store.get_quotation(quotation_id)
        customer = store.get_customer(quotation.customer_id)
        file_path = generator.create_quotation_excel(
            quotation, customer, store.get_app_settings()
        )

        return FileResponse(
            path=file_path,
            filename=f"{quotation.quotation_number}.xlsx",
            media_type=XLSX_MEDIA_TYPE,
        )

    except Exception as e:
        log_error(e, context=f"Download Excel: {quotation_id}")
        raise


@router.post(
    "/quotations/{quotation_id}/invoice",
    status_code=201,
    response_model=APIResponse,
    summary="Convert quotation to invoice",
)
async def convert_to_invoice(
    quotation_id: str,
    invoice_service: InvoiceServiceDep,
    request: Optional[ConvertRequest] = None,
) -> dict:
    """
    Create an invoice from a saved quotation.

    The quotation becomes converted and can no longer be edited.
    """
    try:
        request = request or ConvertRequest()
        invoice = invoice_service.convert_to_invoice(
            quotation_id,
            expected_delivery_date=request.expected_delivery_date,
            notes=request.notes,
        )

        return {
            "success": True,
            "message": f"Invoice created: {invoice.invoice_number}",
            "data": invoice.model_dump(),
        }

    except Exception as e:
        log_error(e, context=f"Convert quotation: {quotation_id}")
        raise
