"""Customer API routes."""

import logging
from typing import Optional
from fastapi import APIRouter
from pydantic import BaseModel

from ...models import APIResponse, Customer
from ...api.dependencies import StoreDep, InvoiceServiceDep
from ...utils import ErrorCode, build_model, log_error, raise_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Customer"])


class CustomerRequest(BaseModel):
    """Request model for creating or updating a customer."""
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


@router.get(
    "/customers",
    response_model=APIResponse,
    summary="List customers",
)
async def list_customers(store: StoreDep) -> dict:
    """List all customers, newest first."""
    try:
        customers = store.list_customers()

        return {
            "success": True,
            "message": f"Found {len(customers)} customer(s)",
            "data": {
                "customers": [c.model_dump() for c in customers],
                "total": len(customers),
            },
        }

    except Exception as e:
        log_error(e, context="List customers")
        raise


@router.post(
    "/customers",
    status_code=201,
    response_model=APIResponse,
    summary="Create customer",
)
async def create_customer(request: CustomerRequest, store: StoreDep) -> dict:
    """
    Create a customer.

    - **name**: required
    - **email**, **phone**, **address**: optional
    """
    try:
        customer = build_model(Customer, request.model_dump())
        store.add_customer(customer)

        return {
            "success": True,
            "message": f"Customer created: {customer.name}",
            "data": customer.model_dump(),
        }

    except Exception as e:
        log_error(e, context="Create customer")
        raise


@router.get(
    "/customers/{customer_id}",
    response_model=APIResponse,
    summary="Get customer",
)
async def get_customer(customer_id: str, store: StoreDep) -> dict:
    """Get one customer."""
    try:
        customer = store.get_customer(customer_id)

        return {
            "success": True,
            "message": "Customer found",
            "data": customer.model_dump(),
        }

    except Exception as e:
        log_error(e, context=f"Get customer: {customer_id}")
        raise


@router.put(
    "/customers/{customer_id}",
    response_model=APIResponse,
    summary="Update customer",
)
async def update_customer(customer_id: str, request: CustomerRequest, store: StoreDep) -> dict:
    """Replace a customer's contact details."""
    try:
        existing = store.get_customer(customer_id)
        customer = build_model(Customer, {**existing.model_dump(), **request.model_dump()})
        store.update_customer(customer)

        return {
            "success": True,
            "message": "Customer updated",
            "data": customer.model_dump(),
        }

    except Exception as e:
        log_error(e, context=f"Update customer: {customer_id}")
        raise


@router.delete(
    "/customers/{customer_id}",
    response_model=APIResponse,
    summary="Delete customer",
)
async def delete_customer(customer_id: str, store: StoreDep) -> dict:
    """Delete a customer that has no quotations."""
    try:
        store.get_customer(customer_id)
        if store.list_quotations(customer_id=customer_id):
            raise_error(ErrorCode.CUSTOMER_HAS_QUOTATIONS, status_code=409)
        store.delete_customer(customer_id)

        return {
            "success": True,
            "message": "Customer deleted",
            "data": None,
        }

    except Exception as e:
        log_error(e, context=f"Delete customer: {customer_id}")
        raise


@router.get(
    "/customers/{customer_id}/ledger",
    response_model=APIResponse,
    summary="Customer ledger",
)
async def get_customer_ledger(customer_id: str, invoice_service: InvoiceServiceDep) -> dict:
    """Invoices and payments of a customer with invoiced / paid / balance totals."""
    try:
        ledger = invoice_service.customer_ledger(customer_id)

        return {
            "success": True,
            "message": f"Ledger with {len(ledger['invoices'])} invoice(s)",
            "data": ledger,
        }

    except Exception as e:
        log_error(e, context=f"Customer ledger: {customer_id}")
        raise
