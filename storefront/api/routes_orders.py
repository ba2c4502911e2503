from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, status

from storefront.api.deps import get_order_workflow
from storefront.core.auth import Identity, get_identity
from storefront.schemas import OrderEnvelope, OrderListEnvelope
from storefront.services.orders import OrderWorkflow

router = APIRouter()  # main.py mounts at /orders

# Bodies and ids are taken as-is and handed to the workflow, which checks the
# caller before it looks at either.


def _field(payload: Any, name: str) -> Any:
    return payload.get(name) if isinstance(payload, dict) else None


@router.post("/create", response_model=OrderEnvelope, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: Any = Body(default=None),
    identity: Optional[Identity] = Depends(get_identity),
    workflow: OrderWorkflow = Depends(get_order_workflow),
):
    order = workflow.create(identity, _field(payload, "items"))
    return {"message": "Order created successfully", "order": order}


@router.get("/all", response_model=OrderListEnvelope)
def list_orders(
    identity: Optional[Identity] = Depends(get_identity),
    workflow: OrderWorkflow = Depends(get_order_workflow),
):
    return {"message": "Orders retrieved successfully", "orders": workflow.list(identity)}


@router.patch("/update-status/{order_id}", response_model=OrderEnvelope)
def update_order_status(
    order_id: str,
    payload: Any = Body(default=None),
    identity: Optional[Identity] = Depends(get_identity),
    workflow: OrderWorkflow = Depends(get_order_workflow),
):
    order = workflow.update_status(identity, order_id, _field(payload, "status"))
    return {"message": "Order status updated successfully", "order": order}


@router.delete("/{order_id}", response_model=OrderEnvelope)
def delete_order(
    order_id: str,
    identity: Optional[Identity] = Depends(get_identity),
    workflow: OrderWorkflow = Depends(get_order_workflow),
):
    order = workflow.delete(identity, order_id)
    return {"message": "Order deleted successfully", "order": order}
