import logging
from contextlib import contextmanager
from typing import Any, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from pydantic import ValidationError
from sqlalchemy.orm import Session, selectinload

from storefront.core.auth import Identity
from storefront.core.errors import (
    Forbidden,
    InternalError,
    InvalidInput,
    OrderNotFound,
    ProductNotFound,
    Unauthenticated,
)
from storefront.db.models import Order, OrderItem
from storefront.schemas import ORDER_STATUSES, OrderItemRequest, OrderRead, parse_id
from storefront.services.catalog import CatalogLookup

logger = logging.getLogger(__name__)


class OrderWorkflow:
    """Places orders and enforces who may read, update and delete them.

    Works against the session it is given; it never opens its own.
    Line items carry the product price at creation time and the total is
    computed once from those snapshots, so later catalog edits never change
    an existing order.
    """

    def __init__(self, db: Session, catalog: Optional[CatalogLookup] = None):
        self.db = db
        self.catalog = catalog or CatalogLookup(db)

    @contextmanager
    def _store_errors(self, action: str):
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("store failure while %s", action)
            raise InternalError() from exc

    def _get(self, order_id: int | str) -> Order:
        key = parse_id(order_id)
        order = self.db.get(Order, key) if key is not None else None
        if order is None:
            raise OrderNotFound(order_id)
        return order

    @staticmethod
    def _parse_items(raw_items: Any) -> list[OrderItemRequest]:
        if not raw_items:
            raise InvalidInput("Items are required")
        if not isinstance(raw_items, (list, tuple)):
            raise InvalidInput("Items must be a list")
        items = []
        for index, raw in enumerate(raw_items):
            try:
                items.append(OrderItemRequest.model_validate(raw))
            except ValidationError as exc:
                err = exc.errors()[0]
                field = ".".join(str(p) for p in err["loc"])
                where = f"items[{index}].{field}" if field else f"items[{index}]"
                raise InvalidInput(f"Invalid order item {where}: {err['msg']}") from exc
        return items

    def create(self, identity: Optional[Identity], item_requests: Optional[Sequence[Any]]) -> OrderRead:
        """Place an order for ``identity``.

        ``item_requests`` may be raw mappings from a request body; they are
        only validated once the caller is known to be authenticated.
        """
        if identity is None:
            raise Unauthenticated()
        item_requests = self._parse_items(item_requests)

        with self._store_errors("creating order"):
            items = []
            total = 0.0
            for position, req in enumerate(item_requests):
                resolved = self.catalog.resolve(req.product)
                if not resolved.exists:
                    logger.warning("order rejected for user %s: unknown product %s", identity.subject_id, req.product)
                    raise ProductNotFound(req.product)
                items.append(OrderItem(
                    position=position,
                    product_id=resolved.product_id,
                    quantity=req.quantity,
                    unit_price=resolved.price,
                    name_snapshot=resolved.name,
                ))
                total += resolved.price * req.quantity

            order = Order(owner_id=identity.subject_id, status="pending", total_amount=total, items=items)
            self.db.add(order)
            self.db.commit()
            self.db.refresh(order)
            logger.info("order %s created by user %s (%d items, total %.2f)",
                        order.id, identity.subject_id, len(items), total)
            return OrderRead.model_validate(order)

    def list(self, identity: Optional[Identity]) -> list[OrderRead]:
        if identity is None:
            raise Unauthenticated()
        with self._store_errors("listing orders"):
            stmt = select(Order).options(selectinload(Order.items)).order_by(Order.id)
            if not identity.is_admin:
                stmt = stmt.where(Order.owner_id == identity.subject_id)
            return [OrderRead.model_validate(o) for o in self.db.execute(stmt).scalars().all()]

    def update_status(self, identity: Optional[Identity], order_id: int | str, new_status: Any) -> OrderRead:
        if identity is None:
            raise Unauthenticated()
        if not new_status:
            raise InvalidInput("Status is required")
        if new_status not in ORDER_STATUSES:
            raise InvalidInput(f"Invalid status: {new_status}")

        with self._store_errors("updating order status"):
            order = self._get(order_id)
            if not identity.is_admin and order.owner_id != identity.subject_id:
                logger.warning("user %s denied status change on order %s", identity.subject_id, order_id)
                raise Forbidden("Access denied. Not your order.")
            previous = order.status
            order.status = new_status
            self.db.add(order)
            self.db.commit()
            self.db.refresh(order)
            logger.info("order %s status %s -> %s by user %s", order.id, previous, new_status, identity.subject_id)
            return OrderRead.model_validate(order)

    def delete(self, identity: Optional[Identity], order_id: int | str) -> OrderRead:
        # ownership is not enough here, unlike update_status
        if identity is None or not identity.is_admin:
            raise Forbidden("Only admins can delete orders")

        with self._store_errors("deleting order"):
            order = self._get(order_id)
            snapshot = OrderRead.model_validate(order)
            self.db.delete(order)
            self.db.commit()
            logger.info("order %s deleted by admin %s", order_id, identity.subject_id)
            return snapshot
