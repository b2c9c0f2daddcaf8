"""Order placement and lifecycle.

``OrderService.place_order`` validates every requested line against the
truck's current menu before anything is written, then stores the order header
and all of its lines in a single transaction.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, FrozenSet, List, Optional, Protocol, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import InvalidArgument, NotFound, StorageFailure
from app.models.food_truck import FoodTruck
from app.models.menu import MenuItem
from app.models.order import ORDER_STATUSES, Order, OrderItem
from app.schemas.order import OrderLineRequest
from app.services.menu import MenuService

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")

TERMINAL_STATUSES: FrozenSet[str] = frozenset({"completed", "cancelled"})

ORDER_STATUS_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "pending": frozenset({"confirmed", "cancelled"}),
    "confirmed": frozenset({"preparing", "cancelled"}),
    "preparing": frozenset({"ready", "cancelled"}),
    "ready": frozenset({"completed", "cancelled"}),
    "completed": frozenset(),
    "cancelled": frozenset(),
}


class MenuSource(Protocol):
    async def find_available_item(self, truck_id: str, item_id: str) -> Optional[MenuItem]:
        ...


def new_order_id() -> str:
    return f"order_{uuid.uuid4().hex}"


def new_order_item_id() -> str:
    return f"order_item_{uuid.uuid4().hex}"


def can_transition(current: str, target: str) -> bool:
    return target in ORDER_STATUS_TRANSITIONS.get(current, frozenset())


class OrderService:
    def __init__(self, db: AsyncSession, menu_source: Optional[MenuSource] = None) -> None:
        self.db = db
        self.menu_source = menu_source or MenuService(db)

    async def _build_lines(
        self, truck_id: str, requested_lines: Sequence[OrderLineRequest]
    ) -> Tuple[List[OrderItem], Decimal]:
        lines: List[OrderItem] = []
        total = Decimal("0")
        for requested in requested_lines:
            quantity = requested.quantity or 0
            if quantity <= 0:
                continue

            menu_item = await self.menu_source.find_available_item(truck_id, requested.item_id)
            if menu_item is None:
                raise InvalidArgument(f"Menu item {requested.item_id} not found or not available")

            unit_price = Decimal(menu_item.price)
            subtotal = unit_price * quantity
            total += subtotal
            lines.append(
                OrderItem(
                    order_item_id=new_order_item_id(),
                    line_no=len(lines) + 1,
                    item_id=requested.item_id,
                    item_name=menu_item.name,
                    quantity=quantity,
                    unit_price=unit_price,
                    subtotal=subtotal,
                )
            )
        # Округляем один раз всю сумму, а не каждую строку
        return lines, total.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)

    async def place_order(
        self,
        truck_id: str,
        customer_name: Optional[str],
        requested_lines: Sequence[OrderLineRequest],
        customer_phone: Optional[str] = None,
    ) -> Order:
        customer_name = (customer_name or "").strip()
        if not customer_name or not requested_lines:
            raise InvalidArgument("Customer name and at least one item are required")

        truck = await self.db.get(FoodTruck, truck_id)
        if truck is None:
            raise NotFound("Food truck not found")

        try:
            lines, total = await self._build_lines(truck_id, requested_lines)
        except InvalidArgument as exc:
            logger.warning("Order for truck %s rejected: %s", truck_id, exc.message)
            raise
        if not lines:
            raise InvalidArgument("No valid items in order")

        now = datetime.utcnow()
        order = Order(
            order_id=new_order_id(),
            truck_id=truck_id,
            customer_name=customer_name,
            customer_phone=customer_phone or None,
            total_amount=total,
            status="pending",
            created_at=now,
            updated_at=now,
            lines=lines,
        )

        # Заголовок и все строки заказа уходят одной транзакцией
        self.db.add(order)
        try:
            await self.db.flush()
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.exception("Failed to store order for truck %s", truck_id)
            raise StorageFailure("Failed to place order") from exc

        logger.info("Order %s placed for truck %s, total %s", order.order_id, truck_id, total)
        return order

    async def get_order(self, order_id: str) -> Order:
        order = await self.db.get(Order, order_id)
        if order is None:
            raise NotFound("Order not found")
        return order

    async def list_orders(
        self,
        customer_name: Optional[str] = None,
        customer_phone: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Tuple[Order, str]]:
        """Заказы клиента по имени (подстрока) и/или телефону, новые первыми."""
        if not customer_name and not customer_phone:
            raise InvalidArgument("Please provide customer_name or customer_phone")

        stmt = select(Order, FoodTruck.name).join(FoodTruck, Order.truck_id == FoodTruck.truck_id)
        if customer_name:
            # % и _ в имени ищутся буквально
            stmt = stmt.where(
                func.lower(Order.customer_name).contains(customer_name.lower(), autoescape=True)
            )
        if customer_phone:
            stmt = stmt.where(Order.customer_phone == customer_phone)
        stmt = stmt.order_by(Order.created_at.desc()).limit(limit or settings.ORDER_LOOKUP_LIMIT)

        result = await self.db.execute(stmt)
        return [(order, truck_name) for order, truck_name in result.all()]

    async def update_status(self, order_id: str, status: str) -> Order:
        if status not in ORDER_STATUSES:
            raise InvalidArgument(f"Status must be one of: {', '.join(ORDER_STATUSES)}")

        order = await self.get_order(order_id)
        if not can_transition(order.status, status):
            raise InvalidArgument(f"Cannot change order status from {order.status} to {status}")

        order.status = status
        order.updated_at = datetime.utcnow()
        await self.db.commit()
        logger.info("Order %s moved to %s", order_id, status)
        return order


def _money(value: Decimal) -> float:
    return float(Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def serialize_order_line(line: OrderItem) -> dict:
    return {
        "item_id": line.item_id,
        "name": line.item_name,
        "quantity": line.quantity,
        "price": float(line.unit_price),
        "subtotal": float(line.subtotal),
    }


def serialize_order(order: Order, truck_name: Optional[str] = None) -> dict:
    """Преобразует заказ в JSON-совместимый словарь."""
    data = {
        "order_id": order.order_id,
        "truck_id": order.truck_id,
        "customer_name": order.customer_name,
        "customer_phone": order.customer_phone,
        "items": [serialize_order_line(line) for line in order.lines],
        "total": _money(order.total_amount),
        "status": order.status,
        "created_at": order.created_at.isoformat() if order.created_at else None,
        "updated_at": order.updated_at.isoformat() if order.updated_at else None,
    }
    if truck_name is not None:
        data["truck_name"] = truck_name
    return data
