from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.dependencies import get_order_service
from app.schemas.order import OrderStatusUpdate
from app.services.orders import OrderService, serialize_order

router = APIRouter()


@router.get("")
async def get_orders(
    customer_name: Optional[str] = Query(default=None, description="Часть имени клиента"),
    customer_phone: Optional[str] = Query(default=None, description="Телефон клиента"),
    orders: OrderService = Depends(get_order_service),
):
    """Заказы клиента по имени или телефону"""
    rows = await orders.list_orders(customer_name=customer_name, customer_phone=customer_phone)
    return {
        "success": True,
        "count": len(rows),
        "data": [serialize_order(order, truck_name) for order, truck_name in rows],
    }


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    orders: OrderService = Depends(get_order_service),
):
    """Получение заказа по ID"""
    order = await orders.get_order(order_id)
    return {"success": True, "data": serialize_order(order)}


@router.patch("/{order_id}/status")
async def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    orders: OrderService = Depends(get_order_service),
):
    """Смена статуса заказа по таблице допустимых переходов"""
    order = await orders.update_status(order_id, payload.status)
    return {"success": True, "data": serialize_order(order)}
