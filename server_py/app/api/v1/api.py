from fastapi import APIRouter
from app.api.v1.endpoints import health, trucks, orders

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(trucks.router, prefix="/trucks", tags=["trucks"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
