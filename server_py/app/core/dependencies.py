from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.core.database import get_db
from app.services.coordinates import (
    ChainedCoordinateSource,
    CoordinateSource,
    PingCoordinateSource,
    StaticCoordinateSource,
)
from app.services.orders import OrderService
from app.services.trucks import TruckService

# Статическая таблица не меняется между запросами
static_locations = StaticCoordinateSource()


def get_static_locations() -> StaticCoordinateSource:
    return static_locations


async def get_coordinate_source(
    db: AsyncSession = Depends(get_db),
    static: StaticCoordinateSource = Depends(get_static_locations),
) -> CoordinateSource:
    """
    Dependency с источником координат для поиска.
    Последний пинг трака важнее статической таблицы, если пинги включены.
    """
    if not settings.LOCATION_PINGS_ENABLED:
        return static
    pings = await PingCoordinateSource.load(db)
    return ChainedCoordinateSource(pings, static)


def get_truck_service(db: AsyncSession = Depends(get_db)) -> TruckService:
    return TruckService(db)


def get_order_service(db: AsyncSession = Depends(get_db)) -> OrderService:
    return OrderService(db)
