from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.dependencies import (
    get_coordinate_source,
    get_order_service,
    get_static_locations,
    get_truck_service,
)
from app.core.exceptions import InvalidArgument
from app.schemas.location import LocationPingCreate
from app.schemas.order import OrderCreate
from app.schemas.review import ReviewCreate
from app.schemas.truck import TruckCreate, TruckUpdate
from app.services.coordinates import CoordinateSource, StaticCoordinateSource
from app.services.orders import OrderService, serialize_order
from app.services.proximity import (
    find_nearby,
    parse_limit,
    parse_optional_origin,
    parse_origin,
    parse_radius,
    rank_by_cuisine,
)
from app.services.trucks import (
    TruckService,
    serialize_ranked,
    serialize_review,
    serialize_truck,
    to_candidate,
)

router = APIRouter()


@router.get("")
async def list_trucks(trucks: TruckService = Depends(get_truck_service)):
    """Список всех фуд-траков, новые первыми."""
    items = await trucks.list_trucks()
    return {
        "success": True,
        "count": len(items),
        "data": [serialize_truck(truck) for truck in items],
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_truck(
    payload: TruckCreate,
    trucks: TruckService = Depends(get_truck_service),
):
    truck = await trucks.create_truck(payload)
    return {
        "success": True,
        "message": "Food truck added successfully",
        "data": serialize_truck(truck),
    }


@router.get("/nearby")
async def nearby_trucks(
    lat: Optional[str] = Query(default=None, description="Широта пользователя"),
    lng: Optional[str] = Query(default=None, description="Долгота пользователя"),
    radius: Optional[str] = Query(default=None, description="Радиус поиска в км (по умолчанию 5)"),
    limit: Optional[str] = Query(default=None, description="Максимум результатов (по умолчанию 10)"),
    trucks: TruckService = Depends(get_truck_service),
    coordinates: CoordinateSource = Depends(get_coordinate_source),
    static: StaticCoordinateSource = Depends(get_static_locations),
):
    """Траки в радиусе от точки пользователя, ближайшие первыми."""
    origin = parse_origin(lat, lng)
    radius_km = parse_radius(radius)
    max_results = parse_limit(limit)

    candidates = [to_candidate(truck) for truck in await trucks.list_by_rating()]
    results = find_nearby(origin, candidates, coordinates.lookup, radius_km=radius_km, limit=max_results)

    return {
        "success": True,
        "count": len(results),
        "search_location": {
            "latitude": origin.latitude,
            "longitude": origin.longitude,
            "radius_km": radius_km,
        },
        "data": [serialize_ranked(result, static.details(result.candidate.id)) for result in results],
    }


@router.get("/all-with-location")
async def trucks_with_location(
    trucks: TruckService = Depends(get_truck_service),
    coordinates: CoordinateSource = Depends(get_coordinate_source),
    static: StaticCoordinateSource = Depends(get_static_locations),
):
    items = await trucks.list_trucks()
    data = [
        serialize_truck(truck, coordinates.lookup(truck.truck_id), static.details(truck.truck_id))
        for truck in items
    ]
    return {"success": True, "count": len(data), "data": data}


@router.get("/by-cuisine")
async def trucks_by_cuisine(
    cuisine: Optional[str] = Query(default=None, description="Тег кухни, точное совпадение"),
    lat: Optional[str] = Query(default=None),
    lng: Optional[str] = Query(default=None),
    trucks: TruckService = Depends(get_truck_service),
    coordinates: CoordinateSource = Depends(get_coordinate_source),
    static: StaticCoordinateSource = Depends(get_static_locations),
):
    """Поиск по кухне: по расстоянию если есть координаты, иначе по рейтингу."""
    if not cuisine:
        raise InvalidArgument("Cuisine type is required (cuisine query parameter)")
    origin = parse_optional_origin(lat, lng)

    candidates = [to_candidate(truck) for truck in await trucks.list_by_rating()]
    results = rank_by_cuisine(candidates, cuisine, coordinates.lookup, origin=origin)

    return {
        "success": True,
        "count": len(results),
        "search_cuisine": cuisine,
        "user_location": (
            {"latitude": origin.latitude, "longitude": origin.longitude} if origin else None
        ),
        "data": [serialize_ranked(result, static.details(result.candidate.id)) for result in results],
    }


@router.get("/cuisine-types")
async def cuisine_types(trucks: TruckService = Depends(get_truck_service)):
    types = await trucks.cuisine_types()
    return {"success": True, "count": len(types), "data": types}


@router.post("/{truck_id}/reviews", status_code=status.HTTP_201_CREATED)
async def submit_review(
    truck_id: str,
    payload: ReviewCreate,
    trucks: TruckService = Depends(get_truck_service),
):
    review = await trucks.add_review(truck_id, payload)
    return {
        "success": True,
        "message": "Review submitted successfully",
        "data": serialize_review(review),
    }


@router.post("/{truck_id}/orders", status_code=status.HTTP_201_CREATED)
async def place_order(
    truck_id: str,
    payload: OrderCreate,
    orders: OrderService = Depends(get_order_service),
):
    """Оформление заказа: все позиции проверяются до записи, заказ пишется атомарно."""
    order = await orders.place_order(
        truck_id,
        payload.customer_name,
        payload.items,
        customer_phone=payload.customer_phone,
    )
    return {
        "success": True,
        "message": "Order placed successfully",
        "data": serialize_order(order),
    }


@router.post("/{truck_id}/location", status_code=status.HTTP_201_CREATED)
async def record_location(
    truck_id: str,
    payload: LocationPingCreate,
    trucks: TruckService = Depends(get_truck_service),
):
    ping = await trucks.record_location(truck_id, payload)
    return {
        "success": True,
        "data": {
            "truck_id": ping.truck_id,
            "latitude": ping.latitude,
            "longitude": ping.longitude,
            "recorded_at": ping.recorded_at.isoformat(),
        },
    }


@router.patch("/{truck_id}")
async def update_truck(
    truck_id: str,
    payload: TruckUpdate,
    trucks: TruckService = Depends(get_truck_service),
):
    truck = await trucks.update_truck(truck_id, payload)
    return {"success": True, "data": serialize_truck(truck)}


@router.get("/{truck_id}")
async def get_truck(
    truck_id: str,
    trucks: TruckService = Depends(get_truck_service),
    coordinates: CoordinateSource = Depends(get_coordinate_source),
    static: StaticCoordinateSource = Depends(get_static_locations),
):
    truck = await trucks.get_truck(truck_id)
    return {
        "success": True,
        "data": serialize_truck(truck, coordinates.lookup(truck_id), static.details(truck_id)),
    }


@router.get("/{truck_id}/details")
async def get_truck_details(
    truck_id: str,
    trucks: TruckService = Depends(get_truck_service),
    coordinates: CoordinateSource = Depends(get_coordinate_source),
    static: StaticCoordinateSource = Depends(get_static_locations),
):
    """Карточка трака: меню, последние отзывы, расписание."""
    details = await trucks.details(truck_id)
    truck = details.pop("truck")
    data = serialize_truck(truck, coordinates.lookup(truck_id), static.details(truck_id))
    data.update(details)
    return {"success": True, "data": data}
