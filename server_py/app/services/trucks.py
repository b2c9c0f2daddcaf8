from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidArgument, NotFound
from app.models.food_truck import FoodTruck
from app.models.location_ping import TruckLocationPing
from app.models.review import Review
from app.models.schedule import WEEKDAYS, Schedule
from app.schemas.location import LocationPingCreate
from app.schemas.review import ReviewCreate
from app.schemas.truck import TruckCreate, TruckUpdate
from app.services.coordinates import TruckLocation
from app.services.menu import MenuService, serialize_menu_item
from app.services.proximity import Coordinate, RankedResult, TruckCandidate

logger = logging.getLogger(__name__)

RECENT_REVIEWS_LIMIT = 10
NON_NULLABLE_PATCH_FIELDS = {"name", "cuisine_tags", "price_tier", "is_open_now"}


class TruckService:
    """Каталог фуд-траков: список, карточка, отзывы, геопинги."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_trucks(self) -> List[FoodTruck]:
        result = await self.db.execute(select(FoodTruck).order_by(FoodTruck.created_at.desc()))
        return list(result.scalars())

    async def list_by_rating(self) -> List[FoodTruck]:
        result = await self.db.execute(select(FoodTruck).order_by(FoodTruck.avg_rating.desc()))
        return list(result.scalars())

    async def get_truck(self, truck_id: str) -> FoodTruck:
        truck = await self.db.get(FoodTruck, truck_id)
        if truck is None:
            raise NotFound("Food truck not found")
        return truck

    async def create_truck(self, data: TruckCreate) -> FoodTruck:
        name = (data.name or "").strip()
        if not name:
            raise InvalidArgument("Name is required")

        truck = FoodTruck(
            truck_id=f"truck_{uuid.uuid4().hex[:12]}",
            name=name,
            cuisine_tags=list(data.cuisine_tags),
            price_tier=data.price_tier or "$$",
            avg_rating=data.avg_rating or 0.0,
        )
        self.db.add(truck)
        await self.db.commit()
        await self.db.refresh(truck)
        logger.info("Food truck %s created", truck.truck_id)
        return truck

    async def update_truck(self, truck_id: str, patch: TruckUpdate) -> FoodTruck:
        values = patch.model_dump(exclude_unset=True)
        if not values:
            raise InvalidArgument("No fields to update")
        cleared = sorted(field for field, value in values.items() if value is None and field in NON_NULLABLE_PATCH_FIELDS)
        if cleared:
            raise InvalidArgument(f"Fields cannot be null: {', '.join(cleared)}")

        truck = await self.get_truck(truck_id)
        values["updated_at"] = datetime.utcnow()
        await self.db.execute(
            update(FoodTruck).where(FoodTruck.truck_id == truck_id).values(**values)
        )
        await self.db.commit()
        await self.db.refresh(truck)
        return truck

    async def cuisine_types(self) -> List[str]:
        result = await self.db.execute(select(FoodTruck.cuisine_tags))
        tags = {tag for row in result.scalars() for tag in (row or [])}
        return sorted(tags)

    async def details(self, truck_id: str) -> dict:
        truck = await self.get_truck(truck_id)

        menu = await MenuService(self.db).current_items(truck_id)

        reviews_result = await self.db.execute(
            select(Review)
            .where(Review.truck_id == truck_id, Review.status == "published")
            .order_by(Review.created_at.desc())
            .limit(RECENT_REVIEWS_LIMIT)
        )
        schedule_result = await self.db.execute(select(Schedule).where(Schedule.truck_id == truck_id))
        schedule = sorted(
            schedule_result.scalars(),
            key=lambda entry: WEEKDAYS.index(entry.day_of_week) if entry.day_of_week in WEEKDAYS else len(WEEKDAYS),
        )

        return {
            "truck": truck,
            "menu": [serialize_menu_item(item) for item in menu],
            "reviews": [serialize_review(review) for review in reviews_result.scalars()],
            "schedule": [
                {
                    "day_of_week": entry.day_of_week,
                    "start_time": entry.start_time,
                    "end_time": entry.end_time,
                    "typical_location": entry.typical_location,
                }
                for entry in schedule
            ],
        }

    async def add_review(self, truck_id: str, data: ReviewCreate) -> Review:
        user_name = (data.user_name or "").strip()
        if not user_name or not data.rating:
            raise InvalidArgument("User name and rating are required")
        if data.rating < 1 or data.rating > 5:
            raise InvalidArgument("Rating must be between 1 and 5")

        truck = await self.get_truck(truck_id)

        review = Review(
            review_id=f"review_{uuid.uuid4().hex}",
            truck_id=truck_id,
            user_name=user_name,
            rating=data.rating,
            text=data.text or None,
            status="published",
            created_at=datetime.utcnow(),
        )
        self.db.add(review)
        await self.db.flush()

        # Пересчитываем рейтинг в той же транзакции
        stats = await self.db.execute(
            select(func.avg(Review.rating), func.count(Review.review_id)).where(
                Review.truck_id == truck_id, Review.status == "published"
            )
        )
        avg_rating, reviews_count = stats.one()
        truck.avg_rating = round(float(avg_rating or 0), 2)
        truck.reviews_count = reviews_count
        await self.db.commit()
        return review

    async def record_location(self, truck_id: str, data: LocationPingCreate) -> TruckLocationPing:
        coordinate = Coordinate(data.latitude, data.longitude)
        if not coordinate.is_valid():
            raise InvalidArgument("Invalid latitude or longitude values")
        await self.get_truck(truck_id)

        ping = TruckLocationPing(
            truck_id=truck_id,
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
            recorded_at=datetime.utcnow(),
        )
        self.db.add(ping)
        await self.db.commit()
        return ping


def to_candidate(truck: FoodTruck) -> TruckCandidate:
    return TruckCandidate(
        id=truck.truck_id,
        rating=float(truck.avg_rating or 0),
        tags=tuple(truck.cuisine_tags or ()),
        attributes=serialize_truck(truck),
    )


def serialize_truck(
    truck: FoodTruck,
    coordinate: Optional[Coordinate] = None,
    location: Optional[TruckLocation] = None,
) -> dict:
    data = {
        "truck_id": truck.truck_id,
        "name": truck.name,
        "cuisine_tags": truck.cuisine_tags or [],
        "price_tier": truck.price_tier,
        "avg_rating": float(truck.avg_rating or 0),
        "reviews_count": truck.reviews_count or 0,
        "is_open_now": bool(truck.is_open_now),
        "created_at": truck.created_at.isoformat() if truck.created_at else None,
    }
    if coordinate is None and location is not None:
        coordinate = location.coordinate
    if coordinate is not None:
        data["latitude"] = coordinate.latitude
        data["longitude"] = coordinate.longitude
    if location is not None:
        data["address"] = location.address
        data["phone"] = location.phone
        data["image_url"] = location.image_url
    return data


def serialize_ranked(result: RankedResult, location: Optional[TruckLocation] = None) -> dict:
    data = dict(result.candidate.attributes)
    if result.coordinate is not None:
        data["latitude"] = result.coordinate.latitude
        data["longitude"] = result.coordinate.longitude
    if location is not None:
        data["address"] = location.address
        data["phone"] = location.phone
        data["image_url"] = location.image_url
    if result.distance_km is not None:
        data["distance"] = result.distance_km
    return data


def serialize_review(review: Review) -> dict:
    return {
        "review_id": review.review_id,
        "truck_id": review.truck_id,
        "user_name": review.user_name,
        "rating": review.rating,
        "text": review.text,
        "status": review.status,
        "upvotes": review.upvotes or 0,
        "downvotes": review.downvotes or 0,
        "created_at": review.created_at.isoformat() if review.created_at else None,
    }
