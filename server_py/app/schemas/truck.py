from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from app.models.food_truck import PRICE_TIERS


def _check_price_tier(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in PRICE_TIERS:
        raise ValueError(f"Price tier must be one of: {', '.join(PRICE_TIERS)}")
    return value


# Схема для создания трака
class TruckCreate(BaseModel):
    name: Optional[str] = None
    cuisine_tags: List[str] = Field(default_factory=list)
    price_tier: Optional[str] = None
    avg_rating: Optional[float] = None

    @field_validator("price_tier")
    @classmethod
    def check_price_tier(cls, value: Optional[str]) -> Optional[str]:
        return _check_price_tier(value)


# Частичное обновление: в UPDATE попадают только переданные поля
class TruckUpdate(BaseModel):
    name: Optional[str] = None
    cuisine_tags: Optional[List[str]] = None
    price_tier: Optional[str] = None
    is_open_now: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def clean_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Name cannot be empty")
        return cleaned

    @field_validator("price_tier")
    @classmethod
    def check_price_tier(cls, value: Optional[str]) -> Optional[str]:
        return _check_price_tier(value)
