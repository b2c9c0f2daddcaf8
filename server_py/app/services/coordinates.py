from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Protocol

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.location_ping import TruckLocationPing
from app.services.proximity import Coordinate


class CoordinateSource(Protocol):
    def lookup(self, truck_id: str) -> Optional[Coordinate]:
        ...


@dataclass(frozen=True)
class TruckLocation:
    """Where a truck usually parks, with its public contact card."""

    coordinate: Coordinate
    address: Optional[str] = None
    phone: Optional[str] = None
    image_url: Optional[str] = None


def _location(lat: float, lon: float, address: str, phone: str, photo: str) -> TruckLocation:
    return TruckLocation(
        coordinate=Coordinate(lat, lon),
        address=address,
        phone=phone,
        image_url=f"https://images.unsplash.com/photo-{photo}?w=400&h=300&fit=crop",
    )


# Точки стоянки вокруг Rutgers University, New Brunswick, NJ
RUTGERS_TRUCK_LOCATIONS: Dict[str, TruckLocation] = {
    "truck_001": _location(40.5007, -74.4474, "Rutgers Student Center, New Brunswick, NJ", "(732) 555-0101", "1565299585323-38174c0b5e3a"),
    "truck_002": _location(40.5050, -74.4520, "College Ave Campus, New Brunswick, NJ", "(732) 555-0102", "1550547660-d9450f859349"),
    "truck_003": _location(40.4950, -74.4420, "Busch Campus, Piscataway, NJ", "(732) 555-0103", "1579584425555-c3ce17fd4351"),
    "truck_004": _location(40.5100, -74.4550, "George Street, New Brunswick, NJ", "(732) 555-0104", "1513104890138-7c749659a591"),
    "truck_005": _location(40.5000, -74.4500, "Rutgers Plaza, New Brunswick, NJ", "(732) 555-0105", "1585937421612-70a008356fbe"),
    "truck_006": _location(40.5020, -74.4480, "Livingston Campus, Piscataway, NJ", "(732) 555-0106", "1544025162-d76694265947"),
    "truck_007": _location(40.4980, -74.4450, "Cook-Douglass Campus, New Brunswick, NJ", "(732) 555-0107", "1569718212165-3a8278d5f624"),
    "truck_008": _location(40.5070, -74.4530, "Downtown New Brunswick, NJ", "(732) 555-0108", "1512058564366-18510be2db19"),
    "truck_009": _location(40.5030, -74.4490, "Rutgers Plaza, New Brunswick, NJ", "(732) 555-0109", "1563805042-7684c019e1cb"),
    "truck_010": _location(40.4960, -74.4430, "Busch Campus, Piscataway, NJ", "(732) 555-0110", "1559314809-0d155014e29e"),
    "truck_011": _location(40.5090, -74.4540, "College Ave Campus, New Brunswick, NJ", "(732) 555-0111", "1529042410759-befb1204b468"),
    "truck_012": _location(40.5010, -74.4460, "George Street, New Brunswick, NJ", "(732) 555-0112", "1512621776951-a57141f2eefd"),
    "truck_013": _location(40.5040, -74.4510, "Rutgers Student Center, New Brunswick, NJ", "(732) 555-0113", "1565299624946-b28f40a0ae38"),
    "truck_014": _location(40.4970, -74.4440, "Livingston Campus, Piscataway, NJ", "(732) 555-0114", "1559339352-11d035aa65de"),
    "truck_015": _location(40.5080, -74.4560, "Downtown New Brunswick, NJ", "(732) 555-0115", "1512621776951-a57141f2eefd"),
    "truck_016": _location(40.4990, -74.4410, "Cook-Douglass Campus, New Brunswick, NJ", "(732) 555-0116", "1511920170033-83939bb485ea"),
    "truck_017": _location(40.5060, -74.4520, "Busch Campus, Piscataway, NJ", "(732) 555-0117", "1569718212165-3a8278d5f624"),
    "truck_018": _location(40.5025, -74.4475, "Rutgers Plaza, New Brunswick, NJ", "(732) 555-0118", "1528735602780-2552fd46c7af"),
    "truck_019": _location(40.5005, -74.4495, "College Ave Campus, New Brunswick, NJ", "(732) 555-0119", "1626082927389-6cd097cdc6ec"),
    "truck_020": _location(40.5035, -74.4505, "George Street, New Brunswick, NJ", "(732) 555-0120", "1553530666-ba11a7da3888"),
}


class StaticCoordinateSource:
    """Lookup over a fixed table of truck locations."""

    def __init__(self, locations: Optional[Dict[str, TruckLocation]] = None) -> None:
        self._locations = RUTGERS_TRUCK_LOCATIONS if locations is None else locations

    def lookup(self, truck_id: str) -> Optional[Coordinate]:
        location = self._locations.get(truck_id)
        return location.coordinate if location else None

    def details(self, truck_id: str) -> Optional[TruckLocation]:
        return self._locations.get(truck_id)


class PingCoordinateSource:
    """Lookup over the latest persisted location ping of each truck.

    Pings are loaded up front with ``load`` so ``lookup`` stays synchronous.
    """

    def __init__(self, coordinates: Optional[Dict[str, Coordinate]] = None) -> None:
        self._coordinates = coordinates or {}

    @classmethod
    async def load(cls, db: AsyncSession, truck_ids: Optional[Iterable[str]] = None) -> "PingCoordinateSource":
        latest = (
            select(
                TruckLocationPing.truck_id,
                func.max(TruckLocationPing.recorded_at).label("recorded_at"),
            )
            .group_by(TruckLocationPing.truck_id)
        )
        if truck_ids is not None:
            latest = latest.where(TruckLocationPing.truck_id.in_(list(truck_ids)))
        latest = latest.subquery()

        stmt = (
            select(TruckLocationPing)
            .join(
                latest,
                (TruckLocationPing.truck_id == latest.c.truck_id)
                & (TruckLocationPing.recorded_at == latest.c.recorded_at),
            )
            .order_by(TruckLocationPing.id)
        )
        result = await db.execute(stmt)
        coordinates = {
            ping.truck_id: Coordinate(ping.latitude, ping.longitude)
            for ping in result.scalars()
        }
        return cls(coordinates)

    def lookup(self, truck_id: str) -> Optional[Coordinate]:
        return self._coordinates.get(truck_id)


class ChainedCoordinateSource:
    """First source that knows the truck wins."""

    def __init__(self, *sources: CoordinateSource) -> None:
        self._sources = sources

    def lookup(self, truck_id: str) -> Optional[Coordinate]:
        for source in self._sources:
            coordinate = source.lookup(truck_id)
            if coordinate is not None:
                return coordinate
        return None
