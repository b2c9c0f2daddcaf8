"""Nearby search over food trucks.

Pure in-memory ranking: the caller supplies the candidate trucks and a
coordinate lookup, nothing here touches the database.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from app.core.config import settings
from app.core.exceptions import InvalidArgument

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def is_valid(self) -> bool:
        return -90 <= self.latitude <= 90 and -180 <= self.longitude <= 180


@dataclass
class TruckCandidate:
    id: str
    rating: float = 0.0
    tags: Tuple[str, ...] = ()
    attributes: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RankedResult:
    candidate: TruckCandidate
    coordinate: Optional[Coordinate] = None
    distance_km: Optional[float] = None


CoordinateLookup = Callable[[str], Optional[Coordinate]]


def haversine_km(origin: Coordinate, target: Coordinate) -> float:
    """Great-circle distance in kilometres on a spherical Earth."""
    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(target.latitude)
    d_lat = math.radians(target.latitude - origin.latitude)
    d_lon = math.radians(target.longitude - origin.longitude)

    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    # Для почти антиподов погрешность float выводит a за [0, 1]
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def rounded_distance_km(origin: Coordinate, target: Coordinate) -> float:
    # Радиус сравнивается уже с округленным значением
    return round(haversine_km(origin, target), 2)


def _parse_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(parsed):
        return None
    return parsed


def parse_origin(lat: Any, lng: Any) -> Coordinate:
    """Turn raw lat/lng query values into a validated Coordinate."""
    latitude = _parse_float(lat)
    longitude = _parse_float(lng)
    if latitude is None or longitude is None:
        raise InvalidArgument("Latitude and longitude are required (lat, lng query parameters)")

    origin = Coordinate(latitude, longitude)
    if not origin.is_valid():
        raise InvalidArgument("Invalid latitude or longitude values")
    return origin


def parse_optional_origin(lat: Any, lng: Any) -> Optional[Coordinate]:
    """Like parse_origin, but both values missing means "no origin"."""
    if _is_blank(lat) and _is_blank(lng):
        return None
    return parse_origin(lat, lng)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_radius(value: Any, default: Optional[float] = None) -> float:
    radius = _parse_float(value)
    if radius is None or radius == 0:
        return settings.DEFAULT_RADIUS_KM if default is None else default
    return radius


def parse_limit(value: Any, default: Optional[int] = None) -> int:
    fallback = settings.DEFAULT_NEARBY_LIMIT if default is None else default
    parsed = _parse_float(value)
    if parsed is None or math.isinf(parsed):
        return fallback
    limit = int(parsed)
    return limit if limit > 0 else fallback


def _annotate(
    candidates: Iterable[TruckCandidate],
    origin: Optional[Coordinate],
    coordinate_lookup: CoordinateLookup,
) -> List[RankedResult]:
    results = []
    for candidate in candidates:
        coordinate = coordinate_lookup(candidate.id)
        distance = None
        if coordinate is not None and origin is not None:
            distance = rounded_distance_km(origin, coordinate)
        results.append(RankedResult(candidate=candidate, coordinate=coordinate, distance_km=distance))
    return results


def find_nearby(
    origin: Coordinate,
    candidates: Iterable[TruckCandidate],
    coordinate_lookup: CoordinateLookup,
    radius_km: Optional[float] = None,
    limit: Optional[int] = None,
) -> List[RankedResult]:
    """Return candidates within radius_km of origin, closest first.

    Candidates the lookup cannot place are skipped. Ties keep input order.
    """
    if not origin.is_valid():
        raise InvalidArgument("Invalid latitude or longitude values")
    radius = settings.DEFAULT_RADIUS_KM if radius_km is None else radius_km
    max_results = settings.DEFAULT_NEARBY_LIMIT if limit is None else limit

    located = [
        result
        for result in _annotate(candidates, origin, coordinate_lookup)
        if result.coordinate is not None and result.distance_km <= radius
    ]
    located.sort(key=lambda result: result.distance_km)
    return located[:max_results]


def rank_by_cuisine(
    candidates: Iterable[TruckCandidate],
    cuisine_tag: str,
    coordinate_lookup: CoordinateLookup,
    origin: Optional[Coordinate] = None,
) -> List[RankedResult]:
    """Filter by exact cuisine tag and rank.

    With an origin the ranking is by distance alone (trucks without a known
    location go last, best rated first). Without one it is by rating.
    """
    if origin is not None and not origin.is_valid():
        raise InvalidArgument("Invalid latitude or longitude values")

    matching = [candidate for candidate in candidates if cuisine_tag in candidate.tags]
    results = _annotate(matching, origin, coordinate_lookup)

    if origin is None:
        results.sort(key=lambda result: result.candidate.rating, reverse=True)
        return results

    placed = [result for result in results if result.distance_km is not None]
    unplaced = [result for result in results if result.distance_km is None]
    placed.sort(key=lambda result: result.distance_km)
    unplaced.sort(key=lambda result: result.candidate.rating, reverse=True)
    return placed + unplaced
