import math

import pytest

from app.core.exceptions import InvalidArgument
from app.services.coordinates import RUTGERS_TRUCK_LOCATIONS, StaticCoordinateSource
from app.services.proximity import (
    Coordinate,
    TruckCandidate,
    find_nearby,
    haversine_km,
    parse_limit,
    parse_optional_origin,
    parse_origin,
    parse_radius,
    rank_by_cuisine,
)

STUDENT_CENTER = Coordinate(40.5007, -74.4474)


def _candidates(ids, rating=4.0, tags=()):
    return [TruckCandidate(id=truck_id, rating=rating, tags=tuple(tags)) for truck_id in ids]


def _table_lookup(table):
    return lambda truck_id: table.get(truck_id)


@pytest.mark.parametrize(
    "a, b",
    [
        (Coordinate(40.5007, -74.4474), Coordinate(40.5100, -74.4550)),
        (Coordinate(0.0, 0.0), Coordinate(-33.8688, 151.2093)),
        (Coordinate(89.9, 179.9), Coordinate(-89.9, -179.9)),
    ],
)
def test_haversine_is_symmetric(a, b):
    assert haversine_km(a, b) == pytest.approx(haversine_km(b, a))


def test_haversine_identity_is_zero():
    assert haversine_km(STUDENT_CENTER, STUDENT_CENTER) == 0


def test_haversine_known_distance():
    # Один градус долготы на экваторе ~111.19 км при R = 6371
    assert haversine_km(Coordinate(0, 0), Coordinate(0, 1)) == pytest.approx(111.19, abs=0.01)


ANTIPODE_A = Coordinate(-87.5, 0.0)
ANTIPODE_B = Coordinate(87.5, 180.0)


def test_haversine_antipodal_points_is_half_circumference():
    assert haversine_km(ANTIPODE_A, ANTIPODE_B) == pytest.approx(math.pi * 6371.0, abs=0.01)


def test_antipodal_truck_is_left_out_of_search():
    candidates = _candidates(["far"], tags=("Thai",))
    lookup = _table_lookup({"far": ANTIPODE_B})

    assert find_nearby(ANTIPODE_A, candidates, lookup, radius_km=5, limit=10) == []
    ranked = rank_by_cuisine(candidates, "Thai", lookup, origin=ANTIPODE_A)
    assert ranked[0].distance_km == pytest.approx(20015.09, abs=0.01)


def test_find_nearby_mock_trucks_end_to_end():
    source = StaticCoordinateSource()
    candidates = _candidates(sorted(RUTGERS_TRUCK_LOCATIONS))

    everything = find_nearby(STUDENT_CENTER, candidates, source.lookup, radius_km=5, limit=100)
    assert len(everything) == 20
    assert everything[0].candidate.id == "truck_001"
    assert everything[0].distance_km == 0.0
    assert all(result.distance_km <= 1.5 for result in everything)

    top_ten = find_nearby(STUDENT_CENTER, candidates, source.lookup, radius_km=5, limit=10)
    assert len(top_ten) == 10
    assert [r.candidate.id for r in top_ten] == [r.candidate.id for r in everything[:10]]


def test_find_nearby_respects_radius_order_and_limit():
    table = {
        "near": Coordinate(40.5010, -74.4470),
        "mid": Coordinate(40.5200, -74.4474),
        "far": Coordinate(40.7128, -74.0060),
    }
    candidates = _candidates(["far", "mid", "near"])

    results = find_nearby(STUDENT_CENTER, candidates, _table_lookup(table), radius_km=5, limit=10)

    assert [r.candidate.id for r in results] == ["near", "mid"]
    distances = [r.distance_km for r in results]
    assert distances == sorted(distances)
    assert all(d <= 5 for d in distances)

    limited = find_nearby(STUDENT_CENTER, candidates, _table_lookup(table), radius_km=100, limit=2)
    assert len(limited) == 2


def test_find_nearby_skips_candidates_without_location():
    table = {"known": Coordinate(40.5010, -74.4470)}
    candidates = _candidates(["ghost", "known", "phantom"])

    results = find_nearby(STUDENT_CENTER, candidates, _table_lookup(table), radius_km=5, limit=10)

    assert [r.candidate.id for r in results] == ["known"]


def test_find_nearby_ties_keep_input_order():
    spot = Coordinate(40.5020, -74.4480)
    table = {"b": spot, "a": spot, "c": spot}
    candidates = _candidates(["b", "a", "c"])

    results = find_nearby(STUDENT_CENTER, candidates, _table_lookup(table), radius_km=5, limit=10)

    assert [r.candidate.id for r in results] == ["b", "a", "c"]


def test_find_nearby_compares_rounded_distance():
    # На экваторе расстояние = R * dlon: 1.00409 км и 1.00631 км
    origin = Coordinate(0.0, 0.0)
    table = {
        "rounds_down": Coordinate(0.0, 0.00903),
        "rounds_up": Coordinate(0.0, 0.00905),
    }
    assert haversine_km(origin, table["rounds_down"]) > 1.0

    results = find_nearby(origin, _candidates(["rounds_up", "rounds_down"]), _table_lookup(table), radius_km=1.0)

    assert [r.candidate.id for r in results] == ["rounds_down"]
    assert results[0].distance_km == 1.0


def test_find_nearby_empty_inputs():
    assert find_nearby(STUDENT_CENTER, [], _table_lookup({}), radius_km=5, limit=10) == []


@pytest.mark.parametrize("origin", [Coordinate(91, 0), Coordinate(0, -181), Coordinate(-90.5, 10)])
def test_find_nearby_rejects_out_of_range_origin(origin):
    with pytest.raises(InvalidArgument):
        find_nearby(origin, _candidates(["truck_001"]), StaticCoordinateSource().lookup)


def test_parse_origin_rejects_non_numeric_and_nan():
    with pytest.raises(InvalidArgument, match="required"):
        parse_origin("abc", "-74.4")
    with pytest.raises(InvalidArgument):
        parse_origin("nan", "-74.4")
    with pytest.raises(InvalidArgument):
        parse_origin(None, None)
    with pytest.raises(InvalidArgument, match="Invalid latitude"):
        parse_origin("95", "10")


def test_parse_origin_accepts_strings():
    assert parse_origin("40.5007", " -74.4474 ") == STUDENT_CENTER


def test_parse_optional_origin():
    assert parse_optional_origin(None, "") is None
    assert parse_optional_origin("40.5", "-74.4") == Coordinate(40.5, -74.4)
    with pytest.raises(InvalidArgument):
        parse_optional_origin("40.5", None)


@pytest.mark.parametrize("raw, expected", [(None, 5.0), ("", 5.0), ("abc", 5.0), ("0", 5.0), ("2.5", 2.5), (12, 12.0)])
def test_parse_radius_defaults(raw, expected):
    assert parse_radius(raw) == expected


@pytest.mark.parametrize("raw, expected", [(None, 10), ("x", 10), ("0", 10), ("-3", 10), ("3", 3), ("7.9", 7)])
def test_parse_limit_defaults(raw, expected):
    assert parse_limit(raw) == expected


def _cuisine_fixture():
    table = {
        "taco_far": Coordinate(40.5100, -74.4550),
        "taco_near": Coordinate(40.5010, -74.4470),
        "taco_mid": Coordinate(40.5050, -74.4520),
        "pizza": Coordinate(40.5007, -74.4474),
    }
    candidates = [
        TruckCandidate(id="taco_far", rating=4.9, tags=("Mexican", "Tacos")),
        TruckCandidate(id="taco_near", rating=3.1, tags=("Mexican",)),
        TruckCandidate(id="pizza", rating=5.0, tags=("Italian",)),
        TruckCandidate(id="taco_mid", rating=4.2, tags=("Mexican",)),
        TruckCandidate(id="taco_nowhere", rating=4.5, tags=("Mexican",)),
    ]
    return candidates, _table_lookup(table)


def test_rank_by_cuisine_without_origin_sorts_by_rating():
    candidates, lookup = _cuisine_fixture()

    results = rank_by_cuisine(candidates, "Mexican", lookup)

    assert [r.candidate.id for r in results] == ["taco_far", "taco_nowhere", "taco_mid", "taco_near"]
    assert all(r.distance_km is None for r in results)


def test_rank_by_cuisine_with_origin_sorts_by_distance_only():
    candidates, lookup = _cuisine_fixture()

    results = rank_by_cuisine(candidates, "Mexican", lookup, origin=STUDENT_CENTER)

    ids = [r.candidate.id for r in results]
    assert ids[:3] == ["taco_near", "taco_mid", "taco_far"]
    distances = [r.distance_km for r in results[:3]]
    assert distances == sorted(distances)
    # Трак без координат остается в выдаче, но после всех с расстоянием
    assert ids[-1] == "taco_nowhere"
    assert results[-1].distance_km is None


def test_rank_by_cuisine_is_case_sensitive():
    candidates, lookup = _cuisine_fixture()

    assert rank_by_cuisine(candidates, "mexican", lookup) == []


def test_rank_by_cuisine_rejects_invalid_origin():
    candidates, lookup = _cuisine_fixture()

    with pytest.raises(InvalidArgument):
        rank_by_cuisine(candidates, "Mexican", lookup, origin=Coordinate(math.inf, 0))
