from datetime import datetime, timedelta

from app.models.location_ping import TruckLocationPing
from app.services.coordinates import (
    ChainedCoordinateSource,
    PingCoordinateSource,
    StaticCoordinateSource,
)
from app.services.proximity import Coordinate


def test_static_source_covers_the_twenty_demo_trucks():
    source = StaticCoordinateSource()

    assert source.lookup("truck_001") == Coordinate(40.5007, -74.4474)
    assert source.lookup("truck_020") == Coordinate(40.5035, -74.4505)
    assert source.lookup("truck_021") is None
    assert source.details("truck_008").phone == "(732) 555-0108"


def test_static_source_accepts_custom_table():
    source = StaticCoordinateSource({})

    assert source.lookup("truck_001") is None


async def test_ping_source_uses_latest_ping(db, make_truck):
    await make_truck("t1")
    await make_truck("t2")
    now = datetime.utcnow()
    db.add_all(
        [
            TruckLocationPing(truck_id="t1", latitude=40.0, longitude=-74.0, recorded_at=now - timedelta(hours=2)),
            TruckLocationPing(truck_id="t1", latitude=40.5, longitude=-74.5, recorded_at=now),
            TruckLocationPing(truck_id="t2", latitude=41.0, longitude=-73.0, recorded_at=now - timedelta(hours=1)),
        ]
    )
    await db.commit()

    source = await PingCoordinateSource.load(db)

    assert source.lookup("t1") == Coordinate(40.5, -74.5)
    assert source.lookup("t2") == Coordinate(41.0, -73.0)
    assert source.lookup("t3") is None


async def test_ping_source_can_be_restricted_to_trucks(db, make_truck):
    await make_truck("t1")
    await make_truck("t2")
    db.add_all(
        [
            TruckLocationPing(truck_id="t1", latitude=40.0, longitude=-74.0),
            TruckLocationPing(truck_id="t2", latitude=41.0, longitude=-73.0),
        ]
    )
    await db.commit()

    source = await PingCoordinateSource.load(db, truck_ids=["t2"])

    assert source.lookup("t1") is None
    assert source.lookup("t2") == Coordinate(41.0, -73.0)


def test_chained_source_prefers_first_match():
    pings = PingCoordinateSource({"truck_001": Coordinate(40.6, -74.3)})
    chained = ChainedCoordinateSource(pings, StaticCoordinateSource())

    assert chained.lookup("truck_001") == Coordinate(40.6, -74.3)
    assert chained.lookup("truck_002") == Coordinate(40.5050, -74.4520)
    assert chained.lookup("unknown") is None
