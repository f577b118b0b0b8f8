from themepark.core import RideType
from themepark.facilities.ride_instances import Carousel, PirateShip, RollerCoaster
from themepark.park.ride_pool import RidePool


def test_pool_is_seeded_on_first_access():
    pool = RidePool()
    assert pool._rides == {}
    assert len(pool) == 3
    assert sorted(r.ride_id for r in pool.rides()) == ["R001", "R002", "R003"]


def test_default_rides_and_their_rules():
    pool = RidePool()
    coaster, ship, carousel = (pool.lookup(i) for i in ("R001", "R002", "R003"))

    assert isinstance(coaster, RollerCoaster)
    assert (coaster.ride_type, coaster.max_rider) == (RideType.THRILL, 4)
    assert isinstance(ship, PirateShip)
    assert (ship.ride_type, ship.max_rider) == (RideType.FAMILY, 5)
    assert isinstance(carousel, Carousel)
    assert (carousel.ride_type, carousel.max_rider) == (RideType.KIDDIE, 3)
    assert all(r.operator is not None for r in (coaster, ship, carousel))


def test_lookup_returns_the_same_instance():
    pool = RidePool()
    assert pool.lookup("R001") is pool.lookup("R001")
    assert "R002" in pool
    assert "R999" not in pool


def test_get_ride_creates_missing_ride_with_operator():
    pool = RidePool()
    ride = pool.get_ride("R010", "Drop Tower", 6, RideType.THRILL)

    assert ride.name == "Drop Tower"
    assert ride.max_rider == 6
    assert ride.operator is not None
    assert pool.lookup("R010") is ride
    assert pool.get_ride("R010", "Other name", 1) is ride
    assert len(pool) == 4


def test_get_default_ride_falls_back_to_coaster(caplog):
    pool = RidePool()
    assert pool.get_default_ride("R002").ride_id == "R002"
    assert pool.get_default_ride("nope").ride_id == "R001"
    assert "falling back to R001" in caplog.text


def test_pool_seeded_from_config():
    pool = RidePool([
        {"id": "A1", "name": "Swings", "max_rider": 8, "type": "family",
         "operator": {"name": "Kim", "age": 28, "position": "Swings operator"}},
        {"id": "A2", "name": "Tiny Train", "max_rider": 2, "type": "KIDDIE"},
    ])
    assert sorted(r.ride_id for r in pool.rides()) == ["A1", "A2"]
    swings = pool.lookup("A1")
    assert swings.ride_type is RideType.FAMILY
    assert swings.operator.name == "Kim"
    assert pool.lookup("A2").operator is None
