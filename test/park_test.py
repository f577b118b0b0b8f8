import logging
from datetime import timedelta

from themepark.bookings.ledger import LoadStatus
from themepark.config import DEFAULTS
from themepark.core import MembershipType
from themepark.park.park import Park


def test_book_ride_for_eligible_visitor(park, make_visitor, clock):
    guest = make_visitor(1, age=17)
    when = clock.now() + timedelta(days=1)

    booking = park.book_ride(guest, "R001", when)

    assert booking is not None
    assert booking.ride is park.rides.lookup("R001")
    assert park.bookings.find_by_visitor_id("VIS-1") == [booking]


def test_book_ride_refuses_ineligible_visitor(park, make_visitor, clock, caplog):
    child = make_visitor(2, age=8)
    assert park.book_ride(child, "R001", clock.now() + timedelta(days=1)) is None
    assert len(park.bookings) == 0
    assert "does not meet the Thrill ride age rule" in caplog.text
    assert park.book_ride(child, "R003", clock.now() + timedelta(days=1)) is not None


def test_book_unknown_ride(park, make_visitor, clock, caplog):
    assert park.book_ride(make_visitor(1), "R404", clock.now() + timedelta(days=1)) is None
    assert "ride R404 does not exist" in caplog.text


def test_join_ride_queue(park, make_visitor):
    assert park.join_ride_queue(make_visitor(1, age=30), "R001") is True
    assert park.join_ride_queue(make_visitor(2, age=30), "R003") is False
    assert park.join_ride_queue(make_visitor(3), "R404") is False
    assert len(park.rides.lookup("R001").waiting_queue) == 1


def test_cancel_then_save_and_load(park, make_visitor, clock, tmp_path):
    path = str(tmp_path / "data" / "bookings.dat")
    a = park.book_ride(make_visitor(1, membership=MembershipType.GOLD), "R002",
                       clock.now() + timedelta(hours=2))
    park.book_ride(make_visitor(2), "R002", clock.now() + timedelta(hours=1))
    assert park.bookings.active_count() == 2

    assert park.cancel_booking(a.booking_id) is a
    assert park.bookings.active_count() == 1
    assert park.bookings.find_by_visitor_id("VIS-1") == []
    assert park.save_bookings(path) is True

    again = Park.from_config({**DEFAULTS, "metrics": {"enabled": False}}, clock)
    assert again.load_bookings(path) is LoadStatus.LOADED
    restored = {b.booking_id: b for b in again.bookings}
    assert restored[a.booking_id].is_cancelled is True
    assert again.bookings.active_count() == 1
    assert restored[a.booking_id].ride is again.rides.lookup("R002")


def test_from_config_records_events(tmp_path, make_visitor, clock):
    cfg = {**DEFAULTS, "metrics": {"enabled": True, "out_dir": str(tmp_path)}}
    park = Park.from_config(cfg, clock)

    ship = park.rides.lookup("R002")
    ship.enqueue(make_visitor(1))
    ship.run_one_cycle()
    booking = park.book_ride(make_visitor(2), "R002", clock.now() + timedelta(days=1))
    park.cancel_booking(booking.booking_id)

    events = [row["event"] for row in park.metrics.read_events()]
    assert events == ["queue_join", "ride_board", "booking", "booking_cancel"]
    park.close()


def test_from_config_uses_configured_rides(clock):
    cfg = {**DEFAULTS, "metrics": {"enabled": False},
           "rides": [{"id": "Z1", "name": "Zipper", "max_rider": 2, "type": "THRILL"}]}
    park = Park.from_config(cfg, clock)
    assert [r.ride_id for r in park.rides.rides()] == ["Z1"]
    assert park.metrics is None


def test_close_empties_waiting_queues(park, make_visitor, caplog):
    caplog.set_level(logging.INFO)
    park.join_ride_queue(make_visitor(1), "R002")
    park.join_ride_queue(make_visitor(2), "R002")

    park.close()

    assert park.rides.lookup("R002").waiting_queue == ()
    assert "2 visitors left the queue" in caplog.text
