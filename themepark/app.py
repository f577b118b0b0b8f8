"""
Scripted walk-through of the park: queue, history, sorting, cycles,
CSV export/import and bookings. Loads bookings at start, saves them at exit.
"""

import logging
from datetime import timedelta

from themepark.config import DEFAULT_CONFIG_PATH, load_config
from themepark.core import Clock, MembershipType, RideType
from themepark.facilities.ride import Ride
from themepark.logger import configure_logging
from themepark.park.park import Park
from themepark.park.visitor_factory import register_employee, register_visitor
from themepark.validation import parse_booking_time, require_int_range
from themepark.visitors.base import Visitor, sort_visitors

logger = logging.getLogger(__name__)


def demo_queue(park: Park) -> Ride:
    logger.info("=== Waiting queue ===")
    coaster = park.rides.get_default_ride("R001")
    for i in range(1, 6):
        membership = (MembershipType.PLATINUM if i % 3 == 0
                      else MembershipType.GOLD if i % 2 == 0 else MembershipType.STANDARD)
        coaster.enqueue(Visitor(f"PERSON-Q-{i}", f"Guest {i}", 18 + i, f"VIS-Q-{i}",
                                membership, i % 2 == 0))
    coaster.dequeue_front()
    coaster.print_queue()
    return coaster


def demo_history() -> Ride:
    logger.info("=== Ride history ===")
    storm = Ride("RIDE002", "Thunderstorm", None, 6)
    target = None
    for i in range(1, 6):
        visitor = Visitor(f"PERSON-H-{i}", f"History guest {i}", 20 + i, f"VIS-H-{i}")
        storm.add_to_history(visitor)
        if i == 3:
            target = visitor
    storm.is_in_history(target)
    storm.is_in_history(register_visitor("Walk-in", 30))
    storm.number_of_visitors()
    storm.print_ride_history()
    return storm


def demo_sort() -> Ride:
    logger.info("=== Sorting history ===")
    flume = Ride("RIDE003", "Log Flume", None, 8)
    guests = [
        Visitor("P-S-1", "Li", 25, "VIS-S-1", MembershipType.GOLD, True),
        Visitor("P-S-2", "Wang", 20, "VIS-S-2", MembershipType.PLATINUM, False),
        Visitor("P-S-3", "Zhao", 30, "VIS-S-3", MembershipType.STANDARD, True),
        Visitor("P-S-4", "Sun", 22, "VIS-S-4", MembershipType.GOLD, False),
        Visitor("P-S-5", "Zhou", 19, "VIS-S-5", MembershipType.PLATINUM, True),
    ]
    for guest in guests:
        flume.add_to_history(guest)
    logger.info("Expected order: %s", ", ".join(v.name for v in sort_visitors(guests)))
    flume.sort_history()
    flume.print_ride_history()
    return flume


def demo_cycle(park: Park) -> Ride:
    logger.info("=== Running a cycle ===")
    operator = register_employee("Captain Li", 35, "Pirate ship operator", ids=park.rides.ids)
    ship = Ride("R002-DEMO", "Pirate Ship (demo)", operator, 5, RideType.FAMILY, park.metrics)
    for i in range(1, 11):
        ship.enqueue(Visitor(f"PERSON-C-{i}", f"Cycle guest {i}", 10 + i, f"VIS-C-{i}",
                             MembershipType.STANDARD, i % 3 == 0))
    ship.run_one_cycle()
    ship.print_queue()
    ship.print_ride_history()
    return ship


def demo_export_import(ride: Ride, path: str) -> Ride:
    logger.info("=== Export and import ===")
    ride.export_history(path)
    copy = Ride("R002-IMPORT", "Pirate Ship (imported)", None, 5, RideType.FAMILY)
    copy.import_history(path)
    copy.import_history(path)  # second run adds nobody
    copy.print_ride_history()
    return copy


def demo_bookings(park: Park, min_advance_minutes: int):
    logger.info("=== Bookings ===")
    # answers as a guest would type them
    when = (park.clock.now() + timedelta(days=1)).strftime("%Y-%m-%d %H:%M")
    try:
        guest_age = require_int_range("17", 0, 120, "Age")
        child_age = require_int_range(" 8 ", 0, 120, "Age")
        booking_time = parse_booking_time(when, park.clock, min_advance_minutes)
    except ValueError as e:
        logger.error("Invalid input: %s", e)
        return

    guest = register_visitor("Chen", guest_age, MembershipType.GOLD, ids=park.rides.ids)
    child = register_visitor("Mia", child_age, ids=park.rides.ids)

    booking = park.book_ride(guest, "R001", booking_time)
    park.book_ride(child, "R001", booking_time)  # too young for the coaster
    park.book_ride(child, "R003", booking_time + timedelta(hours=1))
    park.bookings.print_all_bookings()

    if booking is not None:
        mine = park.bookings.find_by_visitor_id(guest.visitor_id)
        logger.info("%s has %d active booking(s)", guest.name, len(mine))
        park.cancel_booking(booking.booking_id)
        park.cancel_booking(booking.booking_id)  # already cancelled
    park.bookings.print_all_bookings()


def run_demo(park: Park, cfg: dict):
    demo_queue(park)
    demo_history()
    demo_sort()
    ship = demo_cycle(park)
    demo_export_import(ship, cfg["files"]["history_export"])
    demo_bookings(park, cfg["booking"]["min_advance_minutes"])


def main(config_path: str = DEFAULT_CONFIG_PATH):
    cfg = load_config(config_path)
    configure_logging(cfg["logging"]["level"], cfg["logging"].get("file"))

    logger.info("Starting theme park operations")
    park = Park.from_config(cfg, Clock())
    park.load_bookings(cfg["files"]["bookings"])

    try:
        run_demo(park, cfg)
    finally:
        park.save_bookings(cfg["files"]["bookings"])
        if park.metrics is not None:
            park.metrics.generate_ridership_graph()
        park.close()
    logger.info("Theme park operations finished")
