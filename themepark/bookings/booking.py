import logging
from datetime import datetime
from typing import Optional

from themepark.core import Clock, IdGenerator
from themepark.facilities.ride import Ride
from themepark.visitors.base import Visitor

logger = logging.getLogger(__name__)

TIME_FORMAT = "%Y-%m-%d %H:%M"


class Booking:
    """A scheduled visit by one visitor to one ride. Never deleted, only cancelled."""

    def __init__(self, visitor: Visitor, ride: Ride, booking_time: datetime,
                 clock: Optional[Clock] = None):
        self.clock = clock or Clock()
        self._booking_id = IdGenerator(self.clock).next("BOOK")
        self._visitor = visitor
        self._ride = ride
        self._booking_time = booking_time
        self._is_cancelled = False

    @property
    def booking_id(self) -> str:
        return self._booking_id

    @property
    def visitor(self) -> Visitor:
        return self._visitor

    @property
    def ride(self) -> Ride:
        return self._ride

    @property
    def booking_time(self) -> datetime:
        return self._booking_time

    @booking_time.setter
    def booking_time(self, value: datetime):
        if value > self.clock.now():
            self._booking_time = value
        else:
            logger.error("Booking time %s must be later than now; keeping %s",
                         value.strftime(TIME_FORMAT), self._booking_time.strftime(TIME_FORMAT))

    @property
    def is_cancelled(self) -> bool:
        return self._is_cancelled

    def cancel(self):
        self._is_cancelled = True
        logger.info("Booking [%s] cancelled", self._booking_id)

    def attach_ride(self, ride: Ride):
        """Point the booking at a live ride instance with the same id."""
        if ride.ride_id != self._ride.ride_id:
            raise ValueError(f"ride {ride.ride_id} does not match booking ride {self._ride.ride_id}")
        self._ride = ride

    def describe(self) -> str:
        return "Booking %s | visitor: %s | ride: %s | time: %s | status: %s" % (
            self._booking_id,
            self._visitor.name,
            self._ride.name,
            self._booking_time.strftime(TIME_FORMAT),
            "cancelled" if self._is_cancelled else "active",
        )

    def __repr__(self):
        return (f"Booking(booking_id={self._booking_id!r}, visitor={self._visitor.visitor_id!r}, "
                f"ride={self._ride.ride_id!r}, cancelled={self._is_cancelled})")
