import logging
import os
from datetime import datetime
from typing import Optional

from themepark.bookings.booking import Booking
from themepark.bookings.ledger import BookingLedger
from themepark.core import Clock, IdGenerator
from themepark.metrics_recorder import MetricsRecorder
from themepark.park.ride_pool import RidePool
from themepark.visitors.base import Visitor

logger = logging.getLogger(__name__)


class Park:
    """
    Everything a caller needs to operate the park: rides, bookings, clock, event log.
    Built once at startup and passed to whoever needs it.
    """

    def __init__(self, rides: RidePool, bookings: BookingLedger,
                 clock: Optional[Clock] = None, metrics: Optional[MetricsRecorder] = None):
        self.rides = rides
        self.bookings = bookings
        self.clock = clock or Clock()
        self.metrics = metrics

    @classmethod
    def from_config(cls, cfg: dict, clock: Optional[Clock] = None) -> "Park":
        clock = clock or Clock()
        metrics = None
        metrics_cfg = cfg.get("metrics", {})
        if metrics_cfg.get("enabled", False):
            metrics = MetricsRecorder(out_dir=metrics_cfg.get("out_dir", "results"), clock=clock)
        rides = RidePool(cfg.get("rides") or None, metrics=metrics, ids=IdGenerator(clock))
        bookings = BookingLedger(ride_pool=rides)
        return cls(rides, bookings, clock, metrics)

    # ---- ride operations ----
    def join_ride_queue(self, visitor: Visitor, ride_id: str) -> bool:
        ride = self.rides.lookup(ride_id)
        if ride is None:
            logger.error("Cannot queue visitor %s: ride %s does not exist",
                         visitor.visitor_id, ride_id)
            return False
        return ride.enqueue(visitor)

    # ---- booking workflow ----
    def book_ride(self, visitor: Visitor, ride_id: str, booking_time: datetime) -> Optional[Booking]:
        ride = self.rides.lookup(ride_id)
        if ride is None:
            logger.error("Booking failed: ride %s does not exist", ride_id)
            return None
        if not ride.check_visitor_eligibility(visitor):
            logger.error("Booking failed: %s does not meet the %s ride age rule",
                         visitor.name, ride.ride_type.value)
            return None

        booking = Booking(visitor, ride, booking_time, clock=self.clock)
        if not self.bookings.add(booking):
            return None
        if self.metrics is not None:
            self.metrics.record_booking(booking.booking_id, ride.ride_id, visitor.visitor_id)
        return booking

    def cancel_booking(self, booking_id: str) -> Optional[Booking]:
        booking = self.bookings.cancel_by_id(booking_id)
        if booking is not None and self.metrics is not None:
            self.metrics.record_cancel(booking.booking_id, booking.ride.ride_id,
                                       booking.visitor.visitor_id)
        return booking

    # ---- persistence ----
    def load_bookings(self, path: str):
        status = self.bookings.load(path)
        logger.info("Park ready | active bookings: %d", self.bookings.active_count())
        return status

    def save_bookings(self, path: str) -> bool:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        return self.bookings.save(path)

    def close(self):
        """Send everyone still waiting home and close the event log."""
        for ride in self.rides.rides():
            waiting = ride.queue.size()
            if waiting:
                ride.queue.clear()
                logger.info("Ride [%s] closed; %d visitors left the queue", ride.name, waiting)
        if self.metrics is not None:
            self.metrics.close()
